"""Git invocation for the hook's read-only repository queries."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

MISSING_BINARY_RETURNCODE = 127


@dataclass(frozen=True)
class ExecResult:
    """Captured outcome of one git call."""

    argv: tuple[str, ...]
    cwd: Path
    returncode: int
    stdout: str
    stderr: str


class ExecError(RuntimeError):
    """Raised when git cannot be started or exits non-zero."""

    def __init__(self, result: ExecResult):
        detail = (result.stderr or result.stdout).strip()
        super().__init__(f"git failed ({result.returncode}) in {result.cwd}: {' '.join(result.argv)}\n{detail}")
        self.result = result


def run_git(args: list[str], *, repo_root: Path) -> ExecResult:
    """Run git in ``repo_root``; raise ``ExecError`` unless it succeeds.

    Output is decoded as UTF-8 with surrogate escapes so path bytes survive.
    """
    argv = ("git", *args)
    cwd = repo_root.resolve()
    logger.debug("running %s in %s", " ".join(argv), cwd)
    try:
        completed = subprocess.run(
            argv,
            cwd=cwd,
            capture_output=True,
            encoding="utf-8",
            errors="surrogateescape",
            check=False,
        )
    except OSError as exc:
        raise ExecError(ExecResult(argv, cwd, MISSING_BINARY_RETURNCODE, "", str(exc))) from exc

    result = ExecResult(argv, cwd, completed.returncode, completed.stdout, completed.stderr)
    if result.returncode != 0:
        raise ExecError(result)
    return result
