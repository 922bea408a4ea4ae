"""Changed-path resolution for the ref updates of one push."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Protocol

from pushkarma.git.exec import run_git
from pushkarma.karma.types import RefUpdate

logger = logging.getLogger(__name__)

_REF_UPDATE_LINE = re.compile(r"^([0-9a-f]{40}) ([0-9a-f]{40}) (\S+)$")

# Merges are diffed against their first parent so edits made while merging are reported.
LOG_ARGS: tuple[str, ...] = (
    "-c",
    "core.quotepath=off",
    "log",
    "--format=",
    "--name-only",
    "--no-renames",
    "--diff-merges=first-parent",
    "-z",
)


class RangeDiff(Protocol):
    """Paths touched by commits reachable from ``new`` but not from ``old``."""

    def __call__(self, old: str, new: str) -> Sequence[str]: ...


class GitRangeDiff:
    """``RangeDiff`` backed by ``git log --name-only`` in a repository."""

    def __init__(self, repo_root: Path):
        self.repo_root = repo_root

    def revision_args(self, old: str, new: str) -> list[str] | None:
        update = RefUpdate(old=old, new=new, ref="")
        if update.is_delete:
            return None
        if update.is_create:
            return [new, "--not", "--all"]
        return [f"{old}..{new}"]

    def __call__(self, old: str, new: str) -> Sequence[str]:
        revisions = self.revision_args(old, new)
        if revisions is None:
            return []
        out = run_git(
            [*LOG_ARGS, *revisions],
            repo_root=self.repo_root,
        )
        # -z: names are NUL-terminated and never C-quoted; commit separators may add newlines.
        return [entry.strip("\n") for entry in out.stdout.split("\0")]


def parse_ref_updates(lines: Iterable[str]) -> list[RefUpdate]:
    """Parse ``<old> <new> <ref>`` lines, ignoring anything else."""
    updates: list[RefUpdate] = []
    for line in lines:
        match = _REF_UPDATE_LINE.match(line.rstrip("\r\n"))
        if match is None:
            logger.debug("ignoring ref update line %r", line)
            continue
        updates.append(RefUpdate(old=match.group(1), new=match.group(2), ref=match.group(3)))
    return updates


def repository_prefix(git_dir: Path) -> str:
    """Repository name used as the path prefix, e.g. ``myrepo.git/``."""
    resolved = git_dir.resolve()
    name = resolved.name
    if name == ".git":
        name = f"{resolved.parent.name}.git"
    return f"{name}/"


def resolve(
    prefix: str,
    updates: Sequence[RefUpdate],
    range_diff: RangeDiff,
) -> set[str]:
    """Return the prefixed, de-duplicated paths touched by ``updates``."""
    touched: list[str] = []
    for update in updates:
        paths = range_diff(update.old, update.new)
        logger.debug("%s %s..%s touched %d paths", update.ref, update.old[:7], update.new[:7], len(paths))
        touched.extend(paths)
    return {f"{prefix}{path}" for path in touched if path.strip()}
