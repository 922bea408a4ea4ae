"""Lenient parser for the ``disposition|users|prefixes`` ACL format."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from pushkarma.karma.types import Blanket, Directive, Disposition, Prefixed

logger = logging.getLogger(__name__)

_DISPOSITION_TOKENS: dict[str, Disposition] = {
    "avail": Disposition.AVAIL,
    "allow": Disposition.AVAIL,
    "unavail": Disposition.UNAVAIL,
    "deny": Disposition.UNAVAIL,
}


class DirectiveSourceError(RuntimeError):
    """Raised when the ACL file itself cannot be read."""


def _split_list(field: str) -> list[str]:
    return [item.strip() for item in field.split(",") if item.strip()]


def _is_ignorable(line: str) -> bool:
    stripped = line.strip()
    return not stripped or stripped.startswith("#")


def parse_directive_line(line: str, lineno: int = 0) -> Directive | None:
    """Parse one ACL line; ``None`` for blank, comment or malformed lines."""
    if _is_ignorable(line):
        return None

    fields = line.strip().split("|")
    if len(fields) != 3:
        return None

    disposition = _DISPOSITION_TOKENS.get(fields[0].strip().lower())
    if disposition is None:
        return None

    users = frozenset(_split_list(fields[1]))
    prefixes = tuple(dict.fromkeys(_split_list(fields[2])))
    scope = Prefixed(prefixes) if prefixes else Blanket()
    return Directive(disposition=disposition, users=users, scope=scope, lineno=lineno)


def parse_directives(lines: Iterable[str]) -> list[Directive]:
    """Parse ACL lines in file order, skipping anything unusable."""
    directives: list[Directive] = []
    for lineno, line in enumerate(lines, start=1):
        directive = parse_directive_line(line, lineno)
        if directive is None:
            if not _is_ignorable(line):
                logger.debug("skipping malformed ACL line %d: %r", lineno, line.rstrip("\n"))
            continue
        directives.append(directive)
    return directives


def find_malformed_lines(lines: Iterable[str]) -> list[tuple[int, str]]:
    """Return ``(lineno, text)`` for lines that are neither blank, comment nor valid."""
    malformed: list[tuple[int, str]] = []
    for lineno, line in enumerate(lines, start=1):
        if _is_ignorable(line):
            continue
        if parse_directive_line(line, lineno) is None:
            malformed.append((lineno, line.rstrip("\n")))
    return malformed


def read_acl_lines(path: Path) -> list[str]:
    """Read raw ACL lines, raising ``DirectiveSourceError`` on I/O failure."""
    try:
        return path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        raise DirectiveSourceError(f"unable to read ACL file {path}: {exc}") from exc


def load_directives(path: Path) -> list[Directive]:
    """Load and parse the ACL file at ``path``."""
    directives = parse_directives(read_acl_lines(path))
    logger.debug("loaded %d directives from %s", len(directives), path)
    return directives
