"""Karma domain types: directives, dispositions and ref updates."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

NULL_SHA = "0" * 40


class Disposition(str, Enum):
    """Final availability of a path for the acting user."""

    AVAIL = "avail"
    UNAVAIL = "unavail"


@dataclass(frozen=True)
class Blanket:
    """Scope covering every requested path."""


@dataclass(frozen=True)
class Prefixed:
    """Scope restricted to paths matching one of the ordered prefixes."""

    prefixes: tuple[str, ...]


Scope = Blanket | Prefixed


@dataclass(frozen=True)
class Directive:
    """One parsed ACL line.

    An empty ``users`` set applies to every user, including an unknown one.
    ``lineno`` is informational; list position is what orders evaluation.
    """

    disposition: Disposition
    users: frozenset[str] = field(default_factory=frozenset)
    scope: Scope = field(default_factory=Blanket)
    lineno: int = 0

    def applies_to(self, username: str | None) -> bool:
        if not self.users:
            return True
        return username is not None and username in self.users

    def render(self) -> str:
        """Render back to ``disposition|users|prefixes`` form."""
        prefixes = self.scope.prefixes if isinstance(self.scope, Prefixed) else ()
        return f"{self.disposition.value}|{','.join(sorted(self.users))}|{','.join(prefixes)}"


@dataclass(frozen=True)
class RefUpdate:
    """One ``<old> <new> <ref>`` line from the pre-receive input."""

    old: str
    new: str
    ref: str

    @property
    def is_create(self) -> bool:
        return self.old == NULL_SHA

    @property
    def is_delete(self) -> bool:
        return self.new == NULL_SHA


AvailabilityMap = dict[str, Disposition]
