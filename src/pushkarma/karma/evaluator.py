"""Karma evaluation: ordered directives folded into a per-path disposition map.

Every requested path starts out ``unavail``. Directives are applied in list
order and the last one matching a path decides it; there is no notion of a
more specific rule winning. Evaluation is pure: no I/O, no exceptions for
data.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from functools import reduce

from pushkarma.karma.types import AvailabilityMap, Blanket, Directive, Disposition

_WILDCARD = "*"


def _match_targets(path: str) -> tuple[str, ...]:
    # Paths arrive as "<repo>/<relative>"; patterns may be written either way.
    _, sep, relative = path.partition("/")
    return (path, relative) if sep else (path,)


def prefix_matches(pattern: str, path: str) -> bool:
    """Prefix match with an implicit trailing wildcard.

    Trailing ``*`` in the pattern is absorbed by the implicit wildcard; any
    other character, an embedded ``*`` included, is matched literally.
    """
    prefix = pattern.rstrip(_WILDCARD)
    return any(target.startswith(prefix) for target in _match_targets(path))


def _matched_paths(directive: Directive, paths: Iterable[str]) -> list[str]:
    if isinstance(directive.scope, Blanket):
        return list(paths)
    return [
        path
        for path in paths
        if any(prefix_matches(pattern, path) for pattern in directive.scope.prefixes)
    ]


def _apply(username: str | None) -> Callable[[AvailabilityMap, Directive], AvailabilityMap]:
    def step(availability: AvailabilityMap, directive: Directive) -> AvailabilityMap:
        if not directive.applies_to(username):
            return availability
        for path in _matched_paths(directive, availability):
            availability[path] = directive.disposition
        return availability

    return step


def evaluate(
    username: str | None,
    paths: Iterable[str],
    directives: Sequence[Directive],
) -> AvailabilityMap:
    """Compute the final disposition of every requested path."""
    initial: AvailabilityMap = dict.fromkeys(paths, Disposition.UNAVAIL)
    return reduce(_apply(username), directives, initial)


def unavailable(
    username: str | None,
    paths: Iterable[str],
    directives: Sequence[Directive],
) -> set[str]:
    """Return the requested paths that end up ``unavail``."""
    return {
        path
        for path, disposition in evaluate(username, paths, directives).items()
        if disposition is Disposition.UNAVAIL
    }


def explain(
    username: str | None,
    path: str,
    directives: Sequence[Directive],
) -> Directive | None:
    """Return the directive that decided ``path``, or ``None`` for the default."""
    deciding: Directive | None = None
    for directive in directives:
        if directive.applies_to(username) and _matched_paths(directive, [path]):
            deciding = directive
    return deciding
