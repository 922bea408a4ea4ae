"""Karma evaluation engine."""

from pushkarma.karma.evaluator import evaluate, explain, prefix_matches, unavailable
from pushkarma.karma.parser import (
    DirectiveSourceError,
    find_malformed_lines,
    load_directives,
    parse_directive_line,
    parse_directives,
)
from pushkarma.karma.types import Blanket, Directive, Disposition, Prefixed, RefUpdate

__all__ = [
    "Blanket",
    "Directive",
    "DirectiveSourceError",
    "Disposition",
    "Prefixed",
    "RefUpdate",
    "evaluate",
    "explain",
    "find_malformed_lines",
    "load_directives",
    "parse_directive_line",
    "parse_directives",
    "prefix_matches",
    "unavailable",
]
