"""Verdicts reported back to the pushing client."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

EXIT_ACCEPTED = 0
EXIT_DENIED = 1
EXIT_UNRESOLVED = 2
EXIT_MISCONFIGURED = 3

CANNOT_DETERMINE_MESSAGE = "pushkarma: cannot determine what was committed; push refused."


@dataclass(frozen=True)
class Verdict:
    """Accept/deny decision plus the human-readable message for the client."""

    accepted: bool
    message: str
    exit_code: int


def accept() -> Verdict:
    return Verdict(accepted=True, message="", exit_code=EXIT_ACCEPTED)


def deny(unavailable_paths: Iterable[str], username: str | None) -> Verdict:
    """Deny, listing every unavailable path on its own indented line."""
    who = username or "(unknown user)"
    lines = [f"pushkarma: {who} does not have commit access to:"]
    lines.extend(f"    {path}" for path in sorted(unavailable_paths))
    return Verdict(accepted=False, message="\n".join(lines), exit_code=EXIT_DENIED)


def cannot_determine(detail: str | None = None) -> Verdict:
    message = CANNOT_DETERMINE_MESSAGE
    if detail:
        message = f"{message}\n    {detail}"
    return Verdict(accepted=False, message=message, exit_code=EXIT_UNRESOLVED)


def misconfigured(reason: str) -> Verdict:
    return Verdict(
        accepted=False,
        message=f"pushkarma: access control is misconfigured; push refused.\n    {reason}",
        exit_code=EXIT_MISCONFIGURED,
    )
