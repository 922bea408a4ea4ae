"""Pre-receive gate: resolve changed paths, evaluate karma, decide."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from pushkarma.git.resolver import RangeDiff, parse_ref_updates, resolve
from pushkarma.hook.verdict import Verdict, accept, cannot_determine, deny
from pushkarma.karma.evaluator import unavailable
from pushkarma.karma.types import Directive

logger = logging.getLogger(__name__)


def run_gate(
    lines: Iterable[str],
    *,
    username: str | None,
    prefix: str,
    directives: Sequence[Directive],
    range_diff: RangeDiff,
) -> Verdict:
    """Decide one push from its raw ref-update lines."""
    updates = parse_ref_updates(lines)
    if not updates:
        logger.warning("no ref updates parsed from input")
        return cannot_determine()

    paths = resolve(prefix, updates, range_diff)
    if not paths:
        logger.warning("no changed paths resolved for %d ref update(s)", len(updates))
        return cannot_determine()

    denied = unavailable(username, paths, directives)
    if denied:
        logger.info("denied %s: %d of %d path(s) unavailable", username, len(denied), len(paths))
        return deny(denied, username)

    logger.info("accepted %s: %d path(s)", username, len(paths))
    return accept()
