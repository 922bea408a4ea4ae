"""Git access for changed-path resolution."""

from pushkarma.git.exec import ExecError, ExecResult, run_git
from pushkarma.git.resolver import GitRangeDiff, RangeDiff, parse_ref_updates, repository_prefix, resolve

__all__ = [
    "ExecError",
    "ExecResult",
    "GitRangeDiff",
    "RangeDiff",
    "parse_ref_updates",
    "repository_prefix",
    "resolve",
    "run_git",
]
