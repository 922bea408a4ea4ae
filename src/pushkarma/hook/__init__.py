"""Pre-receive hook harness."""

from pushkarma.hook.config import ConfigError, HookConfig, load_config
from pushkarma.hook.gate import run_gate
from pushkarma.hook.identity import resolve_username
from pushkarma.hook.verdict import Verdict

__all__ = ["ConfigError", "HookConfig", "Verdict", "load_config", "resolve_username", "run_gate"]
