"""pushkarma - per-path push access control for git pre-receive hooks."""

__version__ = "0.1.0"
