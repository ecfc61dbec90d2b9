"""Fatal error types for the push hook."""

from __future__ import annotations


class HookAbort(RuntimeError):
    """Raised when the hook cannot reach a policy decision.

    Aborts are reported as ``ERROR:`` transcript lines and always exit 1.
    """


class ConfigError(HookAbort):
    """Raised when hook configuration is missing, malformed, or invalid."""
