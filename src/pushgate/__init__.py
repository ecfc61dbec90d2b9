"""Pushgate - server-side push gatekeeper for a protected branch."""

__version__ = "0.1.0"
