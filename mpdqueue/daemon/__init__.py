"""Daemon connection adapter and its search filter type."""

from .client import DEFAULT_HOST, DEFAULT_PORT, DaemonClient, SearchFilter, translate_errors

__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DaemonClient",
    "SearchFilter",
    "translate_errors",
]
