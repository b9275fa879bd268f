# Area: Shared
"""
Shared utilities used by the core, the CLI and the watcher.

This package contains:
- Logging configuration
"""

from .logging_config import (
    setup_logging,
    log_session_error,
    TerminalFormatter,
    JSONFormatter,
)

__all__ = [
    "setup_logging",
    "log_session_error",
    "TerminalFormatter",
    "JSONFormatter",
]
