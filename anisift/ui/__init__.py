"""
UI Layer - Rich console output for AniSift.

This module contains the shared console, the error panels and the
tables used by the command-line interface.
"""

from anisift.ui.components import (
    create_downloads_table,
    create_episodes_table,
    create_sources_table,
)
from anisift.ui.console import get_console, setup_console, status_spinner
from anisift.ui.error_handler import (
    ErrorHandler,
    display_info,
    display_warning,
    handle_error,
)

__all__ = [
    "get_console",
    "setup_console",
    "status_spinner",
    "ErrorHandler",
    "handle_error",
    "display_warning",
    "display_info",
    "create_episodes_table",
    "create_sources_table",
    "create_downloads_table",
]
