"""
User interface module for the combat core.

This module renders the combat log and session snapshots for a terminal. It
never feeds input back into a session.
"""

from .log_printer import (
    build_roster_table,
    format_result,
    format_status_line,
    print_result,
    print_results,
    print_snapshot,
)

__all__ = [
    "build_roster_table",
    "format_result",
    "format_status_line",
    "print_result",
    "print_results",
    "print_snapshot",
]
