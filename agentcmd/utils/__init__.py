"""Utilities module."""
from .formatting import (
    truncate_text,
    format_command_line,
    format_command_list,
    format_command_detail,
    format_report,
)

__all__ = [
    "truncate_text",
    "format_command_line",
    "format_command_list",
    "format_command_detail",
    "format_report",
]
