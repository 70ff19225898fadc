"""CLI utility functions."""

from scuba_admin.cli.utils.formatters import (
    format_details,
    format_error,
    format_info,
    format_money,
    format_page_footer,
    format_success,
    format_table,
    format_warning,
    to_json,
)
from scuba_admin.cli.utils.progress import ProgressTracker, bar_callback, create_progress_bar

__all__ = [
    "format_details",
    "format_error",
    "format_info",
    "format_money",
    "format_page_footer",
    "format_success",
    "format_table",
    "format_warning",
    "to_json",
    "ProgressTracker",
    "bar_callback",
    "create_progress_bar",
]
