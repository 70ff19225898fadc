"""Output formatting utilities for CLI."""

import json
from decimal import Decimal
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import click

EMPTY = "-"


def format_success(message: str) -> str:
    """Format a success message with green color."""
    return click.style(f"✓ {message}", fg="green", bold=True)


def format_error(message: str) -> str:
    """Format an error message with red color."""
    return click.style(f"✗ {message}", fg="red", bold=True)


def format_warning(message: str) -> str:
    """Format a warning message with yellow color."""
    return click.style(f"⚠ {message}", fg="yellow", bold=True)


def format_info(message: str) -> str:
    """Format an info message with blue color."""
    return click.style(f"ℹ {message}", fg="blue")


def display(value: Any) -> str:
    """Cell text for a value; ``None`` and blanks show as a dash."""
    if value is None or value == "":
        return EMPTY
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)


def format_money(amount: Optional[Any], currency: Optional[str] = None) -> str:
    """Two-decimal amount with an optional currency code, e.g. ``120.00 USD``."""
    if amount is None:
        return EMPTY
    text = f"{Decimal(str(amount)):,.2f}"
    return f"{text} {currency}" if currency else text


def format_table(
    headers: List[str], rows: Sequence[Sequence[Any]], max_width: int = 40
) -> str:
    """Format data as a table.

    Args:
        headers: Column headers
        rows: Data rows; cells are passed through :func:`display`
        max_width: Cells wider than this are truncated with ``…``

    Returns:
        Table as a string
    """
    if not headers:
        return ""

    cells = [[display(c) for c in row] for row in rows]
    widths = [len(h) for h in headers]
    for row in cells:
        for i, cell in enumerate(row[: len(widths)]):
            widths[i] = max(widths[i], len(cell))
    widths = [min(w, max_width) for w in widths]

    def line(values: Iterable[str]) -> str:
        parts = []
        for i, value in enumerate(values):
            if i >= len(widths):
                break
            if len(value) > widths[i]:
                value = value[: widths[i] - 1] + "…"
            parts.append(f" {value:<{widths[i]}} ")
        return "|" + "|".join(parts) + "|"

    separator = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
    lines = [separator, line(headers), separator]
    if cells:
        lines.extend(line(row) for row in cells)
        lines.append(separator)
    return "\n".join(lines)


def format_details(pairs: Sequence[Tuple[str, Any]]) -> str:
    """Aligned ``label: value`` lines for a single record."""
    if not pairs:
        return ""
    width = max(len(label) for label, _ in pairs)
    return "\n".join(
        f"{click.style(label.ljust(width), bold=True)}  {display(value)}"
        for label, value in pairs
    )


def format_page_footer(page: Any, noun: str) -> str:
    """``Page 2 of 5 (93 customers)`` for a paginated result."""
    total = page.total if page.total is not None else len(page)
    footer = f"Page {page.current_page} of {page.last_page} ({total} {noun})"
    if page.has_next:
        footer += f" - use --page {page.current_page + 1} for more"
    return footer


def to_json(data: Any) -> str:
    """Pretty JSON for ``--json`` output; models are dumped with their API field names."""
    if hasattr(data, "model_dump"):
        data = data.model_dump(mode="json", by_alias=True)
    elif isinstance(data, list):
        data = [
            d.model_dump(mode="json", by_alias=True) if hasattr(d, "model_dump") else d
            for d in data
        ]
    return json.dumps(data, indent=2, default=str)
