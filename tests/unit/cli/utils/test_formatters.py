"""Tests for CLI output formatters."""

import json
from decimal import Decimal

import click

from scuba_admin.cli.utils.formatters import (
    display,
    format_details,
    format_error,
    format_money,
    format_page_footer,
    format_success,
    format_table,
    to_json,
)
from scuba_admin.models.base import Page
from scuba_admin.models.file import FileInfo


class TestMessages:
    def test_success(self):
        assert click.unstyle(format_success("Saved")) == "✓ Saved"

    def test_error(self):
        assert click.unstyle(format_error("Failed")) == "✗ Failed"


class TestDisplay:
    def test_values(self):
        assert display(None) == "-"
        assert display("") == "-"
        assert display(True) == "yes"
        assert display(False) == "no"
        assert display(0) == "0"


class TestFormatMoney:
    def test_amount(self):
        assert format_money(Decimal("1234.5")) == "1,234.50"

    def test_currency(self):
        assert format_money("99", "USD") == "99.00 USD"

    def test_none(self):
        assert format_money(None, "USD") == "-"


class TestFormatTable:
    """Test table rendering."""

    def test_basic(self):
        table = format_table(["ID", "Name"], [[1, "Ana Reef"], [2, None]])
        lines = table.splitlines()
        assert lines[0] == "+----+----------+"
        assert lines[1] == "| ID | Name     |"
        assert lines[3] == "| 1  | Ana Reef |"
        assert lines[4] == "| 2  | -        |"
        assert lines[-1] == lines[0]

    def test_truncates_long_cells(self):
        table = format_table(["Note"], [["x" * 20]], max_width=10)
        assert "| xxxxxxxxx… |" in table

    def test_headers_only(self):
        assert len(format_table(["ID"], []).splitlines()) == 3

    def test_no_headers(self):
        assert format_table([], [[1]]) == ""


class TestFormatDetails:
    def test_aligned(self):
        text = click.unstyle(format_details([("ID", 1), ("Name", "Ana"), ("Email", None)]))
        assert text.splitlines() == ["ID     1", "Name   Ana", "Email  -"]

    def test_empty(self):
        assert format_details([]) == ""


class TestPageFooter:
    def test_more_pages(self, paginated):
        page = Page[dict].model_validate(paginated([{}], current_page=2, last_page=5, total=93))
        assert format_page_footer(page, "customers") == (
            "Page 2 of 5 (93 customers) - use --page 3 for more"
        )

    def test_last_page(self):
        page = Page[dict].model_validate([{}, {}])
        assert format_page_footer(page, "files") == "Page 1 of 1 (2 files)"


class TestToJson:
    def test_model_uses_aliases(self):
        data = json.loads(to_json(FileInfo(id=1, original_name="a.pdf")))
        assert data["originalName"] == "a.pdf"

    def test_list_of_models(self):
        data = json.loads(to_json([FileInfo(id=1), {"id": 2}]))
        assert [d["id"] for d in data] == [1, 2]

    def test_decimal_in_dict(self):
        assert json.loads(to_json({"total": Decimal("1.50")})) == {"total": "1.50"}
