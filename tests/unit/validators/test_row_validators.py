"""Tests for bulk input row validators."""

from decimal import Decimal

import pandas as pd
import pytest

from scuba_admin.validators.row_validators import (
    normalize_column,
    read_table,
    validate_basket_rows,
    validate_damage_rows,
    validate_item_rows,
)


def frame(rows):
    return pd.DataFrame(rows, dtype=str).fillna("")


class TestReadTable:
    """Test CSV loading."""

    def test_normalizes_headers_and_keeps_text(self, tmp_path):
        path = tmp_path / "items.csv"
        path.write_text("Size, Serial No,Inventory-Code\nM,007,\n")

        df = read_table(path)

        assert list(df.columns) == ["size", "serial_no", "inventory_code"]
        assert df.loc[0, "serial_no"] == "007"
        assert df.loc[0, "inventory_code"] == ""

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("")
        with pytest.raises(ValueError, match="Could not read"):
            read_table(path)

    @pytest.mark.parametrize(
        "name,expected",
        [("Serial No", "serial_no"), (" equipment-item-id ", "equipment_item_id"), ("size", "size")],
    )
    def test_normalize_column(self, name, expected):
        assert normalize_column(name) == expected


class TestValidateItemRows:
    """Test equipment item rows."""

    def test_valid_rows(self):
        rows, report = validate_item_rows(
            frame([{"size": "S", "serial_no": "A1"}, {"size": "M", "serial_no": "A2"}])
        )
        assert report.is_valid()
        assert [r.size for r in rows] == ["S", "M"]

    def test_blank_rows_skipped(self):
        rows, report = validate_item_rows(frame([{"size": "S"}, {"size": ""}]))
        assert len(rows) == 1
        assert report.info_count == 1

    def test_duplicate_serials_flag_both_rows(self):
        rows, report = validate_item_rows(
            frame([{"serial_no": "A1"}, {"serial_no": "B2"}, {"serial_no": "A1"}])
        )
        assert rows == []
        assert report.rows_with_errors() == [1, 3]

    def test_unknown_column_warns(self):
        rows, report = validate_item_rows(frame([{"size": "S", "weight": "2kg"}]))
        assert report.is_valid()
        assert report.get_warnings()[0].field == "weight"

    def test_no_rows(self):
        rows, report = validate_item_rows(frame([{"size": ""}]))
        assert rows == []
        assert "Please add at least one equipment item" in report.format()

    def test_too_many_rows(self):
        rows, report = validate_item_rows(frame([{"size": "M"}] * 51))
        assert rows == []
        assert any("Cannot create more than 50" in i.message for i in report.get_errors())


class TestValidateBasketRows:
    """Test basket rows."""

    def test_defaults_to_center(self):
        items, report = validate_basket_rows(frame([{"equipment_item_id": "4", "price": "12.5"}]))
        assert report.is_valid()
        assert items[0].equipment_source == "Center"
        assert items[0].equipment_item_id == 4
        assert items[0].price == Decimal("12.5")

    def test_center_row_needs_item(self):
        items, report = validate_basket_rows(
            frame([{"equipment_item_id": "4"}, {"equipment_item_id": "", "price": "5"}])
        )
        assert items == []
        assert report.get_errors()[0].row == 2
        assert report.get_errors()[0].message == "Please select equipment item for all center equipment"

    def test_customer_own_needs_brand(self):
        items, report = validate_basket_rows(
            frame([{"equipment_source": "Customer Own", "customer_equipment_type": "Mask"}])
        )
        assert report.get_errors()[0].field == "customer_equipment_brand"

    def test_customer_own(self):
        items, report = validate_basket_rows(
            frame(
                [
                    {
                        "equipment_source": "Customer Own",
                        "customer_equipment_type": "Fins",
                        "customer_equipment_brand": "Mares",
                    }
                ]
            )
        )
        assert report.is_valid()
        assert items[0].customer_equipment_brand == "Mares"

    def test_bad_source(self):
        items, report = validate_basket_rows(
            frame([{"equipment_source": "Borrowed", "equipment_item_id": "4"}])
        )
        assert items == []
        assert report.get_errors()[0].field == "equipment_source"

    def test_bad_item_id(self):
        items, report = validate_basket_rows(frame([{"equipment_item_id": "four"}]))
        assert report.get_errors()[0].row == 1


class TestValidateDamageRows:
    """Test damage rows."""

    def test_parses_damage(self):
        damage, report = validate_damage_rows(
            frame(
                [
                    {
                        "equipment_id": "11",
                        "damage_description": "Cracked lens",
                        "damage_cost": "25",
                        "charge_customer": "Yes",
                    }
                ]
            ),
            equipment_ids=[11, 12],
        )
        assert report.is_valid()
        assert damage[11].damage_reported
        assert damage[11].charge_customer
        assert damage[11].damage_charge_amount == Decimal("25")

    def test_charge_flag_off(self):
        damage, _ = validate_damage_rows(
            frame([{"equipment_id": "11", "damage_description": "Scratch", "charge_customer": "no"}])
        )
        assert damage[11].charge_customer is False

    def test_missing_description(self):
        damage, report = validate_damage_rows(frame([{"equipment_id": "11", "damage_cost": "10"}]))
        assert damage == {}
        assert "Damage description is required" in report.get_errors()[0].message

    def test_not_a_number(self):
        _, report = validate_damage_rows(frame([{"equipment_id": "abc", "damage_description": "x"}]))
        assert report.get_errors()[0].message == "Equipment id must be a number"

    def test_not_being_returned(self):
        _, report = validate_damage_rows(
            frame([{"equipment_id": "13", "damage_description": "x"}]), equipment_ids=[11]
        )
        assert report.get_errors()[0].message == "Assignment is not being returned"

    def test_duplicate_assignment(self):
        _, report = validate_damage_rows(
            frame(
                [
                    {"equipment_id": "11", "damage_description": "x"},
                    {"equipment_id": "11", "damage_description": "y"},
                ]
            )
        )
        assert report.get_errors()[0].row == 2
