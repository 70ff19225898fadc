"""Tests for dive log models."""

import datetime as dt
from decimal import Decimal

import pytest
from pydantic import ValidationError

from scuba_admin.models.dive_log import DiveLog, DiveLogForm


def make_form(**overrides):
    values = {
        "customer_id": 1,
        "dive_site_id": 2,
        "dive_date": dt.date(2024, 3, 9),
        "entry_time": "09:10",
        "exit_time": "09:58",
        "max_depth": Decimal("18.5"),
    }
    values.update(overrides)
    return DiveLogForm(**values)


class TestDiveLogForm:
    """Test dive time derivation and validation."""

    def test_total_time_derived(self):
        assert make_form().total_dive_time == 48

    def test_night_dive(self):
        form = make_form(entry_time="23:30", exit_time="00:15", dive_type="Night")
        assert form.total_dive_time == 45

    def test_explicit_total_time_kept(self):
        assert make_form(total_dive_time=40).total_dive_time == 40

    def test_exit_equal_to_entry(self):
        with pytest.raises(ValidationError, match="Exit time must be after entry time"):
            make_form(exit_time="09:10")

    def test_bad_time(self):
        with pytest.raises(ValidationError, match="Invalid time format"):
            make_form(entry_time="9h10")

    def test_depth_positive(self):
        with pytest.raises(ValidationError):
            make_form(max_depth=0)

    def test_payload(self):
        payload = make_form(gas_mix="Nitrox").to_payload()
        assert payload["entry_time"] == "09:10"
        assert payload["exit_time"] == "09:58"
        assert payload["dive_date"] == "2024-03-09"
        assert payload["max_depth"] == 18.5
        assert payload["total_dive_time"] == 48
        assert payload["gas_mix"] == "Nitrox"
        assert payload["dive_type"] == "Recreational"

    def test_unknown_gas_rejected(self):
        with pytest.raises(ValidationError):
            make_form(gas_mix="Heliox")


class TestDiveLogRecord:
    def test_site_name(self):
        assert DiveLog(id=1, dive_site={"id": 2, "name": "Manta Point"}).site_name == "Manta Point"
        assert DiveLog(id=2).site_name == "-"
