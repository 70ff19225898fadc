"""Tests for agent and package models."""

import datetime as dt
from decimal import Decimal

import pytest
from pydantic import ValidationError

from scuba_admin.models.agent import Agent, AgentForm
from scuba_admin.models.package import (
    Package,
    PackageBreakdown,
    PackageForm,
    PricingTierForm,
)


def agent_form(**overrides):
    values = {
        "agent_name": "Blue Travel",
        "agent_type": "Travel Agent",
        "country": "Maldives",
        "city": "Male",
    }
    values.update(overrides)
    return AgentForm(**values)


class TestAgentForm:
    """Test agent form validation."""

    def test_minimal(self):
        assert agent_form().to_payload() == {
            "agent_name": "Blue Travel",
            "agent_type": "Travel Agent",
            "country": "Maldives",
            "city": "Male",
        }

    def test_short_name(self):
        with pytest.raises(ValidationError, match="Agent name must be at least 2 characters"):
            agent_form(agent_name="B")

    def test_blank_city(self):
        with pytest.raises(ValidationError, match="city cannot be empty"):
            agent_form(city="  ")

    def test_website(self):
        assert agent_form(website="https://bluetravel.example.com").website == (
            "https://bluetravel.example.com"
        )
        assert agent_form(website="").website is None

    def test_invalid_website(self):
        with pytest.raises(ValidationError, match="Invalid website URL"):
            agent_form(website="bluetravel")

    def test_nested_sections(self):
        form = agent_form(
            contact={"contact_person_name": "Mira", "email": "mira@example.com"},
            commercial_terms={"commission_rate": "10", "currency": "USD"},
            billing_info={"invoice_email": ""},
            contract={"contract_start_date": "2024-01-01"},
        )
        payload = form.to_payload()
        assert payload["contact"] == {"contact_person_name": "Mira", "email": "mira@example.com"}
        assert payload["commercial_terms"] == {
            "commission_type": "Percentage",
            "commission_rate": 10.0,
            "currency": "USD",
            "payment_terms": "Monthly",
        }
        assert payload["billing_info"] == {}
        assert payload["contract"] == {"contract_start_date": "2024-01-01"}

    def test_unknown_type(self):
        with pytest.raises(ValidationError):
            agent_form(agent_type="Hotel")

    def test_record_null_lists(self):
        agent = Agent.model_validate({"id": 1, "agent_name": "Blue Travel", "contacts": None, "tags": None})
        assert agent.contacts == []
        assert agent.tags == []


class TestPackageForm:
    """Test package form validation."""

    def test_valid(self):
        form = PackageForm(
            package_code="PKG-7N",
            name="7 Nights Dive",
            days=7,
            base_price=Decimal("900"),
            price_per_person=Decimal("850"),
            valid_from=dt.date(2024, 1, 1),
            valid_until=dt.date(2024, 12, 31),
            pricing_tiers=[{"min_persons": 2, "max_persons": 4, "price_per_person": "800"}],
        )
        payload = form.to_payload()
        assert payload["valid_until"] == "2024-12-31"
        assert payload["pricing_tiers"] == [
            {"min_persons": 2, "max_persons": 4, "price_per_person": 800.0}
        ]

    def test_reversed_window(self):
        with pytest.raises(ValidationError, match="valid_until cannot be before valid_from"):
            PackageForm(
                package_code="PKG",
                name="Weekend",
                base_price=1,
                price_per_person=1,
                valid_from=dt.date(2024, 6, 1),
                valid_until=dt.date(2024, 5, 1),
            )

    def test_code_length(self):
        with pytest.raises(ValidationError):
            PackageForm(package_code="X" * 51, name="Weekend", base_price=1, price_per_person=1)

    def test_currency_length(self):
        with pytest.raises(ValidationError):
            PackageForm(package_code="PKG", name="Weekend", base_price=1, price_per_person=1, currency="EURO")

    def test_tier_range(self):
        with pytest.raises(ValidationError, match="max_persons cannot be less than min_persons"):
            PricingTierForm(min_persons=4, max_persons=2, price_per_person=100)

    def test_open_ended_tier(self):
        assert PricingTierForm(min_persons=5, price_per_person=90).max_persons is None


class TestPackageRecords:
    def test_defaults(self):
        package = Package.model_validate(
            {"id": 1, "package_code": "PKG", "name": "Weekend", "components": None}
        )
        assert package.components == []
        assert package.base_price == Decimal("0")

    def test_breakdown(self):
        breakdown = PackageBreakdown.model_validate(
            {
                "package": {"id": 1},
                "breakdown": [{"type": "DIVE", "name": "Boat dive", "quantity": 6, "total": "300"}],
                "total_price": "300",
            }
        )
        assert breakdown.breakdown[0].total == Decimal("300")
        assert breakdown.total_price == Decimal("300")
