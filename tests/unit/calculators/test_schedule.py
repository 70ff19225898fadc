"""Tests for service, rental and package date calculations."""

import datetime as dt

import pytest

from scuba_admin.calculators.schedule import (
    DUE_SOON_DAYS,
    ServiceStatus,
    default_return_date,
    next_service_date,
    next_service_due_date,
    package_end_date,
    service_status,
)


class TestNextServiceDate:
    """Test next_service_date."""

    def test_counts_from_last_service(self):
        result = next_service_date(
            True, 90, last_service_date=dt.date(2024, 5, 1), purchase_date=dt.date(2023, 1, 1)
        )
        assert result == dt.date(2024, 7, 30)

    def test_falls_back_to_purchase_date(self):
        assert next_service_date(True, 180, purchase_date=dt.date(2024, 1, 1)) == dt.date(
            2024, 6, 29
        )

    @pytest.mark.parametrize(
        "requires_service,interval",
        [(False, 90), (True, None), (True, 0), (True, -10)],
    )
    def test_not_scheduled(self, requires_service, interval):
        assert (
            next_service_date(requires_service, interval, purchase_date=dt.date(2024, 1, 1))
            is None
        )

    def test_no_base_date(self):
        assert next_service_date(True, 90) is None


class TestNextServiceDueDate:
    def test_adds_interval(self):
        assert next_service_due_date(dt.date(2024, 2, 28), 2) == dt.date(2024, 3, 1)

    def test_no_interval(self):
        assert next_service_due_date(dt.date(2024, 2, 28), None) is None
        assert next_service_due_date(dt.date(2024, 2, 28), 0) is None


class TestPackageEndDate:
    """Test package_end_date."""

    def test_week_package(self):
        assert package_end_date(dt.date(2024, 5, 1), 7) == dt.date(2024, 5, 7)

    def test_single_day(self):
        """Test a one-day package ends the day it starts."""
        assert package_end_date(dt.date(2024, 5, 1), 1) == dt.date(2024, 5, 1)

    def test_month_boundary(self):
        assert package_end_date(dt.date(2024, 1, 30), 5) == dt.date(2024, 2, 3)

    def test_zero_days_rejected(self):
        with pytest.raises(ValueError, match="at least one day"):
            package_end_date(dt.date(2024, 5, 1), 0)


class TestDefaultReturnDate:
    def test_day_after_checkout(self):
        assert default_return_date(dt.date(2024, 12, 31)) == dt.date(2025, 1, 1)


class TestServiceStatus:
    """Test service_status."""

    TODAY = dt.date(2024, 6, 1)

    def test_not_scheduled(self):
        assert service_status(None, self.TODAY) == ServiceStatus.NOT_SCHEDULED

    def test_due_today_is_overdue(self):
        assert service_status(self.TODAY, self.TODAY) == ServiceStatus.OVERDUE

    def test_past_is_overdue(self):
        assert service_status(dt.date(2024, 5, 1), self.TODAY) == ServiceStatus.OVERDUE

    def test_due_soon_boundary(self):
        edge = self.TODAY + dt.timedelta(days=DUE_SOON_DAYS)
        assert service_status(edge, self.TODAY) == ServiceStatus.DUE_SOON
        assert service_status(edge + dt.timedelta(days=1), self.TODAY) == ServiceStatus.OK

    def test_status_values_are_strings(self):
        assert ServiceStatus.DUE_SOON == "due_soon"
