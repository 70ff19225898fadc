"""Date arithmetic for equipment servicing, rentals and packages.

The server stores whatever dates the client sends, so these derivations
decide the defaults staff see: when an item is next due for service, when
rented equipment comes back, and the last day of a package stay.
"""

import datetime as dt
from enum import Enum
from typing import Optional

DUE_SOON_DAYS = 30


class ServiceStatus(str, Enum):
    """Servicing state of an equipment item relative to today."""

    OVERDUE = "overdue"
    DUE_SOON = "due_soon"
    OK = "ok"
    NOT_SCHEDULED = "not_scheduled"


def next_service_date(
    requires_service: bool,
    interval_days: Optional[int],
    last_service_date: Optional[dt.date] = None,
    purchase_date: Optional[dt.date] = None,
) -> Optional[dt.date]:
    """Calculate when an equipment item is next due for service.

    The interval is counted from the last service, or from the purchase
    date when the item has never been serviced.

    Args:
        requires_service: Whether the item needs periodic servicing
        interval_days: Days between services
        last_service_date: Date of the most recent service
        purchase_date: Date the item was bought

    Returns:
        The next service date, or None when servicing is off, the interval
        is not positive, or there is no base date

    Example:
        >>> next_service_date(True, 180, purchase_date=dt.date(2024, 1, 1))
        datetime.date(2024, 6, 29)
    """
    if not requires_service or not interval_days or interval_days <= 0:
        return None

    base_date = last_service_date or purchase_date
    if base_date is None:
        return None

    return base_date + dt.timedelta(days=interval_days)


def next_service_due_date(
    service_date: dt.date, interval_days: Optional[int]
) -> Optional[dt.date]:
    """Due date of the service after the one recorded on ``service_date``."""
    if not interval_days or interval_days <= 0:
        return None
    return service_date + dt.timedelta(days=interval_days)


def package_end_date(start_date: dt.date, days: int) -> dt.date:
    """Last day of a package that starts on ``start_date`` and lasts ``days`` days.

    Raises:
        ValueError: If days is less than 1

    Example:
        >>> package_end_date(dt.date(2024, 5, 1), 7)
        datetime.date(2024, 5, 7)
    """
    if days < 1:
        raise ValueError(f"Package must last at least one day, got {days}")
    return start_date + dt.timedelta(days=days - 1)


def default_return_date(checkout_date: dt.date) -> dt.date:
    """Default return date for rented equipment: the day after checkout."""
    return checkout_date + dt.timedelta(days=1)


def service_status(
    next_date: Optional[dt.date], today: Optional[dt.date] = None
) -> ServiceStatus:
    """Classify a next service date.

    Args:
        next_date: When the item is next due, if scheduled
        today: Reference date (defaults to the current date)

    Returns:
        OVERDUE on or after the due date, DUE_SOON within 30 days,
        OK otherwise, NOT_SCHEDULED without a date
    """
    if next_date is None:
        return ServiceStatus.NOT_SCHEDULED

    today = today or dt.date.today()
    if next_date <= today:
        return ServiceStatus.OVERDUE
    if next_date <= today + dt.timedelta(days=DUE_SOON_DAYS):
        return ServiceStatus.DUE_SOON
    return ServiceStatus.OK
