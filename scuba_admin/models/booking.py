"""Booking data models."""

import datetime as dt
from typing import Any, Literal, Optional

from pydantic import Field

from scuba_admin.models.base import ApiRecord, BaseDataModel
from scuba_admin.models.customer import Customer

BookingStatus = Literal["Pending", "Confirmed", "Completed", "Cancelled"]


class Booking(ApiRecord):
    """A booking as returned by the API."""

    id: int
    dive_center_id: Optional[int] = None
    customer_id: Optional[int] = None
    customer: Optional[Customer] = None
    booking_date: Optional[str] = None
    start_date: Optional[str] = None
    number_of_divers: Optional[int] = None
    dive_site_id: Optional[int] = None
    dive_site: Optional[Any] = None
    status: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def customer_name(self) -> str:
        return self.customer.full_name if self.customer else "-"


class BookingForm(BaseDataModel):
    """Booking create form.

    Example:
        >>> BookingForm(
        ...     dive_center_id=1, customer_id=4, start_date=dt.date(2024, 6, 1)
        ... ).to_payload()["start_date"]
        '2024-06-01'
    """

    dive_center_id: int = Field(..., gt=0)
    customer_id: int = Field(..., gt=0)
    start_date: dt.date
    number_of_divers: Optional[int] = Field(None, ge=1)
    dive_site_id: Optional[int] = None
    status: Optional[BookingStatus] = None
    notes: Optional[str] = None


class BookingUpdateForm(BaseDataModel):
    """Partial booking update; only the fields given are sent."""

    dive_center_id: Optional[int] = Field(None, gt=0)
    customer_id: Optional[int] = Field(None, gt=0)
    start_date: Optional[dt.date] = None
    number_of_divers: Optional[int] = Field(None, ge=1)
    dive_site_id: Optional[int] = None
    status: Optional[BookingStatus] = None
    notes: Optional[str] = None
