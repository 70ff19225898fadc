"""Dive log data models."""

import datetime as dt
from decimal import Decimal
from typing import Literal, Optional

from pydantic import Field, field_validator, model_validator

from scuba_admin.calculators.time_utils import dive_duration_minutes, parse_time
from scuba_admin.models.base import ApiRecord, BaseDataModel
from scuba_admin.models.customer import Customer

DiveType = Literal[
    "Recreational", "Training", "Technical", "Night", "Wreck", "Cave", "Drift", "Other"
]
GasMix = Literal["Air", "Nitrox", "Trimix"]


class DiveLog(ApiRecord):
    """A logged dive as returned by the API."""

    id: int
    dive_center_id: Optional[int] = None
    customer_id: Optional[int] = None
    dive_site_id: Optional[int] = None
    dive_date: Optional[str] = None
    entry_time: Optional[str] = None
    exit_time: Optional[str] = None
    total_dive_time: Optional[int] = None
    max_depth: Optional[Decimal] = None
    boat_id: Optional[int] = None
    dive_type: Optional[str] = None
    instructor_id: Optional[int] = None
    visibility: Optional[Decimal] = None
    visibility_unit: Optional[str] = None
    current: Optional[Decimal] = None
    current_unit: Optional[str] = None
    tank_size: Optional[Decimal] = None
    tank_size_unit: Optional[str] = None
    gas_mix: Optional[str] = None
    starting_pressure: Optional[Decimal] = None
    ending_pressure: Optional[Decimal] = None
    pressure_unit: Optional[str] = None
    notes: Optional[str] = None
    customer: Optional[Customer] = None
    dive_site: Optional[dict] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def site_name(self) -> str:
        if self.dive_site and self.dive_site.get("name"):
            return str(self.dive_site["name"])
        return "-"


class DiveLogForm(BaseDataModel):
    """Dive log create/update form.

    The exit time may fall after midnight; an exit earlier than the entry
    counts as the next day. ``total_dive_time`` is computed from the two
    times unless given.

    Example:
        >>> form = DiveLogForm(
        ...     customer_id=1, dive_site_id=2, dive_date=dt.date(2024, 3, 9),
        ...     entry_time="09:10", exit_time="09:58", max_depth=Decimal("18.5"),
        ... )
        >>> form.total_dive_time
        48
    """

    customer_id: int = Field(..., gt=0)
    dive_site_id: int = Field(..., gt=0)
    dive_date: dt.date
    entry_time: dt.time
    exit_time: dt.time
    total_dive_time: Optional[int] = Field(None, ge=1)
    max_depth: Decimal = Field(..., gt=0)
    boat_id: Optional[int] = None
    dive_type: DiveType = "Recreational"
    instructor_id: Optional[int] = None
    visibility: Optional[Decimal] = Field(None, ge=0)
    visibility_unit: Optional[Literal["meters", "feet"]] = None
    current: Optional[Decimal] = Field(None, ge=0)
    current_unit: Optional[Literal["knots", "m/s"]] = None
    tank_size: Optional[Decimal] = Field(None, gt=0)
    tank_size_unit: Optional[Literal["liters", "cubic_feet"]] = None
    gas_mix: GasMix = "Air"
    starting_pressure: Optional[int] = Field(None, ge=0)
    ending_pressure: Optional[int] = Field(None, ge=0)
    pressure_unit: Optional[Literal["bar", "psi"]] = None
    notes: Optional[str] = None

    @field_validator("entry_time", "exit_time", mode="before")
    @classmethod
    def parse_clock_time(cls, v):
        if isinstance(v, str):
            return parse_time(v)
        return v

    @model_validator(mode="after")
    def derive_dive_time(self) -> "DiveLogForm":
        """Validate exit against entry and fill in the total dive time.

        Returns:
            The validated model instance

        Raises:
            ValueError: If exit equals entry
        """
        minutes = dive_duration_minutes(self.entry_time, self.exit_time)
        if self.total_dive_time is None:
            self.__dict__["total_dive_time"] = minutes
        return self
