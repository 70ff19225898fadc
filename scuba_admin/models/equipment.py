"""Equipment data models.

This module defines the three equipment layers the dive center tracks:

- Equipment: a catalogue type ("BCD", "Regulator") with allowed sizes/brands
- EquipmentItem: one physical, rentable unit of a type
- ServiceHistory: a maintenance record for an item

Item forms derive their next service date from the servicing interval when
none is given, the same way the item screens pre-fill it.
"""

import datetime as dt
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator, model_validator

from scuba_admin.calculators.schedule import next_service_date, next_service_due_date
from scuba_admin.models.base import ApiRecord, BaseDataModel, strip_required_text

ItemStatus = Literal["Available", "Rented", "Maintenance"]

MAX_BULK_ITEMS = 50


class Equipment(ApiRecord):
    """An equipment type as returned by the API."""

    id: int
    dive_center_id: Optional[int] = None
    name: str
    category: Optional[str] = None
    active: bool = True
    sizes: List[str] = Field(default_factory=list)
    brands: List[str] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("sizes", "brands", mode="before")
    @classmethod
    def null_list_is_empty(cls, v):
        return v or []


class EquipmentForm(BaseDataModel):
    """Equipment type create/update form."""

    name: str = Field(..., min_length=1)
    category: Optional[str] = None
    sizes: Optional[List[str]] = None
    brands: Optional[List[str]] = None
    active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str, info) -> str:
        return strip_required_text(v, info.field_name)


class EquipmentRef(ApiRecord):
    id: int
    name: Optional[str] = None
    category: Optional[str] = None


class LocationRef(ApiRecord):
    id: int
    name: Optional[str] = None


class EquipmentItem(ApiRecord):
    """A physical equipment unit as returned by the API."""

    id: int
    equipment_id: Optional[int] = None
    location_id: Optional[int] = None
    size: Optional[str] = None
    serial_no: Optional[str] = None
    inventory_code: Optional[str] = None
    brand: Optional[str] = None
    color: Optional[str] = None
    image_url: Optional[str] = None
    status: Optional[str] = None
    purchase_date: Optional[str] = None
    requires_service: Optional[bool] = None
    service_interval_days: Optional[int] = None
    last_service_date: Optional[str] = None
    next_service_date: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    equipment: Optional[EquipmentRef] = None
    location: Optional[LocationRef] = None

    @property
    def label(self) -> str:
        """Short description such as ``BCD M (INV-004)``."""
        parts = [self.equipment.name if self.equipment and self.equipment.name else f"Item {self.id}"]
        if self.size:
            parts.append(self.size)
        if self.inventory_code:
            parts.append(f"({self.inventory_code})")
        return " ".join(parts)


class EquipmentItemForm(BaseDataModel):
    """Equipment item create/update form.

    When ``requires_service`` is set with a positive interval and no
    ``next_service_date`` is given, the date is derived from the last
    service date (or the purchase date). Turning servicing off clears it.

    Example:
        >>> form = EquipmentItemForm(
        ...     equipment_id=3,
        ...     status="Available",
        ...     requires_service=True,
        ...     service_interval_days=90,
        ...     purchase_date=dt.date(2024, 1, 10),
        ... )
        >>> form.next_service_date
        datetime.date(2024, 4, 9)
    """

    equipment_id: int = Field(..., gt=0)
    location_id: Optional[int] = None
    size: Optional[str] = None
    serial_no: Optional[str] = None
    inventory_code: Optional[str] = None
    brand: Optional[str] = None
    color: Optional[str] = None
    image_url: Optional[str] = None
    status: ItemStatus = "Available"
    purchase_date: Optional[dt.date] = None
    requires_service: bool = False
    service_interval_days: Optional[int] = Field(None, ge=1)
    last_service_date: Optional[dt.date] = None
    next_service_date: Optional[dt.date] = None

    @model_validator(mode="after")
    def derive_next_service_date(self) -> "EquipmentItemForm":
        """Fill in or clear the next service date.

        Returns:
            The validated model instance
        """
        if not self.requires_service:
            if self.next_service_date is not None:
                # Direct __dict__ write avoids re-running this validator
                self.__dict__["next_service_date"] = None
            return self

        if self.next_service_date is None:
            self.__dict__["next_service_date"] = next_service_date(
                self.requires_service,
                self.service_interval_days,
                self.last_service_date,
                self.purchase_date,
            )
        return self


class EquipmentItemTemplate(BaseDataModel):
    """Values shared by every row of a bulk item creation."""

    equipment_id: int = Field(..., gt=0)
    location_id: Optional[int] = None
    status: ItemStatus = "Available"
    purchase_date: Optional[dt.date] = None
    requires_service: bool = False
    service_interval_days: Optional[int] = Field(None, ge=1)
    last_service_date: Optional[dt.date] = None
    next_service_date: Optional[dt.date] = None


class EquipmentItemRow(BaseDataModel):
    """Per-unit values of a bulk item creation."""

    size: Optional[str] = None
    serial_no: Optional[str] = None
    inventory_code: Optional[str] = None
    brand: Optional[str] = None
    color: Optional[str] = None
    image_url: Optional[str] = None

    def merge(self, template: EquipmentItemTemplate) -> EquipmentItemForm:
        """Combine this row with the shared template into a full item form."""
        values: Dict[str, Any] = template.model_dump()
        values.update(self.model_dump())
        return EquipmentItemForm(**values)


class ServiceHistory(ApiRecord):
    """A maintenance record of an equipment item."""

    id: int
    equipment_item_id: Optional[int] = None
    service_date: Optional[str] = None
    service_type: Optional[str] = None
    technician: Optional[str] = None
    service_provider: Optional[str] = None
    cost: Optional[Decimal] = None
    notes: Optional[str] = None
    parts_replaced: Optional[str] = None
    warranty_info: Optional[str] = None
    next_service_due_date: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ServiceHistoryForm(BaseDataModel):
    """Service record create/update form."""

    service_date: dt.date
    service_type: Optional[str] = None
    technician: Optional[str] = None
    service_provider: Optional[str] = None
    cost: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None
    parts_replaced: Optional[str] = None
    warranty_info: Optional[str] = None
    next_service_due_date: Optional[dt.date] = None

    def with_interval(self, interval_days: Optional[int]) -> "ServiceHistoryForm":
        """Copy of this form with the next due date derived from the item's interval.

        An explicitly entered due date is kept.
        """
        if self.next_service_due_date is not None:
            return self
        due = next_service_due_date(self.service_date, interval_days)
        return self.model_copy(update={"next_service_due_date": due})


class BulkServiceForm(BaseDataModel):
    """One service record applied to many items at once."""

    equipment_item_ids: List[int] = Field(..., min_length=1)
    service_date: dt.date
    cost: Optional[Decimal] = Field(None, ge=0)
    service_type: Optional[str] = None
    technician: Optional[str] = None
    service_provider: Optional[str] = None
    notes: Optional[str] = None
    next_service_due_date: Optional[dt.date] = None


class BulkServiceResult(ApiRecord):
    success: Optional[bool] = None
    message: Optional[str] = None
    created_count: int = 0
    records: List[ServiceHistory] = Field(default_factory=list)
    errors: List[Dict[str, Any]] = Field(default_factory=list)

    @field_validator("errors", mode="before")
    @classmethod
    def null_errors(cls, v):
        return v or []


class ImportSummary(ApiRecord):
    """Counts reported by the server for a bulk create or import."""

    message: Optional[str] = None
    success_count: int = 0
    error_count: int = 0
    results: Dict[str, List[Dict[str, Any]]] = Field(default_factory=dict)

    @property
    def errors(self) -> List[Dict[str, Any]]:
        return self.results.get("errors", [])


class ImportPreview(ApiRecord):
    """Server validation of an uploaded equipment spreadsheet."""

    valid: List[Dict[str, Any]] = Field(default_factory=list)
    duplicates: List[Dict[str, Any]] = Field(default_factory=list)
    errors: List[Dict[str, Any]] = Field(default_factory=list)
    summary: Dict[str, int] = Field(default_factory=dict)
