"""Equipment assignment and basket data models.

A BookingEquipment row assigns one piece of equipment to a booking or to a
basket (a customer's rental bundle). The equipment is either one of the
center's items or the customer's own gear, described by brand/model.
"""

import datetime as dt
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator, model_validator

from scuba_admin.models.base import ApiRecord, BaseDataModel
from scuba_admin.models.booking import Booking
from scuba_admin.models.customer import Customer
from scuba_admin.models.equipment import EquipmentItem

EquipmentSource = Literal["Center", "Customer Own"]
AssignmentStatus = Literal["Pending", "Checked Out", "Returned", "Lost"]
BasketStatus = Literal["Active", "Returned", "Lost"]


class ConflictingAssignment(ApiRecord):
    """An existing assignment that overlaps requested rental dates."""

    id: Optional[int] = None
    customer_name: Optional[str] = None
    checkout_date: Optional[str] = None
    return_date: Optional[str] = None
    basket_no: Optional[str] = None
    assignment_status: Optional[str] = None


class BookingEquipment(ApiRecord):
    """An equipment assignment as returned by the API."""

    id: int
    booking_id: Optional[int] = None
    basket_id: Optional[int] = None
    booking: Optional[Booking] = None
    equipment_item_id: Optional[int] = None
    equipment_item: Optional[EquipmentItem] = None
    price: Optional[Decimal] = None
    checkout_date: Optional[str] = None
    return_date: Optional[str] = None
    actual_return_date: Optional[str] = None
    equipment_source: Optional[str] = None
    customer_equipment_type: Optional[str] = None
    customer_equipment_brand: Optional[str] = None
    customer_equipment_model: Optional[str] = None
    customer_equipment_serial: Optional[str] = None
    customer_equipment_notes: Optional[str] = None
    assignment_status: Optional[str] = None
    damage_reported: Optional[bool] = None
    damage_description: Optional[str] = None
    damage_cost: Optional[Decimal] = None
    charge_customer: Optional[bool] = None
    damage_charge_amount: Optional[Decimal] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def display_name(self) -> str:
        """Equipment name and size, or the customer's own gear type and brand."""
        item = self.equipment_item
        if item is not None and item.equipment is not None and item.equipment.name:
            return f"{item.equipment.name} - {item.size}" if item.size else item.equipment.name
        if self.customer_equipment_type:
            if self.customer_equipment_brand:
                return f"{self.customer_equipment_type} - {self.customer_equipment_brand}"
            return self.customer_equipment_type
        return "Equipment"


class BookingEquipmentForm(BaseDataModel):
    """Equipment assignment create/update form.

    Raises a validation error unless a booking or a basket is given, and
    unless center equipment names the item being handed out.
    """

    booking_id: Optional[int] = None
    basket_id: Optional[int] = None
    equipment_source: EquipmentSource = "Center"
    equipment_item_id: Optional[int] = None
    checkout_date: Optional[dt.date] = None
    return_date: Optional[dt.date] = None
    price: Optional[Decimal] = Field(None, ge=0)
    customer_equipment_type: Optional[str] = None
    customer_equipment_brand: Optional[str] = None
    customer_equipment_model: Optional[str] = None
    customer_equipment_serial: Optional[str] = None
    customer_equipment_notes: Optional[str] = None

    @model_validator(mode="after")
    def validate_assignment_target(self) -> "BookingEquipmentForm":
        """Check the booking/basket and item requirements.

        Returns:
            The validated model instance

        Raises:
            ValueError: If neither booking nor basket is set, or center
                equipment has no item
        """
        if not self.booking_id and not self.basket_id:
            raise ValueError("Either booking or basket must be provided")
        if self.equipment_source == "Center" and not self.equipment_item_id:
            raise ValueError("Equipment item is required for Center equipment")
        return self


class UnsavedBasketItem(BaseDataModel):
    """One line of a bulk basket add, before the basket and dates are applied."""

    equipment_source: EquipmentSource = "Center"
    equipment_item_id: Optional[int] = None
    price: Optional[Decimal] = Field(None, ge=0)
    customer_equipment_type: Optional[str] = None
    customer_equipment_brand: Optional[str] = None
    customer_equipment_model: Optional[str] = None
    customer_equipment_serial: Optional[str] = None
    customer_equipment_notes: Optional[str] = None


class DamageInfo(BaseDataModel):
    """Damage recorded when equipment comes back.

    Unchecking ``damage_reported`` discards the description, cost and
    charge. Checking ``charge_customer`` without an amount charges the
    repair cost when one is known.

    Example:
        >>> DamageInfo(damage_reported=False, damage_description="dent").to_payload()
        {'damage_reported': False, 'charge_customer': False}
    """

    damage_reported: bool = False
    damage_description: Optional[str] = None
    damage_cost: Optional[Decimal] = Field(None, ge=0)
    charge_customer: bool = False
    damage_charge_amount: Optional[Decimal] = None

    @model_validator(mode="before")
    @classmethod
    def clear_when_not_reported(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("damage_reported"):
            data = dict(data)
            data["charge_customer"] = False
            for key in ("damage_charge_amount", "damage_description", "damage_cost"):
                data.pop(key, None)
        return data

    @model_validator(mode="after")
    def validate_damage(self) -> "DamageInfo":
        """Check the description and charge amount rules.

        Returns:
            The validated model instance

        Raises:
            ValueError: If reported damage has no description, or the
                customer is charged without a positive amount
        """
        if self.damage_reported and not (self.damage_description or "").strip():
            raise ValueError("Damage description is required when damage is reported")

        if self.charge_customer and self.damage_charge_amount is None and self.damage_cost:
            self.__dict__["damage_charge_amount"] = self.damage_cost

        if self.charge_customer and (
            self.damage_charge_amount is None or self.damage_charge_amount <= 0
        ):
            raise ValueError("Charge amount is required when charging customer")
        return self


class AvailabilityCheck(BaseDataModel):
    """Dates requested for one equipment item."""

    equipment_item_id: int = Field(..., gt=0)
    checkout_date: dt.date
    return_date: dt.date

    @model_validator(mode="after")
    def validate_dates(self) -> "AvailabilityCheck":
        if self.return_date < self.checkout_date:
            raise ValueError("Return date cannot be before checkout date")
        return self


class AvailabilityResult(ApiRecord):
    """Server verdict on an availability check."""

    index: Optional[int] = None
    equipment_item_id: Optional[int] = None
    checkout_date: Optional[str] = None
    return_date: Optional[str] = None
    available: bool
    conflicting_assignments: List[ConflictingAssignment] = Field(default_factory=list)

    @field_validator("conflicting_assignments", mode="before")
    @classmethod
    def null_conflicts(cls, v):
        return v or []


class BulkCreateFailure(ApiRecord):
    index: Optional[int] = None
    item: Dict[str, Any] = Field(default_factory=dict)
    error: Optional[str] = None
    equipment_item_id: Optional[int] = None
    checkout_date: Optional[str] = None
    return_date: Optional[str] = None
    conflicting_assignments: List[ConflictingAssignment] = Field(default_factory=list)

    @field_validator("conflicting_assignments", mode="before")
    @classmethod
    def null_conflicts(cls, v):
        return v or []


class BulkCreateResult(ApiRecord):
    """Server answer to ``/booking-equipment/bulk``."""

    message: Optional[str] = None
    success_count: int = 0
    failed_count: int = 0
    success: List[BookingEquipment] = Field(default_factory=list)
    failed: List[BulkCreateFailure] = Field(default_factory=list)


class BulkReturnResult(ApiRecord):
    message: Optional[str] = None
    equipment: List[BookingEquipment] = Field(default_factory=list)


class EquipmentBasket(ApiRecord):
    """A customer's rental basket as returned by the API."""

    id: int
    dive_center_id: Optional[int] = None
    customer_id: Optional[int] = None
    booking_id: Optional[int] = None
    basket_no: Optional[str] = None
    center_bucket_no: Optional[str] = None
    checkout_date: Optional[str] = None
    expected_return_date: Optional[str] = None
    actual_return_date: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None
    customer: Optional[Customer] = None
    booking: Optional[Booking] = None
    booking_equipment: List[BookingEquipment] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("booking_equipment", mode="before")
    @classmethod
    def null_equipment(cls, v):
        return v or []


class BasketForm(BaseDataModel):
    """Basket create form."""

    customer_id: int = Field(..., gt=0)
    booking_id: Optional[int] = None
    center_bucket_no: Optional[str] = None
    expected_return_date: Optional[dt.date] = None
    notes: Optional[str] = None


class BasketUpdateForm(BaseDataModel):
    center_bucket_no: Optional[str] = None
    expected_return_date: Optional[dt.date] = None
    status: Optional[BasketStatus] = None
    notes: Optional[str] = None
