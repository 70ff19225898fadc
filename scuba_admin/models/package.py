"""Dive package data models.

A package bundles nights, days and dives at a per-person price, with
components (what is included), paid options and group pricing tiers.
"""

import datetime as dt
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator, model_validator

from scuba_admin.models.base import ApiRecord, BaseDataModel, strip_required_text

ComponentType = Literal[
    "TRANSFER", "ACCOMMODATION", "DIVE", "EXCURSION", "MEAL", "EQUIPMENT", "OTHER"
]


class PackageComponentForm(BaseDataModel):
    component_type: ComponentType
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    item_id: Optional[int] = None
    unit_price: Decimal = Field(..., ge=0)
    quantity: int = Field(..., ge=1)
    unit: Optional[str] = None
    is_inclusive: Optional[bool] = None
    sort_order: Optional[int] = None


class PackageOptionForm(BaseDataModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    item_id: Optional[int] = None
    price: Decimal = Field(..., ge=0)
    unit: Optional[str] = None
    is_active: Optional[bool] = None
    max_quantity: Optional[int] = Field(None, ge=1)
    sort_order: Optional[int] = None


class PricingTierForm(BaseDataModel):
    min_persons: int = Field(..., ge=1)
    max_persons: Optional[int] = None
    price_per_person: Decimal = Field(..., ge=0)
    discount_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    is_active: Optional[bool] = None

    @model_validator(mode="after")
    def validate_range(self) -> "PricingTierForm":
        if self.max_persons is not None and self.max_persons < self.min_persons:
            raise ValueError("max_persons cannot be less than min_persons")
        return self


class PackageForm(BaseDataModel):
    """Package create/update form.

    Attributes:
        package_code: Short unique code (max 50 characters)
        name: Display name (max 255 characters)
        currency: ISO currency code (max 3 characters)
        valid_from: First day the package can be sold
        valid_until: Last day the package can be sold
    """

    package_code: str = Field(..., max_length=50)
    name: str = Field(..., max_length=255)
    description: Optional[str] = None
    nights: Optional[int] = Field(None, ge=0)
    days: Optional[int] = Field(None, ge=1)
    total_dives: Optional[int] = Field(None, ge=0)
    base_price: Decimal = Field(..., ge=0)
    price_per_person: Decimal = Field(..., ge=0)
    currency: Optional[str] = Field(None, max_length=3)
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None
    valid_from: Optional[dt.date] = None
    valid_until: Optional[dt.date] = None
    components: Optional[List[PackageComponentForm]] = None
    options: Optional[List[PackageOptionForm]] = None
    pricing_tiers: Optional[List[PricingTierForm]] = None

    @field_validator("package_code", "name")
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        return strip_required_text(v, info.field_name)

    @model_validator(mode="after")
    def validate_validity_window(self) -> "PackageForm":
        """valid_until may not fall before valid_from.

        Raises:
            ValueError: If the window is reversed
        """
        if self.valid_from and self.valid_until and self.valid_until < self.valid_from:
            raise ValueError("valid_until cannot be before valid_from")
        return self


class Package(ApiRecord):
    """A package as returned by the API."""

    id: int
    dive_center_id: Optional[int] = None
    package_code: str
    name: str
    description: Optional[str] = None
    nights: int = 0
    days: int = 0
    total_dives: int = 0
    base_price: Decimal = Decimal("0")
    price_per_person: Decimal = Decimal("0")
    currency: Optional[str] = None
    is_active: bool = True
    sort_order: Optional[int] = None
    valid_from: Optional[str] = None
    valid_until: Optional[str] = None
    components: List[Dict[str, Any]] = Field(default_factory=list)
    options: List[Dict[str, Any]] = Field(default_factory=list)
    pricing_tiers: List[Dict[str, Any]] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("components", "options", "pricing_tiers", mode="before")
    @classmethod
    def null_list_is_empty(cls, v):
        return v or []


class BreakdownLine(ApiRecord):
    type: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    unit_price: Optional[Decimal] = None
    quantity: Optional[Decimal] = None
    unit: Optional[str] = None
    total: Optional[Decimal] = None


class PackageBreakdown(ApiRecord):
    package: Dict[str, Any] = Field(default_factory=dict)
    breakdown: List[BreakdownLine] = Field(default_factory=list)
    total_price: Decimal = Decimal("0")


class PriceCalculationRequest(BaseDataModel):
    persons: int = Field(..., ge=1)
    option_ids: Optional[List[int]] = None


class PriceCalculation(ApiRecord):
    package_id: Optional[int] = None
    persons: int
    option_ids: Optional[List[int]] = None
    total_price: Decimal
