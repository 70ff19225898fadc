"""Customer data models.

This module defines the Customer record returned by the API and the
CustomerForm used to create or update customers.
"""

import datetime as dt
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from scuba_admin.models.base import ApiRecord, BaseDataModel


class AgentRef(ApiRecord):
    id: int
    agent_name: Optional[str] = None


class EmergencyContact(ApiRecord):
    id: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone_1: Optional[str] = None
    relationship: Optional[str] = None
    is_primary: Optional[bool] = None


class Customer(ApiRecord):
    """A dive center customer as returned by the API."""

    id: int
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    passport_no: Optional[str] = None
    nationality: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[str] = None
    departure_date: Optional[str] = None
    departure_flight: Optional[str] = None
    departure_flight_time: Optional[str] = None
    departure_to: Optional[str] = None
    agent_id: Optional[int] = None
    agent: Optional[AgentRef] = None
    emergency_contacts: List[EmergencyContact] = Field(default_factory=list)
    created_at: Optional[str] = None


class CustomerForm(BaseDataModel):
    """Customer create/update form.

    Attributes:
        full_name: Customer's full name (at least 2 characters)
        email: Contact email; an empty string means "no email" and is
            left out of the request

    Example:
        >>> CustomerForm(full_name="Ana Reef", email="").to_payload()
        {'full_name': 'Ana Reef'}
    """

    full_name: str = Field(..., description="Customer's full name")
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    passport_no: Optional[str] = None
    nationality: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[dt.date] = None
    departure_date: Optional[dt.date] = None
    departure_flight: Optional[str] = None
    departure_flight_time: Optional[str] = None
    departure_to: Optional[str] = None
    agent_id: Optional[int] = None

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        """Full name must have at least 2 non-blank characters."""
        v = (v or "").strip()
        if len(v) < 2:
            raise ValueError("Full name must be at least 2 characters.")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class BulkAssignResult(ApiRecord):
    """Server answer to a bulk agent assignment."""

    success_count: int = 0
    failed_count: int = 0
    errors: List[dict] = Field(default_factory=list)
    message: Optional[str] = None
