"""Customer pre-registration data models.

Staff generate one-time links; customers fill in their details through the
public token endpoints; staff then approve (creating the customer) or reject.
"""

import datetime as dt
from typing import Any, Dict, List, Literal, Optional

from pydantic import EmailStr, Field, field_validator

from scuba_admin.models.base import ApiRecord, BaseDataModel, strip_required_text

SubmissionStatus = Literal["pending", "approved", "rejected"]


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class PreRegistrationLink(ApiRecord):
    id: int
    token: str
    url: Optional[str] = None
    expires_at: Optional[str] = None
    created_at: Optional[str] = None
    is_expired: Optional[bool] = None


class BulkLinks(ApiRecord):
    message: Optional[str] = None
    links: List[PreRegistrationLink] = Field(default_factory=list)
    count: int = 0


class TokenInfo(ApiRecord):
    """What the public form learns from a valid token."""

    token: str
    expires_at: Optional[str] = None
    dive_center: Dict[str, Any] = Field(default_factory=dict)


class Submission(ApiRecord):
    """A submitted pre-registration awaiting or past review."""

    id: int
    token: Optional[str] = None
    status: Optional[str] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    submitted_at: Optional[str] = None
    reviewed_at: Optional[str] = None
    reviewed_by: Optional[Dict[str, Any]] = None
    expires_at: Optional[str] = None


class SubmissionDetail(Submission):
    customer_data: Dict[str, Any] = Field(default_factory=dict)
    emergency_contacts_data: List[Dict[str, Any]] = Field(default_factory=list)
    certifications_data: List[Dict[str, Any]] = Field(default_factory=list)
    insurance_data: Optional[Dict[str, Any]] = None
    accommodation_data: Optional[Dict[str, Any]] = None
    review_notes: Optional[str] = None
    created_customer_id: Optional[int] = None
    created_at: Optional[str] = None

    @field_validator("emergency_contacts_data", "certifications_data", mode="before")
    @classmethod
    def null_list_is_empty(cls, v):
        return v or []


class ReviewResult(ApiRecord):
    message: Optional[str] = None
    submission_id: Optional[int] = None
    customer_id: Optional[int] = None


class PreRegistrationCustomer(BaseDataModel):
    full_name: str
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    passport_no: Optional[str] = None
    date_of_birth: Optional[dt.date] = None
    gender: Optional[str] = None
    nationality: Optional[str] = None
    departure_date: Optional[dt.date] = None
    departure_flight: Optional[str] = None
    departure_flight_time: Optional[str] = None
    departure_to: Optional[str] = None

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str, info) -> str:
        return strip_required_text(v, info.field_name)

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, v):
        return _blank_to_none(v)


class PreRegistrationEmergencyContact(BaseDataModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone_1: Optional[str] = None
    phone_2: Optional[str] = None
    phone_3: Optional[str] = None
    address: Optional[str] = None
    relationship: Optional[str] = None
    is_primary: Optional[bool] = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, v):
        return _blank_to_none(v)


class PreRegistrationCertification(BaseDataModel):
    certification_name: str
    certification_no: Optional[str] = None
    certification_date: dt.date
    last_dive_date: Optional[dt.date] = None
    no_of_dives: Optional[int] = Field(None, ge=0)
    agency: Optional[str] = None
    instructor: Optional[str] = None
    file_url: Optional[str] = None
    license_status: Optional[bool] = None

    @field_validator("certification_name")
    @classmethod
    def validate_name(cls, v: str, info) -> str:
        return strip_required_text(v, info.field_name)


class PreRegistrationInsurance(BaseDataModel):
    insurance_provider: Optional[str] = None
    insurance_no: Optional[str] = None
    insurance_hotline_no: Optional[str] = None
    file_url: Optional[str] = None
    expiry_date: Optional[dt.date] = None
    status: Optional[bool] = None


class PreRegistrationAccommodation(BaseDataModel):
    name: Optional[str] = None
    address: Optional[str] = None
    contact_no: Optional[str] = None
    island: Optional[str] = None
    room_no: Optional[str] = None


class PreRegistrationForm(BaseDataModel):
    """Everything a customer submits through a pre-registration link."""

    customer: PreRegistrationCustomer
    emergency_contacts: Optional[List[PreRegistrationEmergencyContact]] = None
    certifications: Optional[List[PreRegistrationCertification]] = None
    insurance: Optional[PreRegistrationInsurance] = None
    accommodation: Optional[PreRegistrationAccommodation] = None
