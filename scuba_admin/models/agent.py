"""Agent data models.

Agents (travel agents, resorts, tour operators, freelancers) refer
customers to the dive center and earn commission. The form carries the
nested contact, commercial terms, billing and contract sections.
"""

import datetime as dt
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import AnyUrl, EmailStr, Field, TypeAdapter, ValidationError, field_validator

from scuba_admin.models.base import ApiRecord, BaseDataModel, strip_required_text

AgentType = Literal["Travel Agent", "Resort / Guest House", "Tour Operator", "Freelancer"]
AgentStatus = Literal["Active", "Suspended"]
CommissionType = Literal["Percentage", "Fixed Amount"]
PaymentTerms = Literal["Prepaid", "Weekly", "Monthly", "On Invoice"]
CommunicationMethod = Literal["Email", "Phone", "WhatsApp", "Other"]
BillingPaymentMethod = Literal["Bank Transfer", "Cash", "Online"]

_URL_ADAPTER = TypeAdapter(AnyUrl)


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class AgentContact(BaseDataModel):
    contact_person_name: str
    job_title: Optional[str] = None
    email: EmailStr
    phone: Optional[str] = None
    secondary_contact: Optional[str] = None
    preferred_communication_method: Optional[CommunicationMethod] = None

    @field_validator("contact_person_name")
    @classmethod
    def validate_name(cls, v: str, info) -> str:
        return strip_required_text(v, info.field_name)


class AgentCommercialTerms(BaseDataModel):
    commission_type: CommissionType = "Percentage"
    commission_rate: Decimal = Field(..., ge=0)
    currency: str = Field(..., min_length=1)
    vat_applicable: Optional[bool] = None
    tax_registration_no: Optional[str] = None
    payment_terms: PaymentTerms = "Monthly"
    credit_limit: Optional[Decimal] = Field(None, ge=0)
    exclude_equipment_from_commission: Optional[bool] = None
    include_manual_items_in_commission: Optional[bool] = None


class AgentBillingInfo(BaseDataModel):
    company_legal_name: Optional[str] = None
    billing_address: Optional[str] = None
    invoice_email: Optional[EmailStr] = None
    bank_name: Optional[str] = None
    account_name: Optional[str] = None
    account_number: Optional[str] = None
    swift_iban: Optional[str] = None
    payment_method: Optional[BillingPaymentMethod] = None

    @field_validator("invoice_email", mode="before")
    @classmethod
    def blank_email_is_none(cls, v):
        return _blank_to_none(v)


class AgentContract(BaseDataModel):
    contract_start_date: Optional[dt.date] = None
    contract_end_date: Optional[dt.date] = None
    commission_valid_from: Optional[dt.date] = None
    commission_valid_until: Optional[dt.date] = None
    signed_agreement_url: Optional[str] = None
    special_conditions: Optional[str] = None


class AgentForm(BaseDataModel):
    """Agent create/update form.

    Attributes:
        agent_name: Display name (at least 2 characters)
        agent_type: Kind of partner
        country: Country of the agent (required)
        city: City of the agent (required)
        website: Absolute URL, or empty for none
    """

    agent_name: str
    agent_type: AgentType
    country: str
    city: str
    status: Optional[AgentStatus] = None
    brand_name: Optional[str] = None
    website: Optional[str] = None
    notes: Optional[str] = None
    contact: Optional[AgentContact] = None
    commercial_terms: Optional[AgentCommercialTerms] = None
    billing_info: Optional[AgentBillingInfo] = None
    contract: Optional[AgentContract] = None
    tag_ids: Optional[List[int]] = None

    @field_validator("agent_name")
    @classmethod
    def validate_agent_name(cls, v: str) -> str:
        v = (v or "").strip()
        if len(v) < 2:
            raise ValueError("Agent name must be at least 2 characters.")
        return v

    @field_validator("country", "city")
    @classmethod
    def validate_location(cls, v: str, info) -> str:
        return strip_required_text(v, info.field_name)

    @field_validator("website", mode="before")
    @classmethod
    def validate_website(cls, v):
        """Accept an absolute URL or an empty value."""
        v = _blank_to_none(v)
        if v is None:
            return None
        try:
            _URL_ADAPTER.validate_python(v)
        except ValidationError:
            raise ValueError(f"Invalid website URL: {v}")
        return v


class Agent(ApiRecord):
    """An agent as returned by the API, with performance counters."""

    id: int
    dive_center_id: Optional[int] = None
    agent_name: str
    agent_type: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    status: Optional[str] = None
    brand_name: Optional[str] = None
    website: Optional[str] = None
    notes: Optional[str] = None
    contacts: List[Dict[str, Any]] = Field(default_factory=list)
    commercial_terms: Optional[Dict[str, Any]] = None
    billing_info: Optional[Dict[str, Any]] = None
    contract: Optional[Dict[str, Any]] = None
    tags: List[Dict[str, Any]] = Field(default_factory=list)
    total_clients_referred: Optional[int] = None
    total_dives_booked: Optional[int] = None
    total_revenue_generated: Optional[Decimal] = None
    total_commission_earned: Optional[Decimal] = None
    average_revenue_per_client: Optional[Decimal] = None
    last_booking_date: Optional[str] = None
    active_clients_last_30_days: Optional[int] = None
    active_clients_last_90_days: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("contacts", "tags", mode="before")
    @classmethod
    def null_list_is_empty(cls, v):
        return v or []


class AgentPerformance(ApiRecord):
    agent: Optional[Agent] = None
    metrics: Dict[str, Any] = Field(default_factory=dict)
