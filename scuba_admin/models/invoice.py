"""Invoice and payment data models.

Invoices are generated server-side from bookings; the client only picks
the booking, invoice type and tax rate, then records payments against them.
"""

import datetime as dt
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator

from scuba_admin.models.base import ApiRecord, BaseDataModel

InvoiceType = Literal["Advance", "Final", "Full"]
InvoiceStatus = Literal["Draft", "Paid", "Partially Paid", "Refunded"]
PaymentType = Literal["Advance", "Final", "Refund"]
PaymentMethod = Literal["Cash", "Card", "Bank"]


class InvoiceItem(ApiRecord):
    id: int
    invoice_id: Optional[int] = None
    description: Optional[str] = None
    quantity: Decimal = Decimal("1")
    unit_price: Decimal = Decimal("0")
    total: Decimal = Decimal("0")


class Payment(ApiRecord):
    """A payment as returned by the API."""

    id: int
    invoice_id: Optional[int] = None
    payment_date: Optional[str] = None
    amount: Decimal
    payment_type: Optional[str] = None
    method: Optional[str] = None
    reference: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class Invoice(ApiRecord):
    """An invoice as returned by the API."""

    id: int
    dive_center_id: Optional[int] = None
    booking_id: Optional[int] = None
    booking: Optional[Dict[str, Any]] = None
    invoice_no: Optional[str] = None
    invoice_date: Optional[str] = None
    subtotal: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    currency: Optional[str] = None
    status: Optional[str] = None
    invoice_type: Optional[str] = None
    related_invoice_id: Optional[int] = None
    invoice_items: List[InvoiceItem] = Field(default_factory=list)
    payments: List[Payment] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("invoice_items", "payments", mode="before")
    @classmethod
    def null_list_is_empty(cls, v):
        return v or []

    @property
    def amount_paid(self) -> Decimal:
        """Sum of payments, refunds counted negative."""
        paid = Decimal("0")
        for payment in self.payments:
            if payment.payment_type == "Refund":
                paid -= payment.amount
            else:
                paid += payment.amount
        return paid

    @property
    def balance_due(self) -> Decimal:
        return self.total - self.amount_paid


class InvoiceForm(BaseDataModel):
    """Manual invoice creation for a booking."""

    booking_id: int = Field(..., gt=0)
    invoice_type: Optional[InvoiceType] = None
    invoice_date: Optional[dt.date] = None
    tax_percentage: Optional[Decimal] = Field(None, ge=0, le=100)


class GenerateInvoiceForm(BaseDataModel):
    """Ask the server to build an invoice from a booking's dives and equipment."""

    booking_id: int = Field(..., gt=0)
    invoice_type: Optional[InvoiceType] = None
    include_dives: Optional[bool] = None
    include_equipment: Optional[bool] = None
    tax_percentage: Optional[Decimal] = Field(None, ge=0, le=100)


class InvoiceUpdateForm(BaseDataModel):
    invoice_date: Optional[dt.date] = None
    status: Optional[InvoiceStatus] = None
    invoice_type: Optional[InvoiceType] = None
    tax: Optional[Decimal] = Field(None, ge=0)


class PaymentForm(BaseDataModel):
    """Payment create form.

    Example:
        >>> PaymentForm(
        ...     invoice_id=7, amount=Decimal("150"), payment_type="Advance", method="Card"
        ... ).to_payload()
        {'invoice_id': 7, 'amount': 150.0, 'payment_type': 'Advance', 'method': 'Card'}
    """

    invoice_id: int = Field(..., gt=0)
    amount: Decimal = Field(..., ge=Decimal("0.01"))
    payment_type: PaymentType
    payment_date: Optional[dt.date] = None
    method: PaymentMethod
    reference: Optional[str] = None


class PaymentUpdateForm(BaseDataModel):
    amount: Optional[Decimal] = Field(None, ge=Decimal("0.01"))
    payment_type: Optional[PaymentType] = None
    payment_date: Optional[dt.date] = None
    method: Optional[PaymentMethod] = None
    reference: Optional[str] = None
