"""Data models for the dive center admin client.

This package contains Pydantic models for API records and forms:
- ApiRecord / BaseDataModel / Page: shared bases
- Customer, Booking, Agent, Invoice, Payment, Package, DiveLog records
- Equipment, EquipmentItem, ServiceHistory, BookingEquipment, EquipmentBasket
- *Form models that validate input and build request payloads
"""

from scuba_admin.models.agent import Agent, AgentForm, AgentPerformance
from scuba_admin.models.auth import LoginForm, User
from scuba_admin.models.base import ApiRecord, BaseDataModel, Page
from scuba_admin.models.booking import Booking, BookingForm, BookingUpdateForm
from scuba_admin.models.booking_equipment import (
    AvailabilityCheck,
    AvailabilityResult,
    BasketForm,
    BasketUpdateForm,
    BookingEquipment,
    BookingEquipmentForm,
    ConflictingAssignment,
    DamageInfo,
    EquipmentBasket,
    UnsavedBasketItem,
)
from scuba_admin.models.customer import BulkAssignResult, Customer, CustomerForm
from scuba_admin.models.dive_log import DiveLog, DiveLogForm
from scuba_admin.models.equipment import (
    BulkServiceForm,
    Equipment,
    EquipmentForm,
    EquipmentItem,
    EquipmentItemForm,
    EquipmentItemRow,
    EquipmentItemTemplate,
    ServiceHistory,
    ServiceHistoryForm,
)
from scuba_admin.models.file import FileInfo, FileUploadResult, StorageUsage
from scuba_admin.models.invoice import (
    GenerateInvoiceForm,
    Invoice,
    InvoiceForm,
    InvoiceUpdateForm,
    Payment,
    PaymentForm,
    PaymentUpdateForm,
)
from scuba_admin.models.package import Package, PackageForm
from scuba_admin.models.pre_registration import (
    PreRegistrationForm,
    PreRegistrationLink,
    Submission,
    SubmissionDetail,
)

__all__ = [
    "Agent",
    "AgentForm",
    "AgentPerformance",
    "ApiRecord",
    "AvailabilityCheck",
    "AvailabilityResult",
    "BaseDataModel",
    "BasketForm",
    "BasketUpdateForm",
    "Booking",
    "BookingEquipment",
    "BookingEquipmentForm",
    "BookingForm",
    "BookingUpdateForm",
    "BulkAssignResult",
    "BulkServiceForm",
    "ConflictingAssignment",
    "Customer",
    "CustomerForm",
    "DamageInfo",
    "DiveLog",
    "DiveLogForm",
    "Equipment",
    "EquipmentBasket",
    "EquipmentForm",
    "EquipmentItem",
    "EquipmentItemForm",
    "EquipmentItemRow",
    "EquipmentItemTemplate",
    "FileInfo",
    "FileUploadResult",
    "GenerateInvoiceForm",
    "Invoice",
    "InvoiceForm",
    "InvoiceUpdateForm",
    "LoginForm",
    "Package",
    "PackageForm",
    "Page",
    "Payment",
    "PaymentForm",
    "PaymentUpdateForm",
    "PreRegistrationForm",
    "PreRegistrationLink",
    "ServiceHistory",
    "ServiceHistoryForm",
    "StorageUsage",
    "Submission",
    "SubmissionDetail",
    "UnsavedBasketItem",
    "User",
]
