"""
API services for the dive center admin client.

This package provides:
- ApiClient: cookie-session HTTP client with CSRF handling
- One service class per REST resource
- Bulk operations that collect per-record failures
- Exponential backoff with jitter and a circuit breaker for GET requests
"""

from .agent_service import AgentService
from .api_client import ApiClient
from .auth_service import AuthService
from .billing_service import InvoiceService, PaymentService
from .booking_equipment_service import BookingEquipmentService, EquipmentBasketService
from .customer_service import BookingService, CustomerService
from .equipment_service import EquipmentItemService, EquipmentService, ServiceHistoryService
from .errors import (
    ApiConnectionError,
    ApiError,
    AuthenticationError,
    AvailabilityConflictError,
    NotFoundError,
    PermissionDeniedError,
    ServerError,
    ValidationFailedError,
)
from .file_service import FileService
from .package_service import DiveLogService, PackageService
from .pre_registration_service import PreRegistrationService
from .retry_handler import CircuitBreakerError, RetryExhaustedException, RetryHandler
from .session_store import SessionStore

__all__ = [
    "AgentService",
    "ApiClient",
    "ApiConnectionError",
    "ApiError",
    "AuthService",
    "AuthenticationError",
    "AvailabilityConflictError",
    "BookingEquipmentService",
    "BookingService",
    "CircuitBreakerError",
    "CustomerService",
    "DiveLogService",
    "EquipmentBasketService",
    "EquipmentItemService",
    "EquipmentService",
    "FileService",
    "InvoiceService",
    "NotFoundError",
    "PackageService",
    "PaymentService",
    "PermissionDeniedError",
    "PreRegistrationService",
    "RetryExhaustedException",
    "RetryHandler",
    "ServerError",
    "ServiceHistoryService",
    "SessionStore",
    "ValidationFailedError",
]
