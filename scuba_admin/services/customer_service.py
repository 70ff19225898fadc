"""
Customer and booking services.
"""

import logging
from typing import Iterable, Optional

from scuba_admin.models.base import Page
from scuba_admin.models.booking import Booking
from scuba_admin.models.customer import BulkAssignResult, Customer
from scuba_admin.services.base import ResourceService

logger = logging.getLogger(__name__)


class CustomerService(ResourceService[Customer]):
    """Customers under ``/customers``."""

    path = "/customers"
    record_model = Customer

    def list(
        self, page: int = 1, per_page: Optional[int] = None, search: Optional[str] = None
    ) -> Page:
        """List customers, optionally filtered by a name/email search."""
        return self._list({"page": page, "per_page": per_page, "search": search})

    def bulk_assign_agent(
        self, customer_ids: Iterable[int], agent_id: Optional[int]
    ) -> BulkAssignResult:
        """
        Assign (or with ``agent_id=None`` unassign) an agent for many customers.

        Raises:
            ValueError: If no customer ids are given
        """
        ids = list(customer_ids)
        if not ids:
            raise ValueError("Select at least one customer")

        payload = self.client.post(
            f"{self.path}/bulk-assign-agent",
            json={"customer_ids": ids, "agent_id": agent_id},
        )
        result = BulkAssignResult.model_validate(payload or {})
        logger.info(
            f"Bulk agent assignment: {result.success_count} updated, "
            f"{result.failed_count} failed"
        )
        return result


class BookingService(ResourceService[Booking]):
    """Bookings under ``/bookings``. Updates are partial."""

    path = "/bookings"
    record_model = Booking

    def list(self, page: int = 1) -> Page:
        return self._list({"page": page})
