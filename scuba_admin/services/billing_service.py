"""
Invoice and payment services.
"""

import logging
from typing import Optional

from scuba_admin.models.base import Page
from scuba_admin.models.invoice import Invoice, Payment
from scuba_admin.services.base import FormLike, ResourceService, to_payload

logger = logging.getLogger(__name__)


class InvoiceService(ResourceService[Invoice]):
    """Invoices under ``/invoices``. Totals are computed by the server."""

    path = "/invoices"
    record_model = Invoice

    def list(
        self,
        status: Optional[str] = None,
        customer_id: Optional[int] = None,
        invoice_type: Optional[str] = None,
        page: int = 1,
    ) -> Page:
        return self._list(
            {
                "status": status,
                "customer_id": customer_id,
                "invoice_type": invoice_type,
                "page": page,
            }
        )

    def generate_from_booking(self, form: FormLike) -> Invoice:
        """Build an invoice from a booking's dives and equipment."""
        invoice = self._record(
            self.client.post(f"{self.path}/generate-from-booking", json=to_payload(form))
        )
        logger.info(f"Generated invoice {invoice.invoice_no or invoice.id}")
        return invoice


class PaymentService(ResourceService[Payment]):
    """Payments under ``/payments``."""

    path = "/payments"
    record_model = Payment

    def list(self, invoice_id: Optional[int] = None) -> Page:
        return self._list({"invoice_id": invoice_id})
