"""
Customer pre-registration service.

Link management and review are staff operations on the logged-in session.
Reading a link and submitting it are public calls made with the token
alone, without session cookies or CSRF.
"""

import logging
from typing import Optional

from scuba_admin.models.base import Page
from scuba_admin.models.pre_registration import (
    BulkLinks,
    PreRegistrationLink,
    ReviewResult,
    Submission,
    SubmissionDetail,
    TokenInfo,
)
from scuba_admin.services.api_client import ApiClient
from scuba_admin.services.base import FormLike, to_payload, unwrap_record

logger = logging.getLogger(__name__)


class PreRegistrationService:
    """Endpoints under ``/pre-registration``."""

    path = "/pre-registration"

    def __init__(self, client: ApiClient):
        self.client = client

    def generate_link(self, expires_in_days: Optional[int] = None) -> PreRegistrationLink:
        """Create a single-use registration link."""
        payload = self.client.post(
            f"{self.path}/links", json={"expires_in_days": expires_in_days}
        )
        link = PreRegistrationLink.model_validate(unwrap_record(payload))
        logger.info(f"Generated pre-registration link {link.id}")
        return link

    def generate_bulk_links(
        self, quantity: int, expires_in_days: Optional[int] = None
    ) -> BulkLinks:
        """
        Create several links at once.

        Raises:
            ValueError: If quantity is less than 1
        """
        if quantity < 1:
            raise ValueError("Quantity must be at least 1")
        payload = self.client.post(
            f"{self.path}/links/bulk",
            json={"quantity": quantity, "expires_in_days": expires_in_days},
        )
        return BulkLinks.model_validate(payload or {})

    def get_by_token(self, token: str) -> TokenInfo:
        """Public: validate a token and fetch the dive center it belongs to."""
        payload = self.client.get(f"{self.path}/{token}", public=True)
        return TokenInfo.model_validate(payload or {})

    def submit(self, token: str, form: FormLike) -> dict:
        """Public: submit a customer's registration data."""
        result = self.client.post(
            f"{self.path}/{token}/submit", json=to_payload(form), public=True
        )
        return result or {}

    def submissions(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        per_page: Optional[int] = None,
    ) -> Page:
        payload = self.client.get(
            f"{self.path}/submissions",
            params={"status": status, "search": search, "page": page, "per_page": per_page},
        )
        return Page[Submission].model_validate(payload or {})

    def submission(self, submission_id: int) -> SubmissionDetail:
        payload = self.client.get(f"{self.path}/submissions/{submission_id}")
        return SubmissionDetail.model_validate(unwrap_record(payload))

    def approve(self, submission_id: int, review_notes: Optional[str] = None) -> ReviewResult:
        """Approve a submission; the server creates the customer."""
        payload = self.client.post(
            f"{self.path}/submissions/{submission_id}/approve",
            json={"review_notes": review_notes},
        )
        result = ReviewResult.model_validate(payload or {})
        logger.info(f"Approved submission {submission_id} as customer {result.customer_id}")
        return result

    def reject(self, submission_id: int, review_notes: str) -> ReviewResult:
        """
        Reject a submission.

        Raises:
            ValueError: If no review notes are given
        """
        if not review_notes or not review_notes.strip():
            raise ValueError("Review notes are required when rejecting a submission")
        payload = self.client.post(
            f"{self.path}/submissions/{submission_id}/reject",
            json={"review_notes": review_notes.strip()},
        )
        return ReviewResult.model_validate(payload or {})

    def pending_links(self, page: int = 1, per_page: Optional[int] = None) -> Page:
        payload = self.client.get(
            f"{self.path}/links/pending", params={"page": page, "per_page": per_page}
        )
        return Page[PreRegistrationLink].model_validate(payload or {})

    def delete_link(self, link_id: int) -> None:
        self.client.delete(f"{self.path}/links/{link_id}")
