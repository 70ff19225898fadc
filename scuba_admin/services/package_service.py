"""
Package and dive log services.
"""

from typing import Iterable, Optional, Union

from scuba_admin.models.base import Page
from scuba_admin.models.dive_log import DiveLog
from scuba_admin.models.package import (
    Package,
    PackageBreakdown,
    PriceCalculation,
    PriceCalculationRequest,
)
from scuba_admin.services.base import ResourceService


class PackageService(ResourceService[Package]):
    """Dive packages under ``/packages``."""

    path = "/packages"
    record_model = Package

    def list(self, is_active: Optional[bool] = None, search: Optional[str] = None) -> Page:
        return self._list({"is_active": is_active, "search": search})

    def breakdown(self, package_id: int) -> PackageBreakdown:
        """Itemised price of a package."""
        payload = self.client.get(f"{self._item_path(package_id)}/breakdown")
        return PackageBreakdown.model_validate(payload or {})

    def calculate_price(
        self, package_id: int, persons: int, option_ids: Optional[Iterable[int]] = None
    ) -> PriceCalculation:
        """Price for a group size with the chosen options."""
        request = PriceCalculationRequest(
            persons=persons, option_ids=list(option_ids) if option_ids else None
        )
        payload = self.client.post(
            f"{self._item_path(package_id)}/calculate", json=request.to_payload()
        )
        return PriceCalculation.model_validate(payload or {})


class DiveLogService(ResourceService[DiveLog]):
    """Dive logs under ``/dive-logs``."""

    path = "/dive-logs"
    record_model = DiveLog

    def list(
        self,
        page: int = 1,
        per_page: Optional[int] = None,
        search: Optional[str] = None,
        customer_id: Optional[int] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        dive_site_id: Optional[int] = None,
    ) -> Page:
        return self._list(
            {
                "page": page,
                "per_page": per_page,
                "search": search,
                "customer_id": customer_id,
                "date_from": date_from,
                "date_to": date_to,
                "dive_site_id": dive_site_id,
            }
        )

    def list_for_customer(
        self,
        customer_id: Union[int, str],
        page: int = 1,
        per_page: Optional[int] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> Page:
        """One customer's dive history."""
        return self._list(
            {"page": page, "per_page": per_page, "date_from": date_from, "date_to": date_to},
            path=f"/customers/{customer_id}/dive-logs",
        )
