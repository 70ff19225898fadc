"""
Equipment catalogue, item and service history services.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from scuba_admin.models.base import Page
from scuba_admin.models.equipment import (
    BulkServiceResult,
    Equipment,
    EquipmentItem,
    ImportPreview,
    ImportSummary,
    ServiceHistory,
    ServiceHistoryForm,
)
from scuba_admin.services.api_client import ApiClient
from scuba_admin.services.base import FormLike, ResourceService, to_payload, unwrap_record

logger = logging.getLogger(__name__)

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class EquipmentService(ResourceService[Equipment]):
    """Equipment types under ``/equipment``, including spreadsheet import."""

    path = "/equipment"
    record_model = Equipment

    def list(
        self,
        page: int = 1,
        per_page: Optional[int] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Page:
        return self._list(
            {"page": page, "per_page": per_page, "category": category, "search": search}
        )

    def bulk_create(self, equipment: Iterable[FormLike]) -> ImportSummary:
        """Create several equipment types in one request."""
        payload = self.client.post(
            f"{self.path}/bulk", json={"equipment": [to_payload(e) for e in equipment]}
        )
        return ImportSummary.model_validate(payload or {})

    def import_preview(self, file_path: Union[str, Path]) -> ImportPreview:
        """Upload a spreadsheet and let the server classify its rows."""
        payload = self.client.upload(f"{self.path}/import-preview", file_path)
        return ImportPreview.model_validate(payload or {})

    def import_rows(self, rows: List[Dict[str, Any]]) -> ImportSummary:
        """Import rows previously accepted by :meth:`import_preview`."""
        payload = self.client.post(f"{self.path}/import", json={"equipment": rows})
        summary = ImportSummary.model_validate(payload or {})
        logger.info(
            f"Imported {summary.success_count} equipment types, {summary.error_count} errors"
        )
        return summary

    def download_template(self, destination: Union[str, Path]) -> Path:
        """
        Save the import spreadsheet template.

        Raises:
            ApiError: If the server answers with JSON instead of a spreadsheet
        """
        return self.client.download(
            f"{self.path}/import-template", destination, accept=XLSX_MIME, reject_json=True
        )


class EquipmentItemService(ResourceService[EquipmentItem]):
    """Physical equipment units under ``/equipment-items``."""

    path = "/equipment-items"
    record_model = EquipmentItem

    def list(
        self,
        page: int = 1,
        per_page: Optional[int] = None,
        search: Optional[str] = None,
        equipment_id: Optional[int] = None,
        status: Optional[str] = None,
    ) -> Page:
        return self._list(
            {
                "page": page,
                "per_page": per_page,
                "search": search,
                "equipment_id": equipment_id,
                "status": status,
            }
        )


class ServiceHistoryService:
    """Service records nested under ``/equipment-items/{id}/service-history``."""

    def __init__(self, client: ApiClient):
        self.client = client

    @staticmethod
    def _path(equipment_item_id: int) -> str:
        return f"/equipment-items/{equipment_item_id}/service-history"

    def list(self, equipment_item_id: int, page: int = 1) -> Page:
        payload = self.client.get(self._path(equipment_item_id), params={"page": page})
        return Page[ServiceHistory].model_validate(payload or {})

    def get(self, equipment_item_id: int, record_id: int) -> ServiceHistory:
        payload = self.client.get(f"{self._path(equipment_item_id)}/{record_id}")
        return ServiceHistory.model_validate(unwrap_record(payload))

    def create(
        self,
        equipment_item_id: int,
        form: FormLike,
        service_interval_days: Optional[int] = None,
    ) -> ServiceHistory:
        """
        Record a service.

        Args:
            equipment_item_id: Serviced item
            form: Service details
            service_interval_days: The item's interval, used to fill in the
                next due date when the form leaves it empty
        """
        if isinstance(form, ServiceHistoryForm):
            form = form.with_interval(service_interval_days)
        payload = self.client.post(self._path(equipment_item_id), json=to_payload(form))
        logger.info(f"Recorded service for equipment item {equipment_item_id}")
        return ServiceHistory.model_validate(unwrap_record(payload))

    def update(self, equipment_item_id: int, record_id: int, form: FormLike) -> ServiceHistory:
        payload = self.client.put(
            f"{self._path(equipment_item_id)}/{record_id}", json=to_payload(form)
        )
        return ServiceHistory.model_validate(unwrap_record(payload))

    def delete(self, equipment_item_id: int, record_id: int) -> None:
        self.client.delete(f"{self._path(equipment_item_id)}/{record_id}")

    def bulk_create(self, form: FormLike) -> BulkServiceResult:
        """Record the same service for several items."""
        payload = self.client.post("/equipment-items/bulk-service", json=to_payload(form))
        result = BulkServiceResult.model_validate(payload or {})
        logger.info(f"Bulk service recorded {result.created_count} records")
        return result
