"""
File storage service.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from scuba_admin.models.file import FileInfo, FileUploadResult, StorageUsage
from scuba_admin.services.api_client import ApiClient

logger = logging.getLogger(__name__)


class FileService:
    """Uploads attached to customers, agents and other records."""

    def __init__(self, client: ApiClient):
        self.client = client

    def upload(
        self,
        file_path: Union[str, Path],
        entity_type: str,
        entity_id: Union[int, str],
        category: str,
    ) -> FileUploadResult:
        """
        Upload a file and attach it to a record.

        Args:
            file_path: Local file to send
            entity_type: Owner kind, e.g. ``customer`` or ``agent``
            entity_id: Owner id
            category: Free-form grouping, e.g. ``passport``
        """
        payload = self.client.upload(
            "/files/upload",
            file_path,
            fields={"entityType": entity_type, "entityId": entity_id, "category": category},
        )
        result = FileUploadResult.model_validate(payload or {})
        logger.info(f"Uploaded {Path(file_path).name} as file {result.file_id}")
        return result

    def list(
        self, entity_type: str, entity_id: Union[int, str], category: Optional[str] = None
    ) -> List[FileInfo]:
        payload = self.client.get(
            f"/files/{entity_type}/{entity_id}", params={"category": category}
        )
        return [FileInfo.model_validate(f) for f in (payload or {}).get("files", [])]

    def get(self, file_id: int) -> FileInfo:
        payload = self.client.get(f"/files/{file_id}")
        return FileInfo.model_validate((payload or {}).get("file") or {})

    def delete(self, file_id: int) -> None:
        self.client.delete(f"/files/{file_id}")

    def usage(self) -> StorageUsage:
        """Storage used by the current dive center."""
        payload = self.client.get("/storage/usage")
        return StorageUsage.model_validate((payload or {}).get("usage") or {})

    def download(self, file_id: int, destination: Union[str, Path]) -> Path:
        """Save a stored file to ``destination``."""
        return self.client.download(f"/storage/files/{file_id}/download", destination)
