"""Stored file data models.

The file endpoints answer in camelCase, unlike the rest of the API.
"""

from typing import Optional

from pydantic import Field

from scuba_admin.models.base import ApiRecord


class FileInfo(ApiRecord):
    id: int
    url: Optional[str] = None
    original_name: Optional[str] = Field(None, alias="originalName")
    file_size: Optional[int] = Field(None, alias="fileSize")
    mime_type: Optional[str] = Field(None, alias="mimeType")
    category: Optional[str] = None
    uploaded_by: Optional[str] = Field(None, alias="uploadedBy")
    created_at: Optional[str] = Field(None, alias="createdAt")


class FileUploadResult(ApiRecord):
    success: bool = True
    file_id: int = Field(..., alias="fileId")
    url: Optional[str] = None
    original_name: Optional[str] = Field(None, alias="originalName")
    file_size: Optional[int] = Field(None, alias="fileSize")
    mime_type: Optional[str] = Field(None, alias="mimeType")
    category: Optional[str] = None
    created_at: Optional[str] = Field(None, alias="createdAt")
    message: Optional[str] = None


class StorageUsage(ApiRecord):
    storage_bytes: int = Field(0, alias="storageBytes")
    storage_formatted: Optional[str] = Field(None, alias="storageFormatted")
    file_count: int = Field(0, alias="fileCount")
    last_updated: Optional[str] = Field(None, alias="lastUpdated")
