"""
Shared plumbing for the REST resource services.
"""

import logging
from typing import Any, Dict, Generic, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel

from scuba_admin.models.base import BaseDataModel, Page
from scuba_admin.services.api_client import ApiClient

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

FormLike = Union[BaseDataModel, Mapping[str, Any]]


def to_payload(form: FormLike) -> Dict[str, Any]:
    """Request body for a form model or a plain mapping."""
    if isinstance(form, BaseDataModel):
        return form.to_payload()
    return dict(form)


def unwrap_record(payload: Any, key: str = "data") -> Any:
    """
    Strip a single-record envelope.

    ``{"data": {...}}`` becomes ``{...}``; a payload that already is the
    record is returned unchanged.
    """
    if isinstance(payload, dict) and isinstance(payload.get(key), dict) and "id" not in payload:
        return payload[key]
    return payload


class ResourceService(Generic[RecordT]):
    """
    CRUD operations for one REST collection.

    Subclasses set ``path`` (e.g. ``/customers``) and ``record_model``.
    """

    path: str = ""
    record_model: Type[RecordT]

    def __init__(self, client: ApiClient):
        self.client = client

    def _item_path(self, record_id: Union[int, str]) -> str:
        return f"{self.path}/{record_id}"

    def _record(self, payload: Any, model: Optional[Type[BaseModel]] = None) -> Any:
        return (model or self.record_model).model_validate(unwrap_record(payload))

    def _page(self, payload: Any, model: Optional[Type[BaseModel]] = None) -> Page:
        return Page[model or self.record_model].model_validate(payload or {})

    def _list(
        self, params: Optional[Mapping[str, Any]] = None, path: Optional[str] = None
    ) -> Page:
        return self._page(self.client.get(path or self.path, params=params))

    def get(self, record_id: Union[int, str]) -> RecordT:
        """Fetch one record by id."""
        return self._record(self.client.get(self._item_path(record_id)))

    def create(self, form: FormLike) -> RecordT:
        """Create a record and return it as stored by the server."""
        record = self._record(self.client.post(self.path, json=to_payload(form)))
        logger.info(f"Created {self.record_model.__name__} {getattr(record, 'id', '?')}")
        return record

    def update(self, record_id: Union[int, str], form: FormLike) -> RecordT:
        """Update a record (PUT) with the given fields."""
        return self._record(self.client.put(self._item_path(record_id), json=to_payload(form)))

    def delete(self, record_id: Union[int, str]) -> None:
        """Delete a record."""
        self.client.delete(self._item_path(record_id))
        logger.info(f"Deleted {self.record_model.__name__} {record_id}")
