"""Base models for API records and forms.

Two bases are provided:

- :class:`ApiRecord` for records read from the API. Unknown fields are
  ignored because the server adds relations and counters freely.
- :class:`BaseDataModel` for forms sent to the API. Unknown fields are
  rejected so a typo in a CLI option or CSV header fails loudly.
"""

import datetime as dt
from decimal import Decimal
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator


def _clean_payload(value: Any) -> Any:
    """Drop None and empty strings, and convert values to JSON-friendly types."""
    if isinstance(value, dict):
        cleaned = {}
        for key, item in value.items():
            if item is None or item == "":
                continue
            cleaned[key] = _clean_payload(item)
        return cleaned
    if isinstance(value, (list, tuple)):
        return [_clean_payload(item) for item in value]
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, dt.datetime):
        return value.isoformat()
    if isinstance(value, dt.date):
        return value.isoformat()
    if isinstance(value, dt.time):
        return value.strftime("%H:%M")
    return value


def strip_required_text(v: str, field_name: str) -> str:
    """Strip a required text field, rejecting blank values.

    Raises:
        ValueError: If the value is empty or whitespace only
    """
    if not v or not v.strip():
        raise ValueError(f"{field_name} cannot be empty or whitespace")
    return v.strip()


class BaseDataModel(BaseModel):
    """Base class for forms sent to the API.

    Provides common configuration and the payload conversion used by every
    create/update call.

    Example:
        >>> class NoteForm(BaseDataModel):
        ...     title: str
        ...     body: Optional[str] = None
        >>> NoteForm(title="Reef", body="").to_payload()
        {'title': 'Reef'}
    """

    model_config = ConfigDict(
        # Allow arbitrary types like Decimal, date, time
        arbitrary_types_allowed=True,
        # Validate on assignment to catch errors early
        validate_assignment=True,
        strict=False,
        # Unknown form fields are mistakes
        extra="forbid",
        frozen=False,
    )

    def to_payload(self) -> Dict[str, Any]:
        """Request body for this form.

        Unset optional values (None or empty string) are left out entirely,
        dates become ISO strings, times become ``HH:MM`` and decimals
        become numbers.
        """
        return _clean_payload(self.model_dump(exclude_none=True))


class ApiRecord(BaseModel):
    """Base class for records returned by the API."""

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        extra="ignore",
        populate_by_name=True,
    )


T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One page of a paginated list response.

    Accepts both the flat Laravel paginator shape and the resource
    collection shape where counters live under ``meta``.

    Example:
        >>> page = Page[dict].model_validate(
        ...     {"data": [{"id": 1}], "meta": {"current_page": 1, "total": 1}}
        ... )
        >>> page.total
        1
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    data: List[T] = Field(default_factory=list)
    current_page: int = 1
    per_page: Optional[int] = None
    total: Optional[int] = None
    last_page: int = 1
    from_: Optional[int] = Field(default=None, alias="from")
    to: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def flatten_meta(cls, data: Any) -> Any:
        """Lift ``meta`` counters to the top level and accept bare lists."""
        if isinstance(data, list):
            return {"data": data, "total": len(data)}
        if isinstance(data, dict) and isinstance(data.get("meta"), dict):
            merged = {k: v for k, v in data.items() if k != "meta"}
            for key, value in data["meta"].items():
                merged.setdefault(key, value)
            return merged
        return data

    @property
    def has_next(self) -> bool:
        return self.current_page < self.last_page

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self):  # type: ignore[override]
        return iter(self.data)
