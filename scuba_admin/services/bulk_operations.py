"""
Multi-record operations with collected failures.

Each operation validates all of its input before the first request, so a
typo in row 30 does not leave rows 1-29 half created. Once requests start,
a failing record is recorded in the :class:`BulkResult` and the rest carry
on.
"""

import datetime as dt
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from pydantic import ValidationError

from scuba_admin.calculators.schedule import default_return_date
from scuba_admin.models.booking_equipment import (
    BookingEquipmentForm,
    BulkReturnResult,
    DamageInfo,
    UnsavedBasketItem,
)
from scuba_admin.models.customer import BulkAssignResult
from scuba_admin.models.equipment import (
    MAX_BULK_ITEMS,
    EquipmentItemRow,
    EquipmentItemTemplate,
)
from scuba_admin.services.booking_equipment_service import BookingEquipmentService
from scuba_admin.services.customer_service import CustomerService
from scuba_admin.services.equipment_service import EquipmentItemService
from scuba_admin.services.errors import ApiError, describe_error
from scuba_admin.utils.logging_utils import log_function_call

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

DEFAULT_MAX_WORKERS = 4


@dataclass
class BulkFailure:
    """One record that could not be created."""

    index: int
    payload: Dict[str, Any]
    message: str


@dataclass
class BulkResult:
    """Outcome of a bulk operation."""

    success: List[Any] = field(default_factory=list)
    failed: List[BulkFailure] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.success)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def total(self) -> int:
        return self.success_count + self.failed_count

    @property
    def has_failures(self) -> bool:
        return bool(self.failed)

    def summary(self, noun: str = "items") -> str:
        """One-line outcome, e.g. ``Created 8 of 10 items (2 failed)``."""
        line = f"Created {self.success_count} of {self.total} {noun}"
        if self.failed:
            line += f" ({self.failed_count} failed)"
        return line


def _first_error(error: ValidationError) -> str:
    details = error.errors()
    if not details:
        return str(error)
    message = details[0].get("msg", str(error))
    return message.removeprefix("Value error, ")


@log_function_call(level="INFO")
def bulk_create_equipment_items(
    service: EquipmentItemService,
    template: Union[EquipmentItemTemplate, Mapping[str, Any]],
    rows: Sequence[Union[EquipmentItemRow, Mapping[str, Any]]],
    progress: Optional[ProgressCallback] = None,
) -> BulkResult:
    """
    Create several units of one equipment type.

    Rows are merged with the shared template and created one at a time in
    order.

    Args:
        service: Equipment item service
        template: Values shared by every unit
        rows: Per-unit values (size, serial number, ...)
        progress: Called with ``(current, total)`` after each row

    Returns:
        BulkResult with created items and per-row failures

    Raises:
        ValueError: If there are no rows or more than the allowed maximum
        pydantic.ValidationError: If the template or a row is invalid
    """
    if not rows:
        raise ValueError("Please add at least one equipment item")
    if len(rows) > MAX_BULK_ITEMS:
        raise ValueError(f"Cannot create more than {MAX_BULK_ITEMS} items at once")

    if not isinstance(template, EquipmentItemTemplate):
        template = EquipmentItemTemplate(**template)
    forms = [
        (row if isinstance(row, EquipmentItemRow) else EquipmentItemRow(**row)).merge(template)
        for row in rows
    ]

    result = BulkResult()
    total = len(forms)
    for index, form in enumerate(forms):
        payload = form.to_payload()
        try:
            result.success.append(service.create(form))
        except ApiError as e:
            message = describe_error(e, "Failed to create equipment item")
            logger.warning(f"Row {index + 1} failed: {message}")
            result.failed.append(BulkFailure(index=index, payload=payload, message=message))
        if progress is not None:
            progress(index + 1, total)

    logger.info(result.summary("equipment items"))
    return result


def validate_basket_items(
    items: Sequence[Union[UnsavedBasketItem, Mapping[str, Any]]],
) -> List[UnsavedBasketItem]:
    """
    Check a basket add before anything is sent.

    Raises:
        ValueError: On the first rule broken by any item
    """
    if not items:
        raise ValueError("Please add at least one equipment item")

    parsed = [i if isinstance(i, UnsavedBasketItem) else UnsavedBasketItem(**i) for i in items]
    if any(i.equipment_source == "Center" and not i.equipment_item_id for i in parsed):
        raise ValueError("Please select equipment item for all center equipment")
    if any(
        i.equipment_source == "Customer Own" and not (i.customer_equipment_brand or "").strip()
        for i in parsed
    ):
        raise ValueError("Please enter brand for all customer equipment")
    return parsed


@log_function_call(level="INFO")
def bulk_add_basket_equipment(
    service: BookingEquipmentService,
    basket_id: int,
    items: Sequence[Union[UnsavedBasketItem, Mapping[str, Any]]],
    checkout_date: Optional[dt.date] = None,
    return_date: Optional[dt.date] = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> BulkResult:
    """
    Add several pieces of equipment to a basket.

    All items share the basket and dates. Checkout defaults to today and
    return to the day after checkout. Assignments are created concurrently;
    an availability conflict on one item is reported with its conflicting
    assignments and does not stop the others.

    Raises:
        ValueError: If the item list breaks a basket rule
    """
    parsed = validate_basket_items(items)
    checkout_date = checkout_date or dt.date.today()
    return_date = return_date or default_return_date(checkout_date)

    forms = [
        BookingEquipmentForm(
            basket_id=basket_id,
            checkout_date=checkout_date,
            return_date=return_date,
            **item.model_dump(exclude_none=True),
        )
        for item in parsed
    ]

    # one handshake up front instead of one per worker
    service.client.ensure_csrf_token()

    successes: Dict[int, Any] = {}
    failures: List[BulkFailure] = []
    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
        futures = {
            executor.submit(service.create, form): index
            for index, form in enumerate(forms)
        }
        for future in as_completed(futures):
            index = futures[future]
            try:
                successes[index] = future.result()
            except ApiError as e:
                message = describe_error(e, "Failed to add equipment")
                logger.warning(f"Basket {basket_id} item {index + 1} failed: {message}")
                failures.append(
                    BulkFailure(index=index, payload=forms[index].to_payload(), message=message)
                )

    result = BulkResult(
        success=[successes[i] for i in sorted(successes)],
        failed=sorted(failures, key=lambda f: f.index),
    )
    logger.info(f"Basket {basket_id}: {result.summary('assignments')}")
    return result


@log_function_call(level="INFO")
def bulk_return(
    service: BookingEquipmentService,
    equipment_ids: Iterable[int],
    damage_info: Optional[Mapping[int, Union[DamageInfo, Mapping[str, Any]]]] = None,
) -> BulkReturnResult:
    """
    Return several assignments, with damage details per assignment.

    Raises:
        ValueError: If no assignment is selected, damage info names an
            assignment that is not being returned, or any damage entry is
            invalid
    """
    ids = list(equipment_ids)
    if not ids:
        raise ValueError("Select at least one equipment assignment")

    validated: Dict[int, DamageInfo] = {}
    for equipment_id, info in (damage_info or {}).items():
        if equipment_id not in ids:
            raise ValueError(
                f"Damage info given for assignment {equipment_id} "
                "which is not being returned"
            )
        if isinstance(info, DamageInfo):
            validated[equipment_id] = info
            continue
        try:
            validated[equipment_id] = DamageInfo(**info)
        except ValidationError as e:
            raise ValueError(f"Assignment {equipment_id}: {_first_error(e)}") from e

    return service.bulk_return(ids, validated or None)


def bulk_assign_agent(
    service: CustomerService, customer_ids: Iterable[int], agent_id: Optional[int]
) -> BulkAssignResult:
    """Assign an agent to many customers; ``agent_id=None`` unassigns."""
    return service.bulk_assign_agent(customer_ids, agent_id)


def failures_table(result: BulkResult) -> List[Tuple[int, str]]:
    """``(row number, message)`` pairs for display, 1-based."""
    return [(f.index + 1, f.message) for f in result.failed]
