"""Validators for tabular bulk input.

Bulk CLI commands read CSV files into pandas DataFrames. The functions here
check every row up front and return the parsed models together with a
:class:`ValidationReport`, so that all problems are shown in one go.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type, Union

import pandas as pd
from pydantic import BaseModel, ValidationError

from scuba_admin.models.booking_equipment import DamageInfo, UnsavedBasketItem
from scuba_admin.models.equipment import MAX_BULK_ITEMS, EquipmentItemRow
from scuba_admin.validators.validation_report import ValidationReport

logger = logging.getLogger(__name__)

ITEM_COLUMNS = ("size", "serial_no", "inventory_code", "brand", "color", "image_url")

BASKET_COLUMNS = (
    "equipment_source",
    "equipment_item_id",
    "price",
    "customer_equipment_type",
    "customer_equipment_brand",
    "customer_equipment_model",
    "customer_equipment_serial",
    "customer_equipment_notes",
)

DAMAGE_COLUMNS = (
    "equipment_id",
    "damage_description",
    "damage_cost",
    "charge_customer",
    "damage_charge_amount",
)

TRUE_VALUES = {"1", "true", "yes", "y", "x"}


def normalize_column(name: Any) -> str:
    """``"Serial No"`` -> ``"serial_no"``."""
    return "_".join(str(name).strip().lower().replace("-", " ").split())


def read_table(path: Union[str, Path]) -> pd.DataFrame:
    """
    Read a CSV file with every cell as text and normalized column names.

    Args:
        path: CSV file

    Returns:
        DataFrame with blank cells as empty strings

    Raises:
        ValueError: If the file cannot be parsed
    """
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise ValueError(f"Could not read {path}: {e}") from e
    df.columns = [normalize_column(c) for c in df.columns]
    logger.debug(f"Read {len(df)} rows from {path}")
    return df


def _clean(value: Any) -> Optional[str]:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    text = str(value).strip()
    return text or None


def _row_values(row: pd.Series, columns: Iterable[str]) -> Dict[str, Optional[str]]:
    return {c: _clean(row.get(c)) for c in columns if c in row.index}


def _check_columns(
    df: pd.DataFrame, allowed: Iterable[str], report: ValidationReport
) -> None:
    allowed = set(allowed)
    for column in df.columns:
        if column not in allowed:
            report.add_warning(column, "Unknown column ignored", column)


def _record_model_errors(
    error: ValidationError, report: ValidationReport, row: int
) -> None:
    for detail in error.errors():
        location = ".".join(str(p) for p in detail.get("loc", ())) or "row"
        message = str(detail.get("msg", "Invalid value")).replace("Value error, ", "")
        report.add_error(location, message, detail.get("input"), row=row)


def _parse(
    model: Type[BaseModel],
    values: Dict[str, Any],
    report: ValidationReport,
    row: int,
) -> Optional[BaseModel]:
    try:
        return model(**values)
    except ValidationError as e:
        _record_model_errors(e, report, row)
        return None


def _flag_duplicates(
    df: pd.DataFrame, column: str, label: str, report: ValidationReport
) -> None:
    if column not in df.columns:
        return
    values = df[column].map(_clean)
    duplicated = values.notna() & values.duplicated(keep=False)
    for index in df.index[duplicated]:
        report.add_error(column, f"Duplicate {label}", values[index], row=index + 1)


def validate_item_rows(df: pd.DataFrame) -> Tuple[List[EquipmentItemRow], ValidationReport]:
    """
    Check equipment item rows for a bulk create.

    Blank rows are skipped. Serial numbers and inventory codes must be
    unique within the file.

    Returns:
        Parsed rows (only when the report has no errors) and the report
    """
    report = ValidationReport()
    _check_columns(df, ITEM_COLUMNS, report)

    rows: List[EquipmentItemRow] = []
    for position, (_, series) in enumerate(df.iterrows(), 1):
        values = _row_values(series, ITEM_COLUMNS)
        if not any(values.values()):
            report.add_info("row", "Blank row skipped", row=position)
            continue
        parsed = _parse(EquipmentItemRow, values, report, position)
        if parsed is not None:
            rows.append(parsed)

    if not rows and not report.has_errors():
        report.add_error("row", "Please add at least one equipment item")
    if len(rows) > MAX_BULK_ITEMS:
        report.add_error(
            "row", f"Cannot create more than {MAX_BULK_ITEMS} items at once", len(rows)
        )

    _flag_duplicates(df.reset_index(drop=True), "serial_no", "serial number", report)
    _flag_duplicates(df.reset_index(drop=True), "inventory_code", "inventory code", report)
    return (rows if report.is_valid() else []), report


def validate_basket_rows(
    df: pd.DataFrame,
) -> Tuple[List[UnsavedBasketItem], ValidationReport]:
    """
    Check rows for a bulk basket add.

    ``equipment_source`` defaults to ``Center``. Center rows need an
    equipment item id; ``Customer Own`` rows need a brand.
    """
    report = ValidationReport()
    _check_columns(df, BASKET_COLUMNS, report)

    items: List[UnsavedBasketItem] = []
    for position, (_, series) in enumerate(df.iterrows(), 1):
        values = _row_values(series, BASKET_COLUMNS)
        if not any(values.values()):
            continue
        values["equipment_source"] = values.get("equipment_source") or "Center"

        if values["equipment_source"] == "Center" and not values.get("equipment_item_id"):
            report.add_error(
                "equipment_item_id",
                "Please select equipment item for all center equipment",
                row=position,
            )
            continue
        if values["equipment_source"] == "Customer Own" and not values.get(
            "customer_equipment_brand"
        ):
            report.add_error(
                "customer_equipment_brand",
                "Please enter brand for all customer equipment",
                row=position,
            )
            continue

        parsed = _parse(
            UnsavedBasketItem,
            {k: v for k, v in values.items() if v is not None},
            report,
            position,
        )
        if parsed is not None:
            items.append(parsed)

    if not items and not report.has_errors():
        report.add_error("row", "Please add at least one equipment item")
    return (items if report.is_valid() else []), report


def validate_damage_rows(
    df: pd.DataFrame, equipment_ids: Optional[Iterable[int]] = None
) -> Tuple[Dict[int, DamageInfo], ValidationReport]:
    """
    Check per-assignment damage details for a bulk return.

    Every listed row reports damage. ``charge_customer`` accepts
    ``yes``/``true``/``1``/``x``.

    Args:
        df: Damage rows keyed by ``equipment_id``
        equipment_ids: Assignments being returned; rows for other ids are errors
    """
    report = ValidationReport()
    _check_columns(df, DAMAGE_COLUMNS, report)
    allowed = set(equipment_ids) if equipment_ids is not None else None

    damage: Dict[int, DamageInfo] = {}
    for position, (_, series) in enumerate(df.iterrows(), 1):
        values = _row_values(series, DAMAGE_COLUMNS)
        if not any(values.values()):
            continue

        raw_id = values.pop("equipment_id", None)
        try:
            equipment_id = int(raw_id) if raw_id is not None else None
        except ValueError:
            equipment_id = None
        if equipment_id is None:
            report.add_error("equipment_id", "Equipment id must be a number", raw_id, row=position)
            continue
        if allowed is not None and equipment_id not in allowed:
            report.add_error(
                "equipment_id", "Assignment is not being returned", equipment_id, row=position
            )
            continue
        if equipment_id in damage:
            report.add_error("equipment_id", "Duplicate assignment", equipment_id, row=position)
            continue

        charge = (values.pop("charge_customer", None) or "").lower() in TRUE_VALUES
        info = _parse(
            DamageInfo,
            {
                "damage_reported": True,
                "charge_customer": charge,
                **{k: v for k, v in values.items() if v is not None},
            },
            report,
            position,
        )
        if info is not None:
            damage[equipment_id] = info

    return (damage if report.is_valid() else {}), report
