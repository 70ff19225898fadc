"""Validation layer for bulk input files."""

from scuba_admin.validators.row_validators import (
    read_table,
    validate_basket_rows,
    validate_damage_rows,
    validate_item_rows,
)
from scuba_admin.validators.validation_report import (
    ValidationIssue,
    ValidationReport,
    ValidationSeverity,
)

__all__ = [
    "ValidationReport",
    "ValidationIssue",
    "ValidationSeverity",
    "read_table",
    "validate_item_rows",
    "validate_basket_rows",
    "validate_damage_rows",
]
