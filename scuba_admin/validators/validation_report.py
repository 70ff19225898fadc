"""Validation report for collecting and formatting input problems."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, List, Optional


class ValidationSeverity(IntEnum):
    """Severity levels for validation issues."""

    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass
class ValidationIssue:
    """A single problem found in user input.

    Attributes:
        severity: How serious the issue is
        field: Column or field the issue concerns
        message: Human-readable description
        value: Offending value
        row: 1-based input row, when the input is tabular
    """

    severity: ValidationSeverity
    field: str
    message: str
    value: Any = None
    row: Optional[int] = None

    def __str__(self) -> str:
        location = f"row {self.row}, " if self.row is not None else ""
        return f"[{self.severity.name}] {location}{self.field}: {self.message}"


class ValidationReport:
    """Collects issues so that all of them can be shown at once.

    Example:
        >>> report = ValidationReport()
        >>> report.add_error("serial_no", "Duplicate serial number", "A1", row=3)
        >>> report.is_valid()
        False
    """

    def __init__(self) -> None:
        self.issues: List[ValidationIssue] = []

    def _count(self, severity: ValidationSeverity) -> int:
        return sum(1 for issue in self.issues if issue.severity == severity)

    @property
    def error_count(self) -> int:
        return self._count(ValidationSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return self._count(ValidationSeverity.WARNING)

    @property
    def info_count(self) -> int:
        return self._count(ValidationSeverity.INFO)

    def is_valid(self) -> bool:
        """True when there are no errors. Warnings do not count."""
        return self.error_count == 0

    def has_errors(self) -> bool:
        return self.error_count > 0

    def add(
        self,
        severity: ValidationSeverity,
        field: str,
        message: str,
        value: Any = None,
        row: Optional[int] = None,
    ) -> None:
        self.issues.append(ValidationIssue(severity, field, message, value, row))

    def add_error(
        self, field: str, message: str, value: Any = None, row: Optional[int] = None
    ) -> None:
        self.add(ValidationSeverity.ERROR, field, message, value, row)

    def add_warning(
        self, field: str, message: str, value: Any = None, row: Optional[int] = None
    ) -> None:
        self.add(ValidationSeverity.WARNING, field, message, value, row)

    def add_info(
        self, field: str, message: str, value: Any = None, row: Optional[int] = None
    ) -> None:
        self.add(ValidationSeverity.INFO, field, message, value, row)

    def get_errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    def get_warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.WARNING]

    def rows_with_errors(self) -> List[int]:
        """Sorted row numbers that carry at least one error."""
        return sorted({i.row for i in self.get_errors() if i.row is not None})

    def merge(self, other: "ValidationReport") -> None:
        self.issues.extend(other.issues)

    def summary(self) -> str:
        """Counts of errors, warnings and info messages.

        Returns:
            e.g. ``2 error(s), 1 warning(s)`` or ``No issues found``
        """
        parts = []
        if self.error_count:
            parts.append(f"{self.error_count} error(s)")
        if self.warning_count:
            parts.append(f"{self.warning_count} warning(s)")
        if self.info_count:
            parts.append(f"{self.info_count} info message(s)")
        return ", ".join(parts) if parts else "No issues found"

    def format(self) -> str:
        """Multi-line listing of every issue grouped by severity."""
        if not self.issues:
            return "Validation successful - no issues found"

        lines = [f"Validation Report - {self.summary()}", "=" * 60]
        for severity, title in (
            (ValidationSeverity.ERROR, "ERRORS"),
            (ValidationSeverity.WARNING, "WARNINGS"),
            (ValidationSeverity.INFO, "INFO"),
        ):
            group = [i for i in self.issues if i.severity == severity]
            if group:
                lines.append(f"\n{title}:")
                lines.extend(f"  - {issue}" for issue in group)
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data form for JSON output."""
        return {
            "valid": self.is_valid(),
            "summary": self.summary(),
            "issues": [
                {
                    "severity": i.severity.name,
                    "field": i.field,
                    "message": i.message,
                    "row": i.row,
                }
                for i in self.issues
            ],
        }
