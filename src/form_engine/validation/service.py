"""Validation statuses and their severity ordering."""

from enum import Enum
from typing import Any, Dict


class ValidationStatus(str, Enum):
    """Validation status of a field, subsection or section."""

    OK = "OK"
    WARNING = "WARNING"
    ERROR = "ERROR"


SEVERITY: Dict[ValidationStatus, int] = {
    ValidationStatus.OK: 0,
    ValidationStatus.WARNING: 1,
    ValidationStatus.ERROR: 2,
}


class ValidationService:
    """Severity comparisons used by status rollups."""

    @staticmethod
    def severity(status: Any) -> int:
        """Rank of a status; unknown statuses rank with OK."""
        try:
            return SEVERITY[ValidationStatus(status)]
        except ValueError:
            return SEVERITY[ValidationStatus.OK]

    @staticmethod
    def is_more_severe_status(status: Any, other: Any) -> bool:
        """True when ``status`` is strictly more severe than ``other``."""
        return ValidationService.severity(status) > ValidationService.severity(other)

    @staticmethod
    def is_error(status: Any) -> bool:
        return ValidationService.severity(status) >= SEVERITY[ValidationStatus.ERROR]
