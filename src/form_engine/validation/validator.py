"""
Field-level validation of a form instance.

Default checks, applied to every field whose show condition holds:
- Required fields must not be blank (ERROR)
- Recommended fields should not be blank (WARNING)
- String values must match the field's pattern (ERROR)
- Number values must be numeric and within min/max (ERROR)
"""

import logging
import math
import numbers
from abc import ABC, abstractmethod
from typing import Any, Optional

from form_engine.fields import DataType, Field, is_blank, is_empty_collection
from form_engine.validation.results import ValidationResults
from form_engine.validation.service import ValidationStatus

logger = logging.getLogger(__name__)


class IValidator(ABC):
    """Abstract interface for form validators."""

    @abstractmethod
    def validate(self, instance: Any, results: ValidationResults) -> None:
        """
        Validate the instance, writing findings into ``results``.

        Args:
            instance: FormInstance to validate
            results: Sink receiving per-tag statuses
        """
        pass


def _is_missing(field: Field, value: Any) -> bool:
    if field.type == DataType.ARRAY:
        return is_empty_collection(value)
    return is_blank(value)


def check_pattern(field: Field, value: Any) -> Optional[str]:
    """Message when a string value does not match the field's pattern."""
    pattern = field.pattern
    if pattern is None or not hasattr(pattern, "search") or not isinstance(value, str):
        return None
    if value == "" or pattern.search(value):
        return None
    return f"Value '{value}' does not match pattern '{pattern.pattern}'"


def check_number(field: Field, value: Any) -> Optional[str]:
    """Message when a number field holds a non-number or is out of range."""
    if field.type != DataType.NUMBER or value is None:
        return None

    if isinstance(value, bool) or not isinstance(value, numbers.Number):
        return f"Expected a number, got {type(value).__name__} (value: {value})"
    if isinstance(value, float) and math.isnan(value):
        return "Expected a number, got NaN"

    minimum = field.get("min")
    maximum = field.get("max")
    if minimum is not None and value < minimum:
        return f"Value {value} is below the minimum of {minimum}"
    if maximum is not None and value > maximum:
        return f"Value {value} is above the maximum of {maximum}"
    return None


class FormValidator(IValidator):
    """Default validator driven by field metadata."""

    def validate(self, instance: Any, results: ValidationResults) -> None:
        checked = 0
        for tag, field in instance.get_fields().items():
            if not instance.is_visible(field):
                continue
            checked += 1
            value = instance.get_model_value(tag)

            if _is_missing(field, value):
                if field.required:
                    results.add_result(tag, ValidationStatus.ERROR, "Required field is missing")
                elif field.get("recommended", False):
                    results.add_result(tag, ValidationStatus.WARNING, "Recommended field is empty")
                continue

            for check in (check_pattern, check_number):
                message = check(field, value)
                if message:
                    results.add_result(tag, ValidationStatus.ERROR, message)

        logger.debug(f"Validated {checked} visible field(s)")
