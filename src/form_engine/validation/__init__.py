"""Validation statuses, results sink and the default validator."""

from form_engine.validation.orchestrator import ValidationOrchestrator, get_status
from form_engine.validation.results import ValidationResult, ValidationResults
from form_engine.validation.service import SEVERITY, ValidationService, ValidationStatus
from form_engine.validation.validator import FormValidator, IValidator

__all__ = [
    "SEVERITY",
    "FormValidator",
    "IValidator",
    "ValidationOrchestrator",
    "ValidationResult",
    "ValidationResults",
    "ValidationService",
    "ValidationStatus",
    "get_status",
]
