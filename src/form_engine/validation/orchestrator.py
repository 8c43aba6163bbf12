"""
Validation Orchestrator - runs the validator and rolls statuses up.

Rollups take the most severe status among their items (OK < WARNING < ERROR).
Ties keep the first status seen at that severity.
"""

import logging
from typing import Any, Callable, Iterable, Optional

from form_engine.fields import Section, Subsection
from form_engine.validation.results import ValidationResult, ValidationResults
from form_engine.validation.service import ValidationService, ValidationStatus
from form_engine.validation.validator import IValidator

logger = logging.getLogger(__name__)


def get_status(items: Iterable[Any], status_of: Callable[[Any], Any]) -> Any:
    """
    Most severe status over a collection.

    Args:
        items: Items to roll up (tags, subsections, ...)
        status_of: Maps one item to its status

    Returns:
        The most severe status seen, OK for an empty collection
    """
    status: Any = ValidationStatus.OK
    for item in items:
        item_status = status_of(item)
        if ValidationService.is_more_severe_status(item_status, status):
            status = item_status
    return status


class ValidationOrchestrator:
    """Owns the validator and its results for one form instance."""

    def __init__(self, validator: Optional[IValidator]):
        self.validator = validator
        self.results = ValidationResults()

    def has_validator(self) -> bool:
        return self.validator is not None

    def validate(self, instance: Any) -> None:
        """Replace the current results with a fresh validation pass."""
        if not self.has_validator():
            return

        self.results.clear()
        self.validator.validate(instance, self.results)
        self.results.post_process()

    def get_result_by_tag(self, tag: str) -> ValidationResult:
        return self.results.get_results(tag)

    def get_status_by_tag(self, tag: str) -> Any:
        return self.get_result_by_tag(tag).status

    def get_subsection_status(self, subsection: Subsection) -> Any:
        return get_status(subsection.fields.keys(), self.get_status_by_tag)

    def get_section_status(self, section: Section) -> Any:
        return get_status(section.subsections, self.get_subsection_status)
