"""
Per-tag validation results.

The validator writes into a ValidationResults sink; the form instance reads
statuses back out of it to roll them up over subsections and sections.
"""

import logging
from dataclasses import dataclass, field as dataclass_field
from typing import Dict, List, Optional

from form_engine.validation.service import ValidationService, ValidationStatus

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Outcome of validating one field."""

    status: ValidationStatus = ValidationStatus.OK
    messages: List[str] = dataclass_field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {"status": self.status.value, "messages": list(self.messages)}


class ValidationResults:
    """Results sink keyed by field tag."""

    def __init__(self):
        self._results: Dict[str, ValidationResult] = {}
        self._summary: Dict[ValidationStatus, List[str]] = {}

    def clear(self) -> None:
        self._results.clear()
        self._summary = {}

    def add_result(
        self,
        tag: str,
        status: ValidationStatus,
        message: Optional[str] = None,
    ) -> ValidationResult:
        """
        Record a finding for a tag.

        The stored status only ever escalates; messages accumulate.

        Args:
            tag: Field tag
            status: Status of this finding
            message: Optional human-readable explanation

        Returns:
            The tag's accumulated result
        """
        result = self._results.setdefault(tag, ValidationResult())
        if ValidationService.is_more_severe_status(status, result.status):
            result.status = ValidationStatus(status)
        if message:
            result.messages.append(message)
        return result

    def get_results(self, tag: str) -> ValidationResult:
        """Result for a tag; tags with no findings are OK."""
        return self._results.get(tag) or ValidationResult()

    def post_process(self) -> None:
        """Build the status summary once the validator has finished."""
        summary: Dict[ValidationStatus, List[str]] = {}
        for tag, result in self._results.items():
            summary.setdefault(result.status, []).append(tag)
        self._summary = summary

        errors = summary.get(ValidationStatus.ERROR, [])
        warnings = summary.get(ValidationStatus.WARNING, [])
        if errors or warnings:
            logger.debug(
                f"Validation found {len(errors)} error(s), {len(warnings)} warning(s): "
                f"errors={errors} warnings={warnings}"
            )

    def tags_with_status(self, status: ValidationStatus) -> List[str]:
        return list(self._summary.get(ValidationStatus(status), []))

    def has_error(self) -> bool:
        return any(ValidationService.is_error(r.status) for r in self._results.values())

    def to_dict(self) -> Dict[str, Dict[str, object]]:
        return {tag: result.to_dict() for tag, result in self._results.items()}

    def __len__(self) -> int:
        return len(self._results)

    def __contains__(self, tag: object) -> bool:
        return tag in self._results
