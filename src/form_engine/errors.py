"""Exceptions raised by the form engine.

All errors are raised synchronously to the immediate caller. Errors from
collaborators (expression evaluator, validator) are never wrapped; they
propagate unchanged.
"""

from typing import List, Optional


class FormEngineError(Exception):
    """Base class for every error raised by form_engine."""

    pass


class InvalidDefinitionError(FormEngineError):
    """Raised when a form definition or its schema is missing or empty."""

    pass


class DefinitionLoadError(InvalidDefinitionError):
    """Raised when a definition file cannot be read or has the wrong shape."""

    pass


class TriggerCycleError(InvalidDefinitionError):
    """Raised when trigger maps form a cycle (only when cycle checks are on)."""

    def __init__(self, cycle: List[str]):
        self.cycle = cycle
        super().__init__(f"Trigger maps contain a cycle: {' -> '.join(cycle)}")


class DuplicateTagError(FormEngineError):
    """Raised when two fields in the decorated tree share a tag."""

    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(f'Field with tag "{tag}" already exists. Tag must be unique.')


class MissingTypeError(FormEngineError):
    """Raised when a field has no "type" property."""

    def __init__(self, tag: Optional[str]):
        self.tag = tag
        super().__init__(f'Field "{tag}" must contain a valid "type" property')


class UnknownFieldError(FormEngineError, KeyError):
    """Raised when an edit targets a tag that is not in the form."""

    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(f'No field with tag "{tag}"')

    def __str__(self) -> str:
        return self.args[0]
