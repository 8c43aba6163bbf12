"""
Response Model Store.

The model is a flat mapping tag -> entry, where an entry is

    {"value": <value>, "fieldType": <definition type>, "definitionId": <id>}

with the provenance keys present only for fields that came from a domain
object definition. The caller owns the mapping; the store mutates it in place
and only through set_model_value, which also maintains dirty flags and
retracts answers nested under choices that no longer apply.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, MutableMapping, Optional

from form_engine.fields import (
    DataType,
    Field,
    Option,
    has_value,
    is_blank,
    is_empty_collection,
    is_nan,
)

logger = logging.getLogger(__name__)


def _selected_ids(value: Any) -> List[str]:
    if not has_value(value):
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return [str(item) for item in value]
    return [str(value)]


# Child-clearing policy per data type: should children be cleared for this value?
_CHILD_CLEAR_POLICY: Dict[str, Callable[[Any], bool]] = {
    DataType.BOOLEAN.value: lambda value: value is False,
    DataType.NUMBER.value: is_nan,
    DataType.ARRAY.value: is_empty_collection,
}


def should_clear_children(field_type: Any, value: Any) -> bool:
    """True when ``value`` counts as empty for a composite field of this type."""
    policy = _CHILD_CLEAR_POLICY.get(getattr(field_type, "value", field_type), is_blank)
    return policy(value)


class ResponseModelStore:
    """Owns the structure of a caller-supplied response model."""

    def __init__(self, model: Optional[MutableMapping[str, Any]] = None):
        self.model: MutableMapping[str, Any] = model if model is not None else {}

    def get_model_value(self, tag: str) -> Any:
        """Value stored for a tag, unwrapped from its entry (None if absent)."""
        entry = self.model.get(tag)
        if isinstance(entry, dict):
            return entry.get("value")
        return entry

    def set_model_value(self, tag: str, value: Any, field: Field) -> None:
        """
        Set or clear the value of a field.

        A value of None clears: the entry is removed and the field is no longer
        dirty. Any other value is stored and marks the field dirty. Afterwards,
        children under deselected options are cleared, and a composite field
        whose new value is empty for its type has all its children cleared.

        Args:
            tag: Field tag
            value: New value, or None to clear
            field: The decorated field for ``tag``
        """
        if value is None:
            self.model.pop(tag, None)
            field.dirty = False
        else:
            entry: Dict[str, Any] = {"value": value}
            if field.definition:
                entry["fieldType"] = field.definition.get("type")
                entry["definitionId"] = field.definition.get("definitionId")
            self.model[tag] = entry
            field.dirty = True

        if field.options:
            self.clear_option_children(field.options, value)

        if field.fields and should_clear_children(field.type, value):
            logger.debug(f"Clearing children of '{tag}' (empty {field.type} value)")
            self.clear_fields(field.fields)

    def clear_option_children(self, options: Iterable[Option], value: Any) -> None:
        """Retract every answer nested under an option not selected by ``value``."""
        selected = _selected_ids(value)
        for option in options:
            if option.fields and str(option.id) not in selected:
                self.retract_fields(option.fields)

    def retract_fields(self, fields: Dict[str, Field]) -> None:
        """
        Clear every field in the mapping and all of its descendants.

        Unlike clear_fields, the whole subtree is walked regardless of the
        child-clearing policy of each composite, and fields without a value
        of their own are still descended into.
        """
        for tag, field in fields.items():
            if has_value(self.get_model_value(tag)):
                self.set_model_value(tag, None, field)
            if field.fields:
                self.retract_fields(field.fields)
            for option in field.options or []:
                if option.fields:
                    self.retract_fields(option.fields)

    def clear_fields(self, fields: Dict[str, Field]) -> None:
        """Clear every field in the mapping that currently holds a value."""
        for tag, field in fields.items():
            if has_value(self.get_model_value(tag)):
                self.set_model_value(tag, None, field)

    def get_expression_data(self) -> Dict[str, Any]:
        """Flat tag -> value view of the model for expression evaluation."""
        return {tag: self.get_model_value(tag) for tag in self.model}
