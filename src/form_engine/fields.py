"""Runtime node types of a decorated form.

A form is an ordered list of sections, each holding subsections, each
holding a mapping of tag -> Field. Fields may own child fields directly
(composite fields) or through their options (choice fields), to any depth.

Parent links are stored as tag references rather than object pointers;
``FormInstance.get_parent`` resolves them through the flat tag index.
"""

import math
from dataclasses import dataclass, field as dataclass_field
from enum import Enum
from typing import Any, Dict, List, Optional, Pattern, Union


class DataType(str, Enum):
    """Value types a field can hold."""

    BOOLEAN = "BOOLEAN"
    NUMBER = "NUMBER"
    STRING = "STRING"
    DATE = "DATE"
    ARRAY = "ARRAY"


@dataclass
class Option:
    """A selectable choice of a field, optionally owning nested fields."""

    id: Any
    parent_tag: Optional[str] = None
    label: Optional[str] = None
    fields: Dict[str, "Field"] = dataclass_field(default_factory=dict)
    default_value_conditions: Optional[List[Dict[str, Any]]] = None
    properties: Dict[str, Any] = dataclass_field(default_factory=dict)


@dataclass
class Field:
    """A decorated form field.

    ``dirty`` is True once a value has been explicitly set and False after an
    explicit clear. ``component`` is resolved at decoration time and supplies
    the field's update behavior.
    """

    tag: str
    type: str
    id: Optional[str] = None
    label: Optional[str] = None
    ui_field: Dict[str, Any] = dataclass_field(default_factory=dict)
    component_type: Optional[Any] = None
    component: Optional[Any] = None
    pattern: Optional[Union[Pattern, Any]] = None
    fields: Optional[Dict[str, "Field"]] = None
    options: Optional[List[Option]] = None
    parent_tag: Optional[str] = None
    parent_option_id: Optional[Any] = None
    dirty: bool = False
    show_condition: Optional[Any] = None
    default_value_conditions: Optional[List[Dict[str, Any]]] = None
    calc: bool = False
    definition: Optional[Dict[str, Any]] = None
    properties: Dict[str, Any] = dataclass_field(default_factory=dict)

    @property
    def required(self) -> bool:
        return bool(self.properties.get("required", False))

    def get(self, key: str, default: Any = None) -> Any:
        """Read an undecorated schema property (label, min, max, ...)."""
        return self.properties.get(key, default)


@dataclass
class Subsection:
    title: Optional[str] = None
    fields: Dict[str, Field] = dataclass_field(default_factory=dict)
    properties: Dict[str, Any] = dataclass_field(default_factory=dict)


@dataclass
class Section:
    title: Optional[str] = None
    sort_order: Optional[float] = None
    subsections: List[Subsection] = dataclass_field(default_factory=list)
    properties: Dict[str, Any] = dataclass_field(default_factory=dict)


def has_value(value: Any) -> bool:
    """True unless the value is absent."""
    return value is not None


def is_blank(value: Any) -> bool:
    """True for absent values and the empty string."""
    return not has_value(value) or value == ""


def is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def is_empty_collection(value: Any) -> bool:
    if not has_value(value):
        return True
    if isinstance(value, (list, tuple, set, frozenset, dict, str)):
        return len(value) == 0
    return False


def type_name(value: Any) -> str:
    """Plain string name of a data type given as str or DataType."""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)
