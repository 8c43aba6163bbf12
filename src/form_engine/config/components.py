"""
Component configuration lookup.

Maps a field's data type and UI annotation to a rendering component and the
update behavior that component applies when a value arrives for it.

The set of update behaviors is closed:
- REPLACE -> the incoming value overwrites the current one
- TOGGLE  -> each incoming item flips its membership in the current list
             (checkbox groups)
- APPEND  -> each incoming item is added to the current list if missing
             (multi-selects)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from form_engine.fields import DataType, has_value, type_name

logger = logging.getLogger(__name__)


class ComponentType(str, Enum):
    """Rendering components known to the engine."""

    CHECKBOX = "CHECKBOX"
    TEXT = "TEXT"
    TEXTAREA = "TEXTAREA"
    NUMBER = "NUMBER"
    DATE = "DATE"
    RADIO = "RADIO"
    SELECT = "SELECT"
    MULTI_SELECT = "MULTI_SELECT"
    CHECKBOX_GROUP = "CHECKBOX_GROUP"


class UpdateStrategy(str, Enum):
    REPLACE = "replace"
    TOGGLE = "toggle"
    APPEND = "append"


def _as_items(value: Any) -> List[Any]:
    if not has_value(value):
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


@dataclass(frozen=True)
class ComponentConfig:
    """Capabilities of one rendering component for one data type."""

    component_type: ComponentType
    data_type: str
    update_strategy: UpdateStrategy = UpdateStrategy.REPLACE

    def on_update(self, field: Any, current_value: Any, value: Any) -> Any:
        """
        Merge an incoming value into the field's current value.

        Args:
            field: The decorated field receiving the value
            current_value: Value currently stored in the model (may be None)
            value: Incoming value (single item or collection)

        Returns:
            The value to store
        """
        if value is None:
            return None

        if self.update_strategy == UpdateStrategy.TOGGLE:
            merged = _as_items(current_value)
            for item in _as_items(value):
                if item in merged:
                    merged.remove(item)
                else:
                    merged.append(item)
            return merged

        if self.update_strategy == UpdateStrategy.APPEND:
            merged = _as_items(current_value)
            for item in _as_items(value):
                if item not in merged:
                    merged.append(item)
            return merged

        return value


# Components usable per data type; the first entry is the default.
COMPONENTS_BY_TYPE: Dict[str, List[ComponentType]] = {
    DataType.BOOLEAN.value: [ComponentType.CHECKBOX, ComponentType.RADIO, ComponentType.SELECT],
    DataType.NUMBER.value: [ComponentType.NUMBER, ComponentType.RADIO, ComponentType.SELECT],
    DataType.STRING.value: [
        ComponentType.TEXT,
        ComponentType.TEXTAREA,
        ComponentType.RADIO,
        ComponentType.SELECT,
    ],
    DataType.DATE.value: [ComponentType.DATE, ComponentType.TEXT],
    DataType.ARRAY.value: [ComponentType.CHECKBOX_GROUP, ComponentType.MULTI_SELECT],
}

UPDATE_STRATEGIES: Dict[ComponentType, UpdateStrategy] = {
    ComponentType.CHECKBOX_GROUP: UpdateStrategy.TOGGLE,
    ComponentType.MULTI_SELECT: UpdateStrategy.APPEND,
}


class FormConfig:
    """
    Default component lookup.

    Both lookups are pure functions of field metadata, so a single shared
    instance can serve any number of form instances.
    """

    def get_component_type_by_field(self, field: Any, ui_field: Optional[Dict[str, Any]]) -> ComponentType:
        """
        Resolve the component a field renders with.

        Args:
            field: Decorated field (type and options are read)
            ui_field: UI schema entry for the field's tag

        Returns:
            Explicit ui_field["component"]["type"] when known, else the type default
        """
        explicit = ((ui_field or {}).get("component") or {}).get("type")
        if explicit:
            try:
                return ComponentType(type_name(explicit).upper())
            except ValueError:
                logger.warning(
                    f"Unknown component '{explicit}' for field '{field.tag}', using default"
                )

        if field.type == DataType.STRING and field.options:
            return ComponentType.RADIO
        candidates = COMPONENTS_BY_TYPE.get(type_name(field.type))
        if candidates:
            return candidates[0]
        return ComponentType.TEXT

    def get_component_config(self, data_type: str, component_type: ComponentType) -> ComponentConfig:
        """Build the component descriptor for a (type, component) pair."""
        allowed: Iterable[ComponentType] = COMPONENTS_BY_TYPE.get(type_name(data_type), ())
        if allowed and component_type not in allowed:
            logger.debug(
                f"Component {component_type.value} is unusual for type {data_type}"
            )
        return ComponentConfig(
            component_type=component_type,
            data_type=type_name(data_type),
            update_strategy=UPDATE_STRATEGIES.get(component_type, UpdateStrategy.REPLACE),
        )
