"""
Field Decorator - builds the owned field tree of a form instance.

Responsibility: turn the raw schema sections of a definition into Section /
Subsection / Field / Option nodes with runtime metadata attached:
- UI binding (uiField) looked up by tag
- Component classification via the component lookup
- Compiled regular-expression patterns
- Parent links (as tag references) for nested fields and options

The raw sections are deep-copied before anything is built, so two instances
of one definition never share field state and the caller's schema is never
altered. The one intentional side effect is on the definition's uiSchema:
tags listed in ``component_overrides`` get a ``{"component": {"type": ...}}``
entry, which is how synthesized fields choose their component.
"""

import copy
import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple

from form_engine.config.components import FormConfig
from form_engine.errors import DuplicateTagError, MissingTypeError
from form_engine.fields import Field, Option, Section, Subsection

logger = logging.getLogger(__name__)

# Schema keys that become Field attributes; everything else lands in properties
_FIELD_KEYS = {
    "tag",
    "type",
    "id",
    "label",
    "pattern",
    "fields",
    "options",
    "showCondition",
    "defaultValueConditions",
    "calc",
    "definition",
}
_OPTION_KEYS = {"id", "label", "fields", "defaultValueConditions"}


def _sort_key(section: Mapping[str, Any]) -> Tuple[bool, Any]:
    order = section.get("sortOrder")
    return (order is None, order if order is not None else 0)


class FieldDecorator:
    """Builds decorated field trees and the flat tag index."""

    def __init__(
        self,
        ui_schema: Dict[str, Any],
        form_config: Optional[FormConfig] = None,
        component_overrides: Optional[Mapping[str, str]] = None,
    ):
        """
        Args:
            ui_schema: The definition's uiSchema (mutated only for overrides)
            form_config: Component lookup (defaults to FormConfig())
            component_overrides: tag -> component key for synthesized fields
        """
        self.ui_schema = ui_schema
        self.form_config = form_config or FormConfig()
        self.component_overrides = dict(component_overrides or {})
        self.fields: Dict[str, Field] = {}
        self._seen: Set[str] = set()

    def decorate(self, raw_sections: List[Dict[str, Any]]) -> Tuple[List[Section], Dict[str, Field]]:
        """
        Decorate every section of a schema.

        Args:
            raw_sections: schema["sections"] from the definition (not modified)

        Returns:
            (sections sorted by sortOrder, flat tag -> Field index)

        Raises:
            DuplicateTagError: If a tag appears twice anywhere in the tree
            MissingTypeError: If a field has no type
        """
        sections_copy = copy.deepcopy(sorted(raw_sections or [], key=_sort_key))

        sections = []
        for raw_section in sections_copy:
            subsections = []
            for raw_subsection in raw_section.get("subsections") or []:
                subsection_fields = {}
                for tag, raw_field in (raw_subsection.get("fields") or {}).items():
                    subsection_fields[tag] = self.decorate_field(raw_field, tag)
                subsections.append(
                    Subsection(
                        title=raw_subsection.get("title"),
                        fields=subsection_fields,
                        properties={
                            k: v for k, v in raw_subsection.items() if k not in ("title", "fields")
                        },
                    )
                )
            sections.append(
                Section(
                    title=raw_section.get("title"),
                    sort_order=raw_section.get("sortOrder"),
                    subsections=subsections,
                    properties={
                        k: v
                        for k, v in raw_section.items()
                        if k not in ("title", "sortOrder", "subsections")
                    },
                )
            )

        logger.debug(f"Decorated {len(sections)} section(s), {len(self.fields)} field(s)")
        return sections, self.fields

    def decorate_field(
        self,
        raw: Mapping[str, Any],
        tag: str,
        parent_tag: Optional[str] = None,
        parent_option_id: Any = None,
    ) -> Field:
        """Decorate one field and, recursively, its children and options."""
        if tag in self._seen:
            raise DuplicateTagError(tag)
        if not raw.get("type"):
            raise MissingTypeError(tag)
        self._seen.add(tag)

        field = Field(
            tag=tag,
            type=raw["type"],
            id=raw.get("id"),
            label=raw.get("label"),
            parent_tag=parent_tag,
            parent_option_id=parent_option_id,
            show_condition=raw.get("showCondition"),
            default_value_conditions=raw.get("defaultValueConditions"),
            calc=bool(raw.get("calc", False)),
            definition=raw.get("definition"),
            properties={k: v for k, v in raw.items() if k not in _FIELD_KEYS},
        )

        if tag in self.component_overrides:
            field.ui_field = self._add_component_to_ui_schema(tag, self.component_overrides[tag])
        else:
            field.ui_field = self.ui_schema.get(tag) or {}

        field.options = self._options(raw, tag) if raw.get("options") is not None else None

        field.component_type = self.form_config.get_component_type_by_field(field, field.ui_field)
        field.component = self.form_config.get_component_config(field.type, field.component_type)

        pattern = raw.get("pattern")
        field.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern

        if raw.get("fields") is not None:
            field.fields = self._children(raw["fields"], parent_tag=tag)

        self.fields[tag] = field
        return field

    def _options(self, raw: Mapping[str, Any], tag: str) -> List[Option]:
        options = []
        for raw_option in raw.get("options") or []:
            if not isinstance(raw_option, Mapping):
                options.append(Option(id=raw_option, parent_tag=tag))
                continue
            option = Option(
                id=raw_option.get("id"),
                parent_tag=tag,
                label=raw_option.get("label"),
                default_value_conditions=raw_option.get("defaultValueConditions"),
                properties={k: v for k, v in raw_option.items() if k not in _OPTION_KEYS},
            )
            if raw_option.get("fields"):
                option.fields = self._children(
                    raw_option["fields"], parent_tag=tag, parent_option_id=option.id
                )
            options.append(option)
        return options

    def _children(
        self,
        children: Mapping[str, Any],
        parent_tag: str,
        parent_option_id: Any = None,
    ) -> Dict[str, Field]:
        return {
            child_tag: self.decorate_field(child, child_tag, parent_tag, parent_option_id)
            for child_tag, child in children.items()
        }

    def _add_component_to_ui_schema(self, tag: str, component_key: str) -> Dict[str, Any]:
        """
        Register a component for a synthesized field in the uiSchema.

        Most fields already have a uiSchema entry; fields converted from
        domain objects do not, so the component is recorded here instead of
        in the translation step.
        """
        ui_field = self.ui_schema.get(tag)
        if not ui_field:
            ui_field = {}
            self.ui_schema[tag] = ui_field
        ui_field["component"] = {"type": component_key}
        return ui_field
