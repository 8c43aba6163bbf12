"""
Form Instance - a live, mutable form built from a declarative definition.

A definition is a mapping with:
- schema: {"sections": [...]} ordered sections -> subsections -> fields
- uiSchema: tag -> UI annotations
- calcExpressionMap: tag -> calculation spec
- calcTriggerMap: calc field id -> tags to recalculate
- defaultValueTriggerMap: tag -> tags whose default values depend on it

The instance combines the four runtime components:
1. Field Decorator (decorator) - owned field tree and tag index
2. Response Model Store (model_store) - the only way values change
3. Dependency Engine (dependencies) - calculation and default-value cascades
4. Visibility Evaluator (visibility) - show conditions
plus the Validation Orchestrator from form_engine.validation.

Typical use by a rendering layer:

    instance = create_form_instance(definition, saved_answers)
    instance.update_field("age", 42)
    instance.get_section_status(instance.get_sections()[0])
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, MutableMapping, Optional, Union

from form_engine.config.components import FormConfig
from form_engine.config.engine import EngineConfig
from form_engine.errors import InvalidDefinitionError, TriggerCycleError, UnknownFieldError
from form_engine.expressions.evaluator import IExpressionEvaluator, JsonLogicExpressionEvaluator
from form_engine.fields import Field, Option, Section, Subsection
from form_engine.runtime.decorator import FieldDecorator
from form_engine.runtime.dependencies import DependencyEngine, find_trigger_cycle
from form_engine.runtime.model_store import ResponseModelStore
from form_engine.runtime.visibility import VisibilityEvaluator
from form_engine.validation.orchestrator import ValidationOrchestrator, get_status
from form_engine.validation.results import ValidationResult, ValidationResults
from form_engine.validation.service import ValidationService
from form_engine.validation.validator import FormValidator, IValidator

logger = logging.getLogger(__name__)

# Marker for "use the default validator"; None means "no validation"
DEFAULT_VALIDATOR: Any = object()


class FormInstance:
    """One live form: decorated fields, a response model and validation state."""

    def __init__(
        self,
        definition: MutableMapping[str, Any],
        model: Optional[MutableMapping[str, Any]] = None,
        validator: Optional[IValidator] = DEFAULT_VALIDATOR,
        *,
        evaluator: Optional[IExpressionEvaluator] = None,
        form_config: Optional[FormConfig] = None,
        config: Optional[EngineConfig] = None,
        component_overrides: Optional[Mapping[str, str]] = None,
    ):
        """
        Build the instance. Construction either completes or raises.

        Args:
            definition: Form definition (only uiSchema may gain entries)
            model: Caller-owned response model, mutated in place
            validator: Validator to run; None disables validation
            evaluator: Expression evaluator (defaults to json-logic)
            form_config: Component lookup (defaults to FormConfig())
            config: Engine settings
            component_overrides: tag -> component key for synthesized fields

        Raises:
            InvalidDefinitionError: If the definition or its schema is missing/empty
            DuplicateTagError: If a tag is used twice
            MissingTypeError: If a field has no type
            TriggerCycleError: If cycle checks are enabled and the trigger maps loop
        """
        if not definition:
            raise InvalidDefinitionError("Form definition cannot be None or empty")
        if not definition.get("schema"):
            raise InvalidDefinitionError("Schema cannot be None or empty")

        self.definition = definition
        self.config = config or EngineConfig()
        self.evaluator = evaluator or JsonLogicExpressionEvaluator()
        self.store = ResponseModelStore(model)

        ui_schema = self.definition.get("uiSchema")
        if ui_schema is None:
            ui_schema = {}
            if component_overrides:
                self.definition["uiSchema"] = ui_schema
        decorator = FieldDecorator(
            ui_schema,
            form_config=form_config,
            component_overrides=component_overrides,
        )
        self.sections, self.fields = decorator.decorate(self.get_schema().get("sections") or [])

        if self.config.check_trigger_cycles:
            cycle = find_trigger_cycle(self.definition, self.fields)
            if cycle:
                raise TriggerCycleError(cycle)

        self.dependencies = DependencyEngine(self, self.evaluator)
        self.visibility = VisibilityEvaluator(self, self.evaluator)
        self.validation = ValidationOrchestrator(
            FormValidator() if validator is DEFAULT_VALIDATOR else validator
        )

        logger.debug(
            f"Form instance '{self.get_id()}' ready: {len(self.sections)} section(s), "
            f"{len(self.fields)} field(s)"
        )

        if self.config.validate_on_init:
            self.validate()

    # --- definition accessors -------------------------------------------------

    def get_id(self) -> Optional[str]:
        return self.definition.get("id")

    def get_form_title(self) -> Optional[str]:
        return self.definition.get("title")

    def get_form_icon(self) -> Optional[str]:
        return self.definition.get("icon")

    def get_form_icon_prefix(self) -> Optional[str]:
        return self.definition.get("iconPrefix")

    def get_schema(self) -> Dict[str, Any]:
        return self.definition["schema"]

    def get_ui_schema(self) -> Dict[str, Any]:
        return self.definition.get("uiSchema") or {}

    def get_ui_schema_field(self, tag: str) -> Optional[Dict[str, Any]]:
        return self.get_ui_schema().get(tag)

    def get_calc_expression_map(self) -> Dict[str, Any]:
        """
        Calculation specs keyed by tag.

        Each entry has a "type" (the operation) and a list of "expressions"
        combined by it; see form_engine.expressions for the operand forms.
        """
        return self.definition.get("calcExpressionMap") or {}

    def get_calc_trigger_map(self) -> Dict[str, List[str]]:
        """Tags to recalculate, keyed by the id of the calc field that changed."""
        return self.definition.get("calcTriggerMap") or {}

    def get_default_value_trigger_map(self) -> Dict[str, List[str]]:
        """Tags whose default values are re-run, keyed by the tag that changed."""
        return self.definition.get("defaultValueTriggerMap") or {}

    def get_calc_expression_by_tag(self, tag: str) -> Optional[Dict[str, Any]]:
        return self.get_calc_expression_map().get(tag)

    def is_live_validation(self) -> bool:
        if "liveValidation" in self.definition:
            return bool(self.definition["liveValidation"])
        return self.config.live_validation

    # --- field tree -----------------------------------------------------------

    def get_sections(self) -> List[Section]:
        return self.sections

    def get_fields(self) -> Dict[str, Field]:
        return self.fields

    def get_field(self, tag: str) -> Optional[Field]:
        return self.fields.get(tag)

    def get_parent(self, node: Union[Field, Option]) -> Optional[Union[Field, Option]]:
        """Owner of a field (a field or an option) or of an option (a field)."""
        parent = self.get_field(node.parent_tag) if node.parent_tag else None
        if parent is None or not isinstance(node, Field) or node.parent_option_id is None:
            return parent
        for option in parent.options or []:
            if option.id == node.parent_option_id:
                return option
        return parent

    # --- response model -------------------------------------------------------

    def get_model(self) -> MutableMapping[str, Any]:
        return self.store.model

    def get_model_value(self, tag: str) -> Any:
        return self.store.get_model_value(tag)

    def set_model_value(self, tag: str, value: Any, field: Field) -> None:
        self.store.set_model_value(tag, value, field)

    def get_expression_data(self) -> Dict[str, Any]:
        return self.store.get_expression_data()

    def update_field(self, tag: str, value: Any) -> Any:
        """
        Apply an edit coming from the rendering layer.

        The value goes through the field's component (so checkbox groups
        toggle and multi-selects append), is stored, drives both cascades and,
        with live validation, refreshes validation.

        Returns:
            The value actually stored

        Raises:
            UnknownFieldError: If no field has this tag
        """
        field = self.get_field(tag)
        if field is None:
            raise UnknownFieldError(tag)

        value = field.component.on_update(field, self.get_model_value(tag), value)
        self.set_model_value(tag, value, field)
        self.calculate_fields(field)
        self.trigger_default_value_evaluation(tag)

        if self.is_live_validation():
            self.validate()
        return value

    # --- dependency cascades --------------------------------------------------

    def calculate_fields(self, field: Field) -> None:
        self.dependencies.calculate_fields(field)

    def trigger_default_value_evaluation(self, tag: str) -> None:
        self.dependencies.trigger_default_value_evaluation(tag)

    def evaluate_default_value_conditions(self, tags: Iterable[str]) -> None:
        self.dependencies.evaluate_default_value_conditions(tags)

    # --- visibility -----------------------------------------------------------

    def evaluate_show_condition(self, field: Field, tag: str) -> bool:
        return self.visibility.evaluate_show_condition(field, tag)

    def is_visible(self, field: Field) -> bool:
        return self.visibility.is_visible(field)

    # --- validation -----------------------------------------------------------

    @property
    def validator(self) -> Optional[IValidator]:
        return self.validation.validator

    def has_validator(self) -> bool:
        return self.validation.has_validator()

    def validate(self) -> None:
        self.validation.validate(self)

    def get_validation_results(self) -> ValidationResults:
        return self.validation.results

    def get_validation_result_by_tag(self, tag: str) -> ValidationResult:
        return self.validation.get_result_by_tag(tag)

    def get_validation_status_by_tag(self, tag: str) -> Any:
        return self.validation.get_status_by_tag(tag)

    def has_error(self, tag: Optional[str] = None) -> bool:
        """Overall error state, or the error state of one tag."""
        if not tag:
            return self.validation.results.has_error()
        return self.is_error(self.get_validation_status_by_tag(tag))

    def is_error(self, status: Any) -> bool:
        return ValidationService.is_error(status)

    def field_has_error(self, tag: str) -> bool:
        return self.has_error(tag)

    def get_status(self, items: Iterable[Any], status_of: Callable[[Any], Any]) -> Any:
        return get_status(items, status_of)

    def get_subsection_status(self, subsection: Subsection) -> Any:
        return self.validation.get_subsection_status(subsection)

    def get_section_status(self, section: Section) -> Any:
        return self.validation.get_section_status(section)

    def section_has_error(self, section: Section) -> bool:
        return self.is_error(self.get_section_status(section))


def create_form_instance(
    definition: MutableMapping[str, Any],
    model: Optional[MutableMapping[str, Any]] = None,
    validator: Optional[IValidator] = DEFAULT_VALIDATOR,
    **kwargs: Any,
) -> FormInstance:
    """Factory for FormInstance; keyword arguments are passed through."""
    return FormInstance(definition, model, validator, **kwargs)
