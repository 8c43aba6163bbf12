"""
Runtime components of a form instance.

1. Field Decorator - decorator
2. Response Model Store - model_store
3. Dependency Engine - dependencies
4. Visibility Evaluator - visibility
5. Validation Orchestrator - form_engine.validation.orchestrator

FormInstance (instance) wires them together behind one API.
"""

from form_engine.runtime.decorator import FieldDecorator
from form_engine.runtime.dependencies import (
    DependencyEngine,
    find_trigger_cycle,
    resolve_default_value_conditions,
)
from form_engine.runtime.instance import DEFAULT_VALIDATOR, FormInstance, create_form_instance
from form_engine.runtime.model_store import ResponseModelStore, should_clear_children
from form_engine.runtime.visibility import VisibilityEvaluator

__all__ = [
    "DEFAULT_VALIDATOR",
    "DependencyEngine",
    "FieldDecorator",
    "FormInstance",
    "ResponseModelStore",
    "VisibilityEvaluator",
    "create_form_instance",
    "find_trigger_cycle",
    "resolve_default_value_conditions",
    "should_clear_children",
]
