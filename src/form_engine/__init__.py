"""
Form Engine - runtime for declarative, data-driven forms.

This package provides:
- runtime: decorated field trees, the response model, calculation and
  default-value cascades, show conditions
- validation: statuses, results and severity rollups
- expressions: json-logic based evaluation of conditions and calculations
- config: component lookup and engine settings
- cli: inspect, fill and validate definitions from the command line
"""

__version__ = "0.1.0"

from form_engine.config import EngineConfig, FormConfig
from form_engine.errors import (
    DefinitionLoadError,
    DuplicateTagError,
    FormEngineError,
    InvalidDefinitionError,
    MissingTypeError,
    TriggerCycleError,
    UnknownFieldError,
)
from form_engine.fields import DataType, Field, Option, Section, Subsection
from form_engine.loader import load_definition, load_model
from form_engine.runtime import FormInstance, create_form_instance
from form_engine.validation import ValidationStatus

__all__ = [
    "DataType",
    "DefinitionLoadError",
    "DuplicateTagError",
    "EngineConfig",
    "Field",
    "FormConfig",
    "FormEngineError",
    "FormInstance",
    "InvalidDefinitionError",
    "MissingTypeError",
    "Option",
    "Section",
    "Subsection",
    "TriggerCycleError",
    "UnknownFieldError",
    "ValidationStatus",
    "create_form_instance",
    "load_definition",
    "load_model",
]
