"""
Loading of form definitions and saved response models from disk.

Files may be JSON or YAML. Definitions are checked for the expected shape and
returned as plain dicts, ready to pass to FormInstance.

Expected definition structure:
    {
        "id": str,
        "schema": {"sections": [{"subsections": [{"fields": {tag: {...}}}]}]},
        "uiSchema": {...},
        "calcExpressionMap": {...},
        "calcTriggerMap": {...},
        "defaultValueTriggerMap": {...}
    }
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from form_engine.errors import DefinitionLoadError

logger = logging.getLogger(__name__)


class _SubsectionShape(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: Optional[str] = None
    fields: Dict[str, Dict[str, Any]] = Field(default_factory=dict)


class _SectionShape(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: Optional[str] = None
    sortOrder: Optional[float] = None
    subsections: List[_SubsectionShape] = Field(default_factory=list)


class _SchemaShape(BaseModel):
    model_config = ConfigDict(extra="allow")

    sections: List[_SectionShape] = Field(..., min_length=1)


class FormDefinitionShape(BaseModel):
    """Structural model of a definition document (used for checking only)."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    form_schema: _SchemaShape = Field(..., alias="schema")
    uiSchema: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    calcExpressionMap: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    calcTriggerMap: Dict[str, List[str]] = Field(default_factory=dict)
    defaultValueTriggerMap: Dict[str, List[str]] = Field(default_factory=dict)


def _read_document(file_path: Union[str, Path], kind: str) -> Any:
    path = Path(file_path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                return yaml.safe_load(f)
            return json.load(f)
    except FileNotFoundError:
        raise DefinitionLoadError(f"{kind} file not found: {file_path}")
    except json.JSONDecodeError as e:
        raise DefinitionLoadError(f"Invalid JSON in {kind.lower()} file: {e}")
    except yaml.YAMLError as e:
        raise DefinitionLoadError(f"Invalid YAML in {kind.lower()} file: {e}")


def check_definition(definition: Any) -> Dict[str, Any]:
    """
    Check that a definition has the expected structure.

    Args:
        definition: Parsed definition document

    Returns:
        The same definition object, unchanged

    Raises:
        DefinitionLoadError: If the structure is wrong
    """
    if not isinstance(definition, dict):
        raise DefinitionLoadError("Definition must be a mapping")

    try:
        FormDefinitionShape.model_validate(definition)
    except ValidationError as e:
        raise DefinitionLoadError(f"Invalid form definition: {e}")

    return definition


def load_definition(file_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load and check a form definition file.

    Raises:
        DefinitionLoadError: If the file cannot be read or has the wrong structure
    """
    definition = check_definition(_read_document(file_path, "Definition"))
    logger.debug(f"Loaded definition {definition.get('id')!r} from {file_path}")
    return definition


def load_model(file_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a saved response model (tag -> {"value": ...}).

    Raises:
        DefinitionLoadError: If the file cannot be read or is not a mapping
    """
    model = _read_document(file_path, "Model")
    if model is None:
        return {}
    if not isinstance(model, dict):
        raise DefinitionLoadError("Model must be a mapping of tag -> entry")
    return model
