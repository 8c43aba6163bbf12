"""Engine configuration schema and loader.

Settings that change how a FormInstance behaves at runtime. They can be
given in code, loaded from a YAML file, or read from environment variables.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Union

import yaml
from pydantic import BaseModel, ValidationError

from form_engine.errors import FormEngineError

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}


class EngineConfig(BaseModel):
    """Runtime configuration for form instances.

    Attributes:
        live_validation: Re-run validation after every update_field call.
        check_trigger_cycles: Reject definitions whose trigger maps form a
            cycle at construction time instead of recursing without bound.
        validate_on_init: Run validation once when the instance is built.

    Example:
        >>> config = EngineConfig(live_validation=False)
    """

    live_validation: bool = True
    check_trigger_cycles: bool = False
    validate_on_init: bool = True

    model_config = {"extra": "forbid"}

    @classmethod
    def from_env(cls, prefix: str = "FORM_ENGINE_") -> "EngineConfig":
        """Create config from environment variables.

        Environment variables:
            {prefix}LIVE_VALIDATION: "true"/"false"
            {prefix}CHECK_TRIGGER_CYCLES: "true"/"false"
            {prefix}VALIDATE_ON_INIT: "true"/"false"

        Args:
            prefix: Environment variable prefix (default: FORM_ENGINE_)

        Returns:
            EngineConfig with values from environment
        """
        kwargs: Dict[str, Any] = {}
        for name in cls.model_fields:
            raw = os.environ.get(f"{prefix}{name.upper()}")
            if raw is not None:
                kwargs[name] = raw.strip().lower() in _TRUE_VALUES

        return cls(**kwargs)


def load_engine_config(path: Union[str, Path]) -> EngineConfig:
    """Load engine configuration from a YAML file.

    A missing file yields the defaults.

    Raises:
        FormEngineError: If the file is not valid YAML or has unknown keys.
    """
    config_path = Path(path)
    if not config_path.exists():
        logger.debug(f"No engine config at {config_path}, using defaults")
        return EngineConfig()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise FormEngineError(f"Invalid YAML in engine config {config_path}: {e}")

    try:
        return EngineConfig(**data)
    except (TypeError, ValidationError) as e:
        raise FormEngineError(f"Invalid engine config {config_path}: {e}")
