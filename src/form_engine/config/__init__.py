"""Engine and component configuration."""

from form_engine.config.components import (
    ComponentConfig,
    ComponentType,
    FormConfig,
    UpdateStrategy,
)
from form_engine.config.engine import EngineConfig, load_engine_config

__all__ = [
    "ComponentConfig",
    "ComponentType",
    "FormConfig",
    "UpdateStrategy",
    "EngineConfig",
    "load_engine_config",
]
