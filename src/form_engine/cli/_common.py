"""Shared helpers for CLI commands."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import typer
import yaml
from rich.logging import RichHandler

from form_engine.cli._console import console
from form_engine.config.engine import EngineConfig, load_engine_config
from form_engine.loader import load_definition, load_model
from form_engine.runtime.instance import FormInstance

logger = logging.getLogger(__name__)


def setup_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging with Rich handler."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=True,
        rich_tracebacks=True,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def parse_assignment(text: str) -> Tuple[str, Any]:
    """
    Parse a "tag=value" assignment from the command line.

    The value is read as a YAML scalar or flow sequence, so "5" is a number,
    "true" a boolean, "[a, b]" a list and "" (or "null") clears the field.

    Raises:
        typer.BadParameter: If there is no "=" or the tag is empty
    """
    tag, sep, raw = text.partition("=")
    tag = tag.strip()
    if not sep or not tag:
        raise typer.BadParameter(f"Expected tag=value, got '{text}'")

    if raw.strip() == "":
        return tag, None
    try:
        return tag, yaml.safe_load(raw)
    except yaml.YAMLError:
        return tag, raw


def build_instance(
    definition_path: Path,
    model_path: Optional[Path] = None,
    config_path: Optional[Path] = None,
) -> FormInstance:
    """Load a definition (and optional saved model) and build an instance."""
    config = load_engine_config(config_path) if config_path else EngineConfig.from_env()
    definition = load_definition(definition_path)
    model = load_model(model_path) if model_path else {}
    return FormInstance(definition, model, config=config)


def status_rows(instance: FormInstance) -> List[Dict[str, Any]]:
    """One row per section and subsection with its rolled-up status."""
    rows = []
    for section in instance.get_sections():
        rows.append({
            "section": section.title or "",
            "subsection": "",
            "status": instance.get_section_status(section).value,
        })
        for subsection in section.subsections:
            rows.append({
                "section": section.title or "",
                "subsection": subsection.title or "",
                "status": instance.get_subsection_status(subsection).value,
            })
    return rows
