"""Inspect command - show the decorated field tree of a definition."""

from pathlib import Path
from typing import Any, Dict, List

import typer

from form_engine.cli._app import app
from form_engine.cli._common import setup_logging
from form_engine.cli._console import console, emit_json, print_err, render_rows
from form_engine.errors import FormEngineError
from form_engine.fields import Field
from form_engine.loader import load_definition
from form_engine.runtime.instance import FormInstance


def _field_rows(field: Field, section: str, subsection: str, depth: int = 0) -> List[Dict[str, Any]]:
    markers = []
    if field.show_condition:
        markers.append("show")
    if field.calc:
        markers.append("calc")
    if field.default_value_conditions or any(o.default_value_conditions for o in field.options or []):
        markers.append("default")

    rows = [{
        "section": section,
        "subsection": subsection,
        "tag": "  " * depth + field.tag,
        "type": field.type,
        "component": field.component_type.value if field.component_type else "",
        "markers": ",".join(markers),
    }]
    for child in (field.fields or {}).values():
        rows.extend(_field_rows(child, section, subsection, depth + 1))
    for option in field.options or []:
        for child in option.fields.values():
            rows.extend(_field_rows(child, section, subsection, depth + 1))
    return rows


@app.command("inspect", help="List sections, subsections and fields of a definition.")
def inspect_definition(
    ctx: typer.Context,
    definition: Path = typer.Argument(..., help="Definition file (JSON or YAML)"),
):
    """Show every decorated field with its type, component and markers."""
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])

    try:
        instance = FormInstance(load_definition(definition), {}, validator=None)
    except FormEngineError as e:
        print_err(str(e))
        raise typer.Exit(code=1)

    rows = []
    for section in instance.get_sections():
        for subsection in section.subsections:
            for field in subsection.fields.values():
                rows.extend(_field_rows(field, section.title or "", subsection.title or ""))

    if ctx.obj["json"]:
        emit_json(rows)
        return

    title = instance.get_form_title() or instance.get_id() or str(definition)
    console.print(f"\n[bold]{title}[/bold]: {len(instance.get_fields())} field(s)\n")
    render_rows(rows, title="Fields")
