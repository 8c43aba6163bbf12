"""Fill command - apply edits to a form and show the resulting model."""

import json
from pathlib import Path
from typing import List, Optional

import typer

from form_engine.cli._app import app
from form_engine.cli._common import build_instance, parse_assignment, setup_logging, status_rows
from form_engine.cli._console import emit_json, output_model, output_statuses, print_err, print_ok
from form_engine.errors import FormEngineError


@app.command("fill", help="Apply tag=value edits and print the resulting model.")
def fill(
    ctx: typer.Context,
    definition: Path = typer.Argument(..., help="Definition file (JSON or YAML)"),
    model: Optional[Path] = typer.Option(None, "--model", "-m", help="Saved model to start from"),
    assignments: List[str] = typer.Option([], "--set", "-s", help="Edit to apply, as tag=value (repeatable)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the resulting model to this JSON file"),
    config: Optional[Path] = typer.Option(None, "--config", help="Engine config YAML"),
):
    """Edits are applied in order, each running its cascades like a UI edit."""
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])

    edits = [parse_assignment(a) for a in assignments]
    try:
        instance = build_instance(definition, model, config)
        for tag, value in edits:
            instance.update_field(tag, value)
        instance.validate()
    except FormEngineError as e:
        print_err(str(e))
        raise typer.Exit(code=1)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, "w", encoding="utf-8") as f:
            json.dump(instance.get_model(), f, indent=2, ensure_ascii=False, default=str)
        if not ctx.obj["json"]:
            print_ok(f"Saved model to {output}")

    if ctx.obj["json"]:
        emit_json({
            "model": dict(instance.get_model()),
            "statuses": status_rows(instance),
            "has_error": instance.has_error(),
        })
        return

    output_model(dict(instance.get_model()), ctx=ctx)
    output_statuses(status_rows(instance), ctx=ctx)
