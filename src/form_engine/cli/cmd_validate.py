"""Validate command - report validation status of a saved model."""

from pathlib import Path
from typing import Optional

import typer

from form_engine.cli._app import app
from form_engine.cli._common import build_instance, setup_logging, status_rows
from form_engine.cli._console import emit_json, output_statuses, print_err, print_ok, render_rows
from form_engine.errors import FormEngineError
from form_engine.validation.service import ValidationStatus


@app.command("validate", help="Validate a model against a definition (exit 1 on errors).")
def validate(
    ctx: typer.Context,
    definition: Path = typer.Argument(..., help="Definition file (JSON or YAML)"),
    model: Optional[Path] = typer.Option(None, "--model", "-m", help="Saved model to validate"),
    config: Optional[Path] = typer.Option(None, "--config", help="Engine config YAML"),
):
    """Print section and subsection statuses plus every failing field."""
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])

    try:
        instance = build_instance(definition, model, config)
        instance.validate()
    except FormEngineError as e:
        print_err(str(e))
        raise typer.Exit(code=1)

    results = instance.get_validation_results()
    findings = {
        tag: result
        for tag, result in results.to_dict().items()
        if result["status"] != ValidationStatus.OK.value
    }

    if ctx.obj["json"]:
        emit_json({"statuses": status_rows(instance), "findings": findings, "has_error": instance.has_error()})
    else:
        output_statuses(status_rows(instance), ctx=ctx)
        rows = [
            {"tag": tag, "status": r["status"], "messages": "; ".join(r["messages"])}
            for tag, r in findings.items()
        ]
        if rows:
            render_rows(rows, title="Findings")
        else:
            print_ok("No validation findings")

    if instance.has_error():
        raise typer.Exit(code=1)
