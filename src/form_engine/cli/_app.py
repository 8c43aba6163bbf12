"""Root Typer application for the form-engine command."""

from typing import Optional

import typer

from form_engine import __version__

app = typer.Typer(
    name="form-engine",
    help="Inspect form definitions, fill them in and validate saved answers.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"form-engine {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log cascade steps and validation summaries"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log fallbacks and errors"),
    json_output: bool = typer.Option(False, "--json", help="Print models, statuses and findings as JSON on stdout"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_print_version, is_eager=True, help="Show the engine version and exit"
    ),
):
    """Definitions are JSON or YAML files; saved models map tag -> {"value": ...}."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["json"] = json_output
