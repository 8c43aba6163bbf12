"""Rich consoles and renderers for form models, field trees and statuses."""

import json as json_mod
from typing import Any, Dict, List

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from form_engine.validation.service import ValidationStatus

# Messages and rendered tables go to stderr; --json data goes to stdout
console = Console(stderr=True)
stdout_console = Console()

STATUS_STYLES: Dict[str, str] = {
    ValidationStatus.OK.value: "green",
    ValidationStatus.WARNING.value: "yellow",
    ValidationStatus.ERROR.value: "bold red",
}


def print_ok(msg: str) -> None:
    console.print(f"[green]✓[/green] {msg}")


def print_err(msg: str) -> None:
    console.print(f"[red]✗[/red] {msg}")


def styled_status(status: str) -> str:
    """Status name wrapped in its Rich colour markup."""
    style = STATUS_STYLES.get(status)
    return f"[{style}]{status}[/{style}]" if style else status


def emit_json(data: Any) -> None:
    """Print data as JSON on stdout (pipeable to jq)."""
    stdout_console.print_json(data=data, default=str)


def output_model(model: Dict[str, Any], *, ctx: typer.Context, title: str = "Model") -> None:
    """Show a response model as JSON (stdout) or inside a Rich panel."""
    if ctx.obj.get("json"):
        emit_json(model)
        return

    formatted = json_mod.dumps(model, indent=2, ensure_ascii=False, default=str)
    console.print(Panel(formatted or "{}", title=title, border_style="blue"))


def render_rows(rows: List[Dict[str, Any]], *, title: str) -> None:
    """Render dict rows as a table; a "status" column is coloured by severity."""
    if not rows:
        console.print(f"[dim]{title}: nothing to show[/dim]")
        return

    table = Table(title=title, show_lines=False)
    for col in rows[0]:
        table.add_column(col)
    for row in rows:
        table.add_row(*[
            styled_status(str(value)) if col == "status" else str(value)
            for col, value in row.items()
        ])
    console.print(table)


def output_statuses(rows: List[Dict[str, Any]], *, ctx: typer.Context) -> None:
    """Show section/subsection status rows, subsections indented under sections."""
    if ctx.obj.get("json"):
        emit_json(rows)
        return

    display = [
        {
            "section": row["section"] if not row["subsection"] else "",
            "subsection": row["subsection"],
            "status": row["status"],
        }
        for row in rows
    ]
    render_rows(display, title="Status")
