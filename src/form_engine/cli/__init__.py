"""CLI package - Typer-based command-line interface.

Usage:
    python -m form_engine.cli --help
    python -m form_engine.cli fill --help
"""

from form_engine.cli._app import app

# Register command modules (side-effect imports)
import form_engine.cli.cmd_inspect  # noqa: F401
import form_engine.cli.cmd_fill  # noqa: F401
import form_engine.cli.cmd_validate  # noqa: F401

__all__ = ["app"]
