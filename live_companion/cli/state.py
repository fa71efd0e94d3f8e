"""Shared CLI state: console, app, logging setup."""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

# Rich console for all output
console = Console()

# Typer app
app = typer.Typer(
    name="live-companion",
    help="Keep a live agent session in sync with persona, profile and UI state.",
    epilog=(
        "Examples:\n"
        "  live-companion presets\n"
        "  live-companion config --agent charlotte --grounding\n"
        "  live-companion demo --voice Kore\n"
        "  live-companion demo --fail-connect --log-level INFO"
    ),
    add_completion=False,
)


def configure_logging(level: str) -> None:
    """Route library logging through Rich at ``level``."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, rich_tracebacks=True)],
        force=True,
    )
