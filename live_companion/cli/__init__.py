"""CLI package for live-companion."""

from dotenv import load_dotenv

# Load .env before settings are read so env vars are available for defaults
load_dotenv()

from .state import app, configure_logging, console  # noqa: E402

# Import command modules so their @app.command() decorators register
from . import commands as _commands  # noqa: E402,F401


def cli() -> None:
    """CLI entrypoint."""
    app(prog_name="live-companion")


__all__ = ["app", "cli", "configure_logging", "console"]


if __name__ == "__main__":
    cli()
