"""
NRS CLI Main Entry Point

The main Typer application that assembles the command groups.
"""

import logging
from typing import Annotated

import structlog
import typer
from rich.panel import Panel
from rich.text import Text

from nrs import __version__
from nrs.cli.common import console
from nrs.config import load_settings

# Configure structlog
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer(colors=True),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)

app = typer.Typer(
    name="nrs",
    help="NRS - New Relic Synthetics monitors and alert conditions",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(
            Panel(
                Text.from_markup(
                    f"[bold cyan]NRS[/bold cyan] v{__version__}\n"
                    "[dim]New Relic Synthetics client[/dim]"
                ),
                title="Version",
                border_style="cyan",
            )
        )
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
) -> None:
    """
    NRS - Inspect New Relic Synthetics monitors and alert conditions.

    Credentials are read from NRS_API_KEY.
    """
    level = logging.DEBUG if verbose else logging.getLevelName(load_settings().log_level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level)


# Import and register sub-commands
from nrs.cli.conditions import app as conditions_app
from nrs.cli.monitors import app as monitors_app

app.add_typer(monitors_app, name="monitors", help="Inspect and delete synthetics monitors")
app.add_typer(conditions_app, name="conditions", help="Inspect synthetics alert conditions")


if __name__ == "__main__":
    app()
