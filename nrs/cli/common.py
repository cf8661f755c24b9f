"""Shared helpers for the CLI command groups."""

from __future__ import annotations

from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from nrs.config import load_settings
from nrs.synthetics.client import SyntheticsClient
from nrs.synthetics.errors import NRSError

console = Console()


def make_client() -> SyntheticsClient:
    """Build a client from NRS_* environment settings."""
    return SyntheticsClient(load_settings().to_client_config())


def fail(error: NRSError) -> NoReturn:
    """Print an error in red and exit with status 1."""
    console.print(f"[red]Error:[/red] {escape(str(error))}")
    raise typer.Exit(1)
