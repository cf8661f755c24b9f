"""
Monitor CLI Commands

Commands for listing, inspecting and deleting synthetics monitors.
"""

from __future__ import annotations

import asyncio
import json
from typing import Annotated

import typer
from rich.panel import Panel
from rich.table import Table

from nrs.cli import common
from nrs.cli.common import console
from nrs.provider.monitor import script_fingerprint
from nrs.synthetics.errors import NRSError
from nrs.synthetics.models import Monitor, MonitorList
from nrs.synthetics.options import OPTION_FIELDS

app = typer.Typer(
    name="monitors",
    help="Inspect and delete synthetics monitors",
    no_args_is_help=True,
)


async def _list(offset: int, limit: int) -> MonitorList:
    async with common.make_client() as client:
        return await client.get_all_monitors(offset=offset, limit=limit)


async def _get(monitor_id: str) -> Monitor:
    async with common.make_client() as client:
        return await client.get_monitor(monitor_id)


async def _script(monitor_id: str) -> str:
    async with common.make_client() as client:
        return await client.get_monitor_script(monitor_id)


async def _delete(monitor_id: str) -> None:
    async with common.make_client() as client:
        await client.delete_monitor(monitor_id)


@app.command("list")
def list_monitors(
    offset: Annotated[int, typer.Option("--offset", help="Records to skip")] = 0,
    limit: Annotated[int, typer.Option("--limit", help="Page size")] = 0,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output results as JSON"),
    ] = False,
) -> None:
    """
    List monitors in the account.

    Example:
        nrs monitors list
        nrs monitors list --limit 20 --json
    """
    try:
        result = asyncio.run(_list(offset, limit))
    except NRSError as e:
        common.fail(e)

    if json_output:
        console.print_json(
            json.dumps(
                [m.model_dump(mode="json", by_alias=True) for m in result.monitors],
                default=str,
            )
        )
        return

    if not result.monitors:
        console.print("[yellow]No monitors found[/yellow]")
        return

    table = Table(
        title=f"Monitors ({result.count} total)",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Type", style="magenta")
    table.add_column("Frequency", style="green")
    table.add_column("Status", style="yellow")

    for monitor in result.monitors:
        table.add_row(
            monitor.id,
            monitor.name,
            monitor.type.value,
            f"{monitor.frequency}m",
            monitor.status.value,
        )

    console.print(table)


@app.command("get")
def get_monitor(
    monitor_id: Annotated[str, typer.Argument(help="Monitor ID")],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output result as JSON"),
    ] = False,
) -> None:
    """
    Show a single monitor.

    Example:
        nrs monitors get 0a1b2c3d-...
    """
    try:
        monitor = asyncio.run(_get(monitor_id))
    except NRSError as e:
        common.fail(e)

    if json_output:
        console.print_json(json.dumps(monitor.model_dump(mode="json", by_alias=True)))
        return

    info_text = (
        f"[bold cyan]Name:[/bold cyan] {monitor.name}\n"
        f"[bold cyan]Type:[/bold cyan] {monitor.type.value}\n"
        f"[bold cyan]Status:[/bold cyan] {monitor.status.value}\n"
        f"[bold cyan]Frequency:[/bold cyan] {monitor.frequency}m\n"
        f"[bold cyan]URI:[/bold cyan] {monitor.uri or '-'}\n"
        f"[bold cyan]Locations:[/bold cyan] {', '.join(monitor.locations) or '-'}\n"
        f"[bold cyan]SLA Threshold:[/bold cyan] {monitor.sla_threshold}\n"
    )
    for field in OPTION_FIELDS:
        value = getattr(monitor, field)
        if value is not None:
            info_text += f"[bold green]{field}:[/bold green] {value}\n"

    console.print(Panel(info_text, title=f"Monitor: {monitor.id}", border_style="cyan"))


@app.command("script")
def show_script(
    monitor_id: Annotated[str, typer.Argument(help="Monitor ID")],
) -> None:
    """
    Show the fingerprint of a monitor's script. The script text is never printed.

    Example:
        nrs monitors script 0a1b2c3d-...
    """
    try:
        script = asyncio.run(_script(monitor_id))
    except NRSError as e:
        common.fail(e)

    console.print(f"[bold cyan]SHA-256:[/bold cyan] {script_fingerprint(script)}")
    console.print(f"[bold cyan]Size:[/bold cyan] {len(script.encode('utf-8'))} bytes")


@app.command("delete")
def delete_monitor(
    monitor_id: Annotated[str, typer.Argument(help="Monitor ID")],
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for confirmation"),
    ] = False,
) -> None:
    """
    Delete a monitor.

    Example:
        nrs monitors delete 0a1b2c3d-... --yes
    """
    if not yes and not typer.confirm(f"Delete monitor {monitor_id}?"):
        console.print("[yellow]Aborted[/yellow]")
        raise typer.Exit(1)

    try:
        asyncio.run(_delete(monitor_id))
    except NRSError as e:
        common.fail(e)

    console.print(f"[green]Deleted monitor[/green] {monitor_id}")
