"""
Alert Condition CLI Commands

Commands for inspecting synthetics alert conditions.
"""

from __future__ import annotations

import asyncio
from typing import Annotated

import typer
from rich.table import Table

from nrs.cli import common
from nrs.cli.common import console
from nrs.provider.alert_condition import parse_import_id
from nrs.synthetics.errors import NRSError
from nrs.synthetics.models import AlertCondition

app = typer.Typer(
    name="conditions",
    help="Inspect synthetics alert conditions",
    no_args_is_help=True,
)


async def _get(policy_id: int, condition_id: int) -> AlertCondition:
    async with common.make_client() as client:
        return await client.get_alert_condition(policy_id, condition_id)


@app.command("get")
def get_condition(
    policy_id: Annotated[int, typer.Argument(help="Policy ID")],
    condition_id: Annotated[int, typer.Argument(help="Alert condition ID")],
) -> None:
    """
    Show an alert condition of a policy.

    Example:
        nrs conditions get 42 7
    """
    try:
        condition = asyncio.run(_get(policy_id, condition_id))
    except NRSError as e:
        common.fail(e)

    table = Table(title=f"Alert Condition {condition.id}", show_header=False, border_style="cyan")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Name", condition.name)
    table.add_row("Monitor", condition.monitor_id)
    table.add_row("Enabled", "yes" if condition.enabled else "no")
    table.add_row("Runbook", condition.runbook_url or "-")
    table.add_row("Policy", str(policy_id))

    console.print(table)


@app.command("parse-import-id")
def parse_import(
    value: Annotated[str, typer.Argument(help="Import id, policy_id:condition_id")],
) -> None:
    """
    Check an alert condition import id.

    Example:
        nrs conditions parse-import-id 42:7
    """
    try:
        policy_id, condition_id = parse_import_id(value)
    except NRSError as e:
        common.fail(e)

    console.print(f"[bold cyan]Policy:[/bold cyan] {policy_id}")
    console.print(f"[bold cyan]Condition:[/bold cyan] {condition_id}")
