"""CLI: logsocial listen, logsocial roster"""

import asyncio
import json
from typing import Any, Optional

import click
from rich.console import Console
from rich.table import Table

from log_social.models.events import SocialEvent
from log_social.models.log import IncomingMessage
from log_social.models.roster import ClientState, ClientStatus, UserProfile

console = Console()


def _get_client(user_id: Optional[str] = None, poll_interval: Optional[float] = None):
    from log_social.cli.main import _get_client
    return _get_client(user_id, poll_interval)


def _login_config(url: Optional[str], agent: Optional[str]):
    from log_social.cli.main import _login_config
    return _login_config(url, agent)


def _run(coro):
    from log_social.cli.main import _run
    return _run(coro)


def _print_event(event: str, payload: Any) -> None:
    if event == SocialEvent.MESSAGE and isinstance(payload, IncomingMessage):
        console.print(f"[green]{payload.sender.user_id}:[/green] {payload.message}")
    elif event == SocialEvent.CLIENT_STATE and isinstance(payload, ClientState):
        color = "cyan" if payload.status == ClientStatus.ONLINE else "yellow"
        console.print(f"[{color}]{payload.client_id} is {payload.status.value}[/{color}]")
    elif event == SocialEvent.USER_PROFILE and isinstance(payload, UserProfile):
        console.print(f"[dim]Discovered {payload.name}[/dim]")


@click.command("listen")
@click.option("--url", default=None, help="Log endpoint URL")
@click.option("--agent", default=None, help="Log destination / filter")
@click.option("--user-id", default=None, help="Identity to announce on the log")
@click.option("--interval", default=None, type=float, help="Seconds between polls")
def listen_cmd(url: Optional[str], agent: Optional[str], user_id: Optional[str], interval: Optional[float]):
    """Stay online and print presence and message events (Ctrl+C to exit)."""
    config = _login_config(url, agent)

    async def _listen():
        client = _get_client(user_id, interval)
        client.add_event_handler(_print_event)
        with console.status("Connecting..."):
            await client.login_with(config)
        console.print(f"[cyan]Online as {client.user_id}[/cyan]")
        try:
            while True:
                await asyncio.sleep(3600)
        finally:
            await client.logout()

    try:
        _run(_listen())
    except KeyboardInterrupt:
        console.print("[dim]Logged out.[/dim]")


@click.command("roster")
@click.option("--url", default=None, help="Log endpoint URL")
@click.option("--agent", default=None, help="Log destination / filter")
@click.option("--json-output", "--json", is_flag=True)
def roster_cmd(url: Optional[str], agent: Optional[str], json_output: bool):
    """Show clients currently believed online."""
    config = _login_config(url, agent)

    async def _roster():
        client = _get_client()
        await client.login_with(config)
        try:
            await client.poller.tick()
            return await client.get_clients()
        finally:
            await client.logout()

    clients = _run(_roster())
    if json_output:
        click.echo(json.dumps({k: v.model_dump(mode="json") for k, v in clients.items()}))
        return
    table = Table("Client", "Status", "Last seen")
    for client_id, state in sorted(clients.items()):
        table.add_row(client_id, state.status.value, state.last_seen.isoformat())
    console.print(table)
