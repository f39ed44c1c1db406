"""CLI: logsocial send"""

from typing import Optional

import click
from rich.console import Console

from log_social.errors import InvalidDestinationError

console = Console()


def _get_client(user_id: Optional[str] = None):
    from log_social.cli.main import _get_client
    return _get_client(user_id)


def _login_config(url: Optional[str], agent: Optional[str]):
    from log_social.cli.main import _login_config
    return _login_config(url, agent)


def _run(coro):
    from log_social.cli.main import _run
    return _run(coro)


@click.command("send")
@click.argument("to")
@click.argument("message")
@click.option("--url", default=None, help="Log endpoint URL")
@click.option("--agent", default=None, help="Log destination / filter")
@click.option("--user-id", default=None, help="Identity to send as")
def send_cmd(to: str, message: str, url: Optional[str], agent: Optional[str], user_id: Optional[str]):
    """Send a one-shot direct message to a client seen on the log."""
    config = _login_config(url, agent)

    async def _send():
        client = _get_client(user_id)
        await client.login_with(config)
        try:
            # The destination has to be in the roster, which needs one poll.
            await client.poller.tick()
            await client.send_message(to, message)
        finally:
            await client.logout()

    try:
        _run(_send())
    except InvalidDestinationError:
        console.print(f"[red]{to} has not been seen on the log.[/red]")
        raise SystemExit(1)
    console.print(f"[green]Sent to {to}.[/green]")
