"""
log-social CLI: `logsocial` command.

Commands:
  logsocial configure            Save log URL, agent and user id
  logsocial listen               Stay online and print presence/message events
  logsocial roster               Show who is currently online
  logsocial send <to> <message>  One-shot direct message
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

try:
    import click
    from rich.console import Console
    from rich.logging import RichHandler
except ImportError:
    raise SystemExit("CLI requires extras: pip install log-social[cli]")

from log_social.client import AsyncLogSocial
from log_social.models.session import LoginConfig

console = Console()
CONFIG_FILE = Path.home() / ".logsocial" / "config.json"


def _load_config() -> dict:
    try:
        return json.loads(CONFIG_FILE.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _save_config(cfg: dict) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(cfg, indent=2))


def _login_config(url: Optional[str], agent: Optional[str]) -> LoginConfig:
    cfg = _load_config()
    url = url or cfg.get("url")
    agent = agent or cfg.get("agent")
    if not url or not agent:
        console.print("[red]No log configured. Run `logsocial configure` or pass --url/--agent.[/red]")
        raise SystemExit(1)
    return LoginConfig(url=url, agent=agent)


def _get_client(user_id: Optional[str] = None, poll_interval: Optional[float] = None) -> AsyncLogSocial:
    cfg = _load_config()
    kwargs = {"poll_interval": poll_interval} if poll_interval is not None else {}
    return AsyncLogSocial(user_id=user_id or cfg.get("user_id"), **kwargs)


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option("0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """log-social CLI: presence and messaging over a shared log."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@main.command("configure")
@click.option("--url", default=None, help="Log endpoint URL")
@click.option("--agent", default=None, help="Log destination / filter")
@click.option("--user-id", default=None, help="Identity to announce on the log")
@click.option("--show", is_flag=True, help="Print the saved configuration")
def configure(url: Optional[str], agent: Optional[str], user_id: Optional[str], show: bool):
    """Save log connection settings to ~/.logsocial/config.json."""
    cfg = _load_config()
    if show:
        click.echo(json.dumps(cfg, indent=2))
        return
    updates = {"url": url, "agent": agent, "user_id": user_id}
    cfg.update({k: v for k, v in updates.items() if v is not None})
    _save_config(cfg)
    console.print(f"[green]Saved configuration to {CONFIG_FILE}[/green]")


# Register subcommands from separate modules
from log_social.cli.presence import listen_cmd, roster_cmd
from log_social.cli.messages import send_cmd

main.add_command(listen_cmd)
main.add_command(roster_cmd)
main.add_command(send_cmd)


if __name__ == "__main__":
    main()
