"""CLI for pushwatch.

Commands:
    check-config    Validate a watch configuration and show its routing table
    devices         List the Join devices available as targets

Environment is read from the process and from a .env file in the working
directory (see pushwatch.config.push_settings for the variables).
"""

import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from pushwatch import __version__
from pushwatch.bootstrap.logging import configure_structlog
from pushwatch.bootstrap.router import get_join_client
from pushwatch.config.push_settings import PushSettings
from pushwatch.config.watch_config import WatchConfiguration, load_watch_config
from pushwatch.domain.exceptions import PushWatchError

app = typer.Typer(
    name="pushwatch",
    help="Batched push notifications for live broadcast state changes",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"pushwatch version {__version__}")
        raise typer.Exit()


def _load_settings() -> PushSettings:
    load_dotenv()
    settings = PushSettings.from_environment()
    configure_structlog(settings.environment)
    return settings


def _routing_table(config: WatchConfiguration) -> Table:
    table = Table(title="Watch routes")
    table.add_column("Target")
    table.add_column("Target ID")
    table.add_column("Entity", justify="right")
    table.add_column("Events")
    for route in config.routes:
        table.add_row(
            route.target_name,
            route.target_id if config.resolved else "-",
            str(route.entity_id),
            ", ".join(kind.value for kind in route.event_kinds),
        )
    return table


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """pushwatch - batched push notifications for live state changes."""
    pass


@app.command("check-config")
def check_config(
    path: Path = typer.Argument(..., help="Watch configuration YAML file"),
    offline: bool = typer.Option(
        False, "--offline", help="Validate structure only, do not resolve targets via Join."
    ),
) -> None:
    """Validate a watch configuration and print its routing table."""
    try:
        settings = _load_settings()
        config = load_watch_config(path)
        if not offline:
            join = get_join_client(settings)
            config = config.resolve_targets(asyncio.run(join.list_targets()))
    except (PushWatchError, ValueError) as e:
        console.print(f"[red]Configuration invalid:[/red] {e}")
        raise typer.Exit(code=1) from e

    console.print(_routing_table(config))
    console.print(
        f"[green]OK[/green] {len(config.entity_ids)} entities, "
        f"{len(config.target_names)} targets"
    )


@app.command()
def devices() -> None:
    """List the Join devices that can be used as targets."""
    try:
        settings = _load_settings()
        join = get_join_client(settings)
        listed = asyncio.run(join.list_targets())
    except (PushWatchError, ValueError) as e:
        console.print(f"[red]Cannot list devices:[/red] {e}")
        raise typer.Exit(code=1) from e

    table = Table(title="Join devices")
    table.add_column("Name")
    table.add_column("Device ID")
    for name, device_id in sorted(listed.items()):
        table.add_row(name, device_id)
    console.print(table)


if __name__ == "__main__":
    app()
