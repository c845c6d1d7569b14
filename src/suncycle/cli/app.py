"""
Main application entry point for the suncycle CLI
"""

import time
from datetime import datetime

import typer
from rich.box import ROUNDED
from rich.console import Console
from rich.table import Table
from typing_extensions import Annotated

from suncycle.cli import pack, config
from suncycle.cli.utils import get_app_state
from suncycle.config import ConfigError
from suncycle.models import Anchor
from suncycle.scheduler import POLL_INTERVAL
from suncycle.service import run_service, NOT_CONFIGURED_MESSAGE
from suncycle.timeline import build_timeline, select_entry
from suncycle.transit import TransitUnavailableError, get_anchor_set, local_day_midnight


console = Console()

app = typer.Typer(
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(pack.app, name="pack", help="Manage wallpaper packs", rich_help_panel="📋 Main Commands")
app.add_typer(config.app, name="config", help="Manage suncycle configuration", rich_help_panel="📋 Main Commands")


@app.command(rich_help_panel="✨ Quick Access")
def run(
    ctx: typer.Context,
    interval: Annotated[float, typer.Option("--interval", "-i", help="Seconds between checks", min=1)] = POLL_INTERVAL,
):
    """Runs the wallpaper scheduler in the foreground (Ctrl+C to stop)"""

    state = ctx.obj
    try:
        active_pack = state["config_manager"].get_active_pack()
    except ConfigError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)
    if active_pack is None:
        console.print(f"⚠️ [yellow]{NOT_CONFIGURED_MESSAGE}[/]")
        raise typer.Exit(0)

    console.print(f"✨ Following the sun with [bold]{active_pack.name}[/] [dim](Ctrl+C to stop)[/]")

    code = run_service(
        config_manager=state["config_manager"],
        engine=state["engine"],
        calculator=state["calculator"],
        schedule_manager=state["schedule_manager"],
        poll_interval=interval,
    )
    if code != 0:
        console.print("[red]Scheduler stopped with an error, see the log above[/]")
    raise typer.Exit(code)


@app.command(rich_help_panel="✨ Quick Access")
def now(ctx: typer.Context):
    """Shows today's sun and moon anchors and the current wallpaper"""

    state = ctx.obj
    config_manager = state["config_manager"]

    try:
        location = config_manager.get_location()
        if location is None:
            raise ConfigError("No location configured")
        tz = config_manager.get_timezone(location)
        current = time.time()
        anchors = get_anchor_set(local_day_midnight(current, tz), location, state["calculator"], tz)
    except (ConfigError, TransitUnavailableError) as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    console.print(f"📍 {location}  🕒 {tz}\n")

    table = Table(header_style="bold", box=ROUNDED, show_header=True, border_style="dim")
    table.add_column("Anchor", style="cyan")
    table.add_column("Time", style="yellow")
    for anchor in Anchor:
        when = datetime.fromtimestamp(anchors[anchor], tz=tz)
        table.add_row(anchor.value.replace("_", " "), when.strftime("%Y-%m-%d %H:%M:%S"))
    console.print(table)

    if not anchors.is_ordered():
        console.print("⚠️ [yellow]Anchors are not in day order, some images will be skipped[/]")

    try:
        active_pack = config_manager.get_active_pack()
    except ConfigError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)
    if active_pack is None:
        console.print(f"\n⚠️ [yellow]{NOT_CONFIGURED_MESSAGE}[/]")
        return

    try:
        schedule = state["schedule_manager"].load_schedule(active_pack.path)
    except ValueError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    entry = select_entry(build_timeline(anchors, schedule.images), current)
    if entry is None:
        console.print("\n🌙 No more wallpapers scheduled today")
    else:
        until = datetime.fromtimestamp(entry.timestamp, tz=tz).strftime("%H:%M")
        console.print(f"\n🖼️ [bold]{entry.image.name}[/] [dim]({entry.segment.key}, until {until})[/]")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable verbose output"),
    version: bool = typer.Option(False, "--version", "-v", help="Show version information"),
):

    if version:
        from suncycle import __version__
        console.print(f"suncycle v{__version__}")
        raise typer.Exit()

    ctx.obj = get_app_state(verbose=verbose)


if __name__ == "__main__":
    app()
