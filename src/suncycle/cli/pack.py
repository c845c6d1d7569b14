"""
Command group of pack-related commands for the suncycle CLI
"""

import time
from pathlib import Path

import typer
from rich.box import ROUNDED
from rich.console import Console
from rich.table import Table
from typing_extensions import Annotated

from suncycle.cli.utils import resolve_pack
from suncycle.config import ConfigError
from suncycle.timeline import build_timeline, describe_timeline
from suncycle.transit import TransitUnavailableError, get_anchor_set, local_day_midnight

console = Console()
app = typer.Typer(
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Manage wallpaper packs",
)


@app.command(rich_help_panel="📋 View & List")
def list(
    ctx: typer.Context,
    search: Annotated[Path, typer.Argument(help="Search for packs in the specified directory", show_default=False, metavar="[PATH]")] = None,
):
    """Lists all available packs"""

    config_manager = ctx.obj.get("config_manager")

    if search:
        console.print(f"🔍 Searching for packs in '{search}'\n")
        results = config_manager.scan_directory(Path(search))
    else:
        results = config_manager.load_packs()

    if not results:
        console.print("🚫 No packs found")
        return

    try:
        active = config_manager.get_active_pack()
    except ConfigError:
        active = None

    total = sum(len(packs) for packs in results.values())
    console.print(f"✨ Found [bold]{total} pack(s)[/]")
    for name in sorted(results):
        for pack in results[name]:
            marker = " [green]✔ active[/]" if active and active.uid == pack.uid else ""
            console.print(f"    📦 {pack.name} [cyan italic]{pack.uid}[/] [dim]({pack.path})[/]{marker}")


@app.command(rich_help_panel="📋 View & List")
def info(
    ctx: typer.Context,
    pack_name: Annotated[str, typer.Argument(help="Name of the pack to show info for")] = "active",
    pack_uid: str = typer.Option(None, "--uid", "-u", help="UID of the pack to show info for", show_default=False)
):
    """
    Shows detailed information about a pack.

    If no pack is specified, shows info for the active pack.
    """

    schedule_manager = ctx.obj.get("schedule_manager")
    validator = ctx.obj.get("validator")

    pack = resolve_pack(ctx, console, pack_name, pack_uid)
    if not pack:
        return

    try:
        schedule = schedule_manager.load_schedule(pack.path)
    except ValueError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    author_str = f"by {schedule.meta.author}" if schedule.meta.author else ""
    console.print(f"📦 [bold]{schedule.meta.name}[/] [cyan italic]{pack.uid}[/] [dim italic]{author_str}[/]")
    console.print(f"📁 [dim]{pack.path}[/]\n")
    if schedule.meta.description:
        console.print(f"{schedule.meta.description}\n")

    console.print(f"🖼️ Total Images: [bold]{schedule.images.total()}[/]\n")
    for segment, count in schedule_manager.segment_summary(schedule):
        console.print(f"  • {segment}: {count} images")

    validation = validator.validate_pack(schedule, pack)
    for key, messages in validation.errors.items():
        for message in messages:
            console.print(f"  ❗ [red]{key.upper()}:[/] {message}")
    for key, messages in validation.warnings.items():
        for message in messages:
            console.print(f"  ⚠️ [yellow]{key.upper()}:[/] {message}")


@app.command(rich_help_panel="📋 View & List")
def preview(
    ctx: typer.Context,
    pack_name: Annotated[str, typer.Argument(help="Name of the pack to preview")] = "active",
    pack_uid: str = typer.Option(None, "--uid", "-u", help="UID of the pack to preview", show_default=False)
):
    """
    Previews today's wallpaper timeline for a pack.

    If no pack is specified, the active pack is previewed.
    """

    config_manager = ctx.obj.get("config_manager")
    schedule_manager = ctx.obj.get("schedule_manager")
    calculator = ctx.obj.get("calculator")

    pack = resolve_pack(ctx, console, pack_name, pack_uid)
    if not pack:
        return

    try:
        schedule = schedule_manager.load_schedule(pack.path)
        location = config_manager.get_location()
        if location is None:
            raise ConfigError("No location configured")
        tz = config_manager.get_timezone(location)
        anchors = get_anchor_set(local_day_midnight(time.time(), tz), location, calculator, tz)
    except (ValueError, ConfigError) as e:
        # TransitUnavailableError is a ValueError too
        label = "Error computing transits" if isinstance(e, TransitUnavailableError) else "Error"
        console.print(f"[red]{label}:[/] {e}")
        raise typer.Exit(1)

    timeline = build_timeline(anchors, schedule.images)

    pack_author = f"[dim italic]by {schedule.meta.author}[/]" if schedule.meta.author else ""
    console.print(f"📦 {schedule.meta.name} [cyan italic]{pack.uid}[/] {pack_author}")
    console.print(f"📍 [dim]{location}[/]\n")

    table = Table(header_style="bold", box=ROUNDED, show_header=True, border_style="dim")
    table.add_column("Time", style="yellow", justify="left")
    table.add_column("Segment", style="cyan", justify="left")
    table.add_column("Image", justify="left")
    for row in describe_timeline(timeline, tz):
        table.add_row(*row)

    console.print(table)


@app.command(no_args_is_help=True, rich_help_panel="🔄 Manage")
def activate(
    ctx: typer.Context,
    pack_name: Annotated[str, typer.Argument(..., help="Name of the pack to activate", show_default=False)] = None,
    pack_uid: str = typer.Option(None, "--uid", "-u", help="UID of the pack to activate", show_default=False)
):
    """Activates the specified pack"""

    config_manager = ctx.obj.get("config_manager")

    if not pack_name and not pack_uid:
        console.print("🚫 Please provide either a pack name or UID")
        raise typer.Exit(1)

    pack = resolve_pack(ctx, console, pack_name, pack_uid)
    if not pack:
        raise typer.Exit(1)

    if config_manager.set_active_pack(pack):
        console.print(f"✅ Pack '{pack.name}' activated")
        console.print("✨ Use 'suncycle run' to start following the sun")
    else:
        console.print(f"🚫 Error activating pack '{pack.name}'")
        raise typer.Exit(1)
