"""
Command group of config-related commands for the suncycle CLI
"""

import typer
from rich.box import ROUNDED
from rich.console import Console
from rich.table import Table

from suncycle.models import Location


console = Console()
app = typer.Typer(
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Manage suncycle configuration",
)

location_app = typer.Typer(
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Manage global location settings",
)
app.add_typer(location_app, name="location", rich_help_panel="📋 View & Edit")


@app.command(rich_help_panel="📋 View & Edit")
def show(ctx: typer.Context):
    """Prints the global config in a human-readable format"""

    config_manager = ctx.obj.get("config_manager")
    config = config_manager.config

    console.print(f"📂 [dim]{config_manager.config_file_path}[/]\n")

    console.print("[bold cyan]Active Pack[/]\n")
    active = config.get("active") or {}
    if active.get("name"):
        console.print(f"  ✨ [yellow]{active.get('name')}[/] [cyan italic]{active.get('uid', 'N/A')}[/]")
        console.print(f"  📂 [dim]{active.get('path', 'N/A')}[/]")
    else:
        console.print("  ⚠️ No active pack configured")

    console.print("\n[bold cyan]Custom Wallpacks[/]\n")
    custom_packs = config.get("custom_wallpacks") or {}
    if custom_packs:
        for name, path in custom_packs.items():
            console.print(f"  📦 [yellow]{name}[/] [dim]({path})[/]")
    else:
        console.print("  ⚠️ No custom wallpacks configured")

    console.print("\n[bold cyan]Location[/]\n")
    location = config.get("location") or {}
    if location:
        console.print(f"  📍 Name: [yellow]{location.get('name', 'Unnamed Location')}[/]")
        console.print(f"  🌍 Region: [yellow]{location.get('region', 'Unknown Region')}[/]")
        console.print(f"  📊 Coordinates: [green]{location.get('latitude', 'N/A')}°N, {location.get('longitude', 'N/A')}°E[/]")
        console.print(f"  🕒 Timezone: [green]{location.get('timezone', 'N/A')}[/]")
    else:
        console.print("  ⚠️ No location configured")

    validation = config_manager.validate_config()
    if validation.failed or validation.warnings:
        console.print("\n[bold yellow]Configuration Issues:[/]")
        for key, messages in validation.errors.items():
            for message in messages:
                console.print(f"  ❗ [red]{key.upper()}:[/] {message}")
        for key, messages in validation.warnings.items():
            for message in messages:
                console.print(f"  ⚠️ [yellow]{key.upper()}:[/] {message}")


@location_app.command(
    rich_help_panel="📍 Location Commands",
    no_args_is_help=True,
)
def set(
    ctx: typer.Context,
    latitude: float = typer.Option(..., "--lat", "-l", help="Latitude coordinate"),
    longitude: float = typer.Option(..., "--lon", "-g", help="Longitude coordinate"),
    timezone: str = typer.Option(..., "--tz", "-t", help="Timezone (e.g., 'Europe/Zagreb')"),
    name: str = typer.Option("Custom Location", "--name", "-n", help="Location name"),
    region: str = typer.Option("Custom Region", "--region", "-r", help="Region name"),
):
    """Manually set location coordinates and timezone"""

    loc = Location(
        latitude=latitude,
        longitude=longitude,
        timezone=timezone,
        name=name,
        region=region
    )

    config_manager = ctx.obj.get("config_manager")
    if not config_manager.set_location(loc):
        console.print("❌ Error setting location, see the messages above")
        raise typer.Exit(1)

    table = Table(header_style="bold", box=ROUNDED, show_header=False, border_style="dim")
    table.add_column("Property", style="cyan", justify="left")
    table.add_column("Value", style="yellow", justify="left")
    table.add_row("📍 Name", loc.name)
    table.add_row("🌍 Region", loc.region)
    table.add_row("📊 Coordinates", f"{loc.latitude}°N, {loc.longitude}°E")
    table.add_row("🕒 Timezone", loc.timezone)

    console.print(table)
    console.print("\n✅ Location has been saved to your configuration")
