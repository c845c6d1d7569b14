"""
Utility functions for the CLI.
"""

import sys
import random
import logging
from typing import Optional

import typer
from rich.console import Console

from suncycle.config import ConfigManager, ConfigError
from suncycle.engine import WallpaperEngine
from suncycle.models import Pack
from suncycle.schedule import ScheduleManager
from suncycle.transit import TransitCalculator
from suncycle.validate import Validator


def get_app_state(verbose: bool) -> dict:
    """
    Get the current state of the application
    """

    console = Console()

    logger = logging.getLogger("suncycle")
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="(%(name)s) %(message)s",
    )

    try:
        config_manager = ConfigManager()
    except ConfigError as e:
        console.print(f"[red]Error loading configuration:[/] {e}")
        sys.exit(1)

    return {
        "console": console,
        "logger": logger,
        "verbose": verbose,
        "config_manager": config_manager,
        "schedule_manager": ScheduleManager(),
        "engine": WallpaperEngine(),
        "calculator": TransitCalculator(),
        "validator": Validator(),
    }


def resolve_pack(ctx: typer.Context, console: Console, pack_name: str = "active", pack_uid: Optional[str] = None) -> Optional[Pack]:
    """Find a pack by UID, by name, or the active one. Prints why when it can't."""

    config_manager: ConfigManager = ctx.obj.get("config_manager")

    if pack_uid:
        pack = config_manager.get_pack_by_uid(pack_uid)
        if not pack:
            console.print(f"🚫 Pack with UID '{pack_uid}' not found")
        return pack

    if pack_name == "active":
        try:
            pack = config_manager.get_active_pack()
        except ConfigError as e:
            console.print(f"[red]Error:[/] {e}")
            return None
        if not pack:
            console.print("[yellow]No active pack set[/]")
        return pack

    results = config_manager.load_packs()
    if pack_name not in results:
        console.print(f"🚫 Pack '{pack_name}' not found")

        available_packs = list(results.keys())
        similar_packs = config_manager.find_similar_pack(pack_name, available_packs)
        if len(similar_packs) == 1:
            console.print(f"🔍 Did you mean '{similar_packs[0]}'?")
        elif similar_packs or available_packs:
            console.print("🔍 Did you mean one of these?")
            if not similar_packs:
                random.shuffle(available_packs)
            for name in (similar_packs or available_packs[:3]):
                console.print(f"    📦 {name}")

        console.print("\n✨ Use 'suncycle pack list' to view all available packs")
        return None

    if len(results[pack_name]) > 1:
        console.print(f"🔍 Found {len(results[pack_name])} packs named '{pack_name}'")
        for pack in results[pack_name]:
            console.print(f"    📦 {pack.name} [cyan italic]{pack.uid}[/] [dim]({pack.path})[/]")
        console.print("\n✨ Supply the pack's UID using '--uid PACK_UID'")
        return None

    return results[pack_name][0]
