import sys
import logging
from typing import Optional

from platformdirs import user_data_path

from suncycle.config import ConfigManager, ConfigError
from suncycle.engine import WallpaperEngine
from suncycle.schedule import ScheduleManager
from suncycle.scheduler import DayScheduler, WallpaperApplyError, POLL_INTERVAL
from suncycle.transit import TransitCalculator, TransitUnavailableError

logger = logging.getLogger("suncycle.service")

NOT_CONFIGURED_MESSAGE = "No pack selected. Use 'suncycle pack activate <name>' to choose one."


def run_service(
    config_manager: Optional[ConfigManager] = None,
    engine: Optional[WallpaperEngine] = None,
    calculator: Optional[TransitCalculator] = None,
    schedule_manager: Optional[ScheduleManager] = None,
    poll_interval: float = POLL_INTERVAL,
    scheduler_factory=DayScheduler,
) -> int:
    """Run the day scheduler for the active pack. Returns the process exit code."""

    try:
        config_manager = config_manager or ConfigManager()
    except ConfigError as e:
        logger.error(f"💀 Configuration error: {e}")
        return 1

    try:
        active_pack = config_manager.get_active_pack()
    except ConfigError as e:
        logger.error(f"💀 Configuration error: {e}")
        return 1

    if active_pack is None:
        logger.info(f"⚠️ {NOT_CONFIGURED_MESSAGE}")
        return 0

    logger.info(f"📦 Active pack: {active_pack.name} ({active_pack.path})")

    try:
        location = config_manager.get_location()
        if location is None:
            raise ConfigError("No location configured")
        tz = config_manager.get_timezone(location)
    except (ConfigError, KeyError, ValueError) as e:
        logger.error(f"💀 Configuration error: {e}")
        return 1

    schedule_manager = schedule_manager or ScheduleManager()
    try:
        schedule = schedule_manager.load_schedule(active_pack.path)
    except ValueError as e:
        logger.error(f"💀 Error loading pack '{active_pack.name}': {e}")
        return 1

    scheduler = scheduler_factory(
        location=location,
        images=schedule.images,
        engine=engine or WallpaperEngine(),
        calculator=calculator or TransitCalculator(),
        tz=tz,
        poll_interval=poll_interval,
    )

    try:
        scheduler.start()
    except TransitUnavailableError as e:
        logger.error(f"💀 Error computing transits ({e.event}): {e}")
        return 1
    except WallpaperApplyError as e:
        logger.error(f"💀 Error applying wallpaper: {e}")
        return 1

    return 0


def main():
    # Setup logging
    log_dir = user_data_path(appname="suncycle", appauthor=False, ensure_exists=True) / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=log_dir / "suncycle.log",
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    sys.exit(run_service())


if __name__ == '__main__':
    main()
