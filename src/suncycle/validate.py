# validate.py
import logging
from pathlib import Path
from typing import Optional, Union
from zoneinfo import ZoneInfoNotFoundError

from suncycle.models import PackSchedule, Pack, Segment, ValidationResult
from suncycle.schedule import PACK_FILE, IMAGES_DIR
from suncycle.transit import resolve_timezone


class Validator:
    """Validates config and packs"""

    def __init__(self):
        self.logger = logging.getLogger("suncycle.validate")
        self.logger.debug("🔧 Initializing Validator")

    def is_pack(self, item: Path) -> bool:
        """Check if a directory is a wallpaper pack"""
        if not item.is_dir():
            return False

        if not (item / PACK_FILE).exists():
            return False

        return (item / IMAGES_DIR).is_dir()

    def validate_config(self, config: dict, wallpacks: Optional[dict] = None, config_dir: Optional[Path] = None) -> ValidationResult:
        """Validates the global configuration and reports any issues"""

        self.logger.debug("🔧 Validating config")
        result = ValidationResult()
        wallpacks = wallpacks or {}

        # 1. The [active] section
        if "active" not in config:
            result.add("config_active", "error", "Config is missing the required [active] section")
            return result

        active = config["active"]
        if "name" not in active:
            result.add("config_active", "error", "Config is missing the required key 'name' in [active] section")
            return result

        active_name = str(active["name"])
        active_path = active.get("path", "")

        if active_name.upper() in ["NONE", ""]:
            self.logger.debug("✅ Config has no active pack defined")
        elif active_path:
            path = Path(active_path)
            if not path.is_absolute() and config_dir is not None:
                path = config_dir / path
            if not self.is_pack(path):
                result.add("config_active", "error", f"Active pack path is not a pack: {path}")
        elif active_name not in wallpacks:
            result.add("config_active", "error", f"Active pack '{active_name}' not found")

        # 2. The [location] section
        if "location" not in config:
            result.add("config_location", "error", "Config is missing the required [location] section")
            return result

        location = config["location"]
        for key, limit in (("latitude", 90), ("longitude", 180)):
            if key not in location:
                result.add("config_location", "error", f"Location is missing '{key}'")
                continue
            value = location[key]
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                result.add("config_location", "error", f"Location {key} must be a number")
            elif not -limit <= value <= limit:
                result.add("config_location", "error", f"Location {key} must be between -{limit} and {limit}")

        tz_name = location.get("timezone")
        if tz_name:
            try:
                resolve_timezone(tz_name)
            except (ZoneInfoNotFoundError, ValueError):
                result.add("config_location", "error", f"Unknown timezone: {tz_name}")
        else:
            result.add("config_location", "warning", "No timezone set, UTC will be used")

        # 3. Custom wallpack paths
        for name, path in config.get("custom_wallpacks", {}).items():
            if not Path(path).expanduser().exists():
                result.add("config_custom_wallpacks", "warning", f"Custom wallpack '{name}' path does not exist: {path}")

        return result

    def validate_pack(self, schedule: PackSchedule, pack: Union[Path, Pack]) -> ValidationResult:
        """Validates a parsed pack: missing images are errors, empty segments warnings"""

        pack_path = pack.path if isinstance(pack, Pack) else Path(pack)
        result = ValidationResult()

        if not self.is_pack(pack_path):
            result.add("is_pack", "error", f"{pack_path} is not a wallpaper pack")
            return result

        if schedule.images.total() == 0:
            result.add("pack_images", "error", "Pack does not list any images")
            return result

        for segment in Segment:
            if not schedule.images[segment]:
                result.add("pack_segments", "warning", f"Segment '{segment.key}' has no images")

        for image in schedule.images.all_images():
            if not image.exists():
                result.add("pack_images", "error", f"Image {image.name} not found in pack")

        return result
