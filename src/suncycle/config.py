# config.py

import shutil
import logging
import hashlib
import difflib
import tomli, tomli_w
from pathlib import Path
from collections import defaultdict
from datetime import tzinfo
from importlib.resources import files
from zoneinfo import ZoneInfoNotFoundError
from platformdirs import user_config_path
from typing import Dict, List, Optional, Any, DefaultDict

from suncycle.validate import Validator
from suncycle.models import PackSearchPaths, Pack, Location, ValidationResult
from suncycle.transit import resolve_timezone


class ConfigError(Exception):
    """The configuration can't be created, read or parsed"""


def generate_uid(path: str) -> str:
    # Create a short MD5 hash from the pack's absolute path
    hash_object = hashlib.md5(path.encode())
    return hash_object.hexdigest()[:6]


class ConfigManager:
    """Manages the global configuration and pack discovery"""

    def __init__(self, config_dir: Optional[Path] = None):
        self.logger = logging.getLogger("suncycle.config")
        self.logger.debug("🔧 Initializing ConfigManager")

        self.validator = Validator()

        # Get directories and paths
        try:
            if config_dir is None:
                self.config_dir = user_config_path(appname="suncycle", appauthor=False, ensure_exists=True)
            else:
                self.config_dir = Path(config_dir)
                self.config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.error(f"💀 Error creating config directory: {e}")
            raise ConfigError(f"Can't create config directory: {e}") from e

        self.config_file_path = self.config_dir / "config.toml"
        self.packs_dir = self.config_dir / "packs"
        self.data_dir = files("suncycle.data")
        self.pack_search_paths = PackSearchPaths().get_paths()

        # Load config and packs
        self.config = self.load_config()
        self.wallpacks = self.load_packs()

    def load_config(self) -> Dict[str, Any]:
        """Loads the global configuration file"""

        self.logger.debug("🔁 Loading configuration")

        # Create a default config file if it doesn't exist or is empty
        if not self.config_file_path.exists() or self.config_file_path.stat().st_size == 0:
            self.logger.debug("⚠️ Config file not found or empty, creating default")
            self._create_default_config()

        try:
            with open(self.config_file_path, "rb") as f:
                config = tomli.load(f)
        except (OSError, tomli.TOMLDecodeError) as e:
            self.logger.error(f"💀 Error loading configuration: {e}")
            raise ConfigError(f"Can't read {self.config_file_path}: {e}") from e

        # Cache the config for later use
        self.config = config
        return config

    def validate_config(self) -> ValidationResult:
        """Validates the current configuration and returns validation results"""
        return self.validator.validate_config(self.config, self.wallpacks, self.config_dir)

    def load_packs(self) -> DefaultDict[str, List[Pack]]:
        """Loads all available wallpaper packs"""

        self.logger.debug("🔁 Loading wallpacks")

        # Packs can be found in the following ways:
        # 1. In the packs directory
        # 2. In common directories for each OS
        # 3. In custom paths listed in the config file
        packs = defaultdict(list)

        self.logger.debug("🔍 Searching packs directory")
        for name, found in self.scan_directory(self.packs_dir).items():
            packs[name].extend(found)

        self.logger.debug("🔍 Searching common directories")
        for path in self.pack_search_paths:
            for name, found in self.scan_directory(path).items():
                packs[name].extend(found)

        if "custom_wallpacks" in self.config:
            self.logger.debug("🔍 Searching custom directories")
            for path in self.config["custom_wallpacks"].values():
                path = Path(path).expanduser()
                if not path.is_absolute():
                    path = self.config_dir / path
                for name, found in self.scan_directory(path).items():
                    packs[name].extend(found)

        # Keep the first occurrence of each UID
        seen_uids = set()
        unique_packs = defaultdict(list)
        for name, pack_list in packs.items():
            for pack in pack_list:
                if pack.uid not in seen_uids:
                    seen_uids.add(pack.uid)
                    unique_packs[name].append(pack)
                else:
                    self.logger.debug(f"Removing duplicate pack: {pack.name} ({pack.uid}) at {pack.path}")

        self.logger.debug(f"✅ Wallpacks loaded ({len(unique_packs)} found)")

        # Cache the packs for later use
        self.wallpacks = unique_packs
        return unique_packs

    def _create_default_config(self) -> None:
        """Creates a default configuration file from the packaged template"""

        self.logger.debug("🔁 Copying default config")
        default_config_path = self.data_dir / "config.toml"

        try:
            with default_config_path.open("rb") as src, open(self.config_file_path, "wb") as dst:
                shutil.copyfileobj(src, dst)
            self.packs_dir.mkdir(parents=True, exist_ok=True)
            self.logger.debug("✅ Default configuration created")
        except OSError as e:
            self.logger.error(f"💀 Error copying default config: {e}")
            raise ConfigError(f"Can't create default config: {e}") from e

    def scan_directory(self, path: Path) -> DefaultDict[str, List[Pack]]:
        """Finds all packs in a given path (the path itself or its children)"""

        packs = defaultdict(list)

        if not path.exists() or not path.is_dir():
            return packs

        candidates = [path] if self.validator.is_pack(path) else sorted(path.iterdir())
        for item in candidates:
            if self.validator.is_pack(item):
                resolved = item.resolve()
                packs[item.name].append(Pack(name=item.name, path=resolved, uid=generate_uid(str(resolved))))

        return packs

    def get_pack_by_uid(self, pack_uid: str) -> Optional[Pack]:
        """Gets a pack by its unique identifier"""

        self.load_packs()

        for packs in self.wallpacks.values():
            for pack in packs:
                if pack.uid == pack_uid:
                    return pack
        return None

    def find_similar_pack(self, pack_name: str, available_packs: List[str]) -> List[str]:
        """Finds similar pack names from a list of available packs"""

        pack_name = pack_name.lower().strip()
        return difflib.get_close_matches(pack_name, available_packs, n=3, cutoff=0.2)

    def get_active_pack(self) -> Optional[Pack]:
        """Gets the active pack from the config, None when not configured"""

        active = self.config.get("active") or {}
        pack_name = str(active.get("name", "")).strip()
        if pack_name.upper() in ["NONE", ""]:
            return None

        raw_path = active.get("path", "")
        if raw_path:
            pack_path = Path(raw_path).expanduser()
            if not pack_path.is_absolute():
                pack_path = self.config_dir / pack_path
        else:
            # Only a name was configured, look it up among discovered packs
            found = self.wallpacks.get(pack_name, [])
            if not found:
                raise ConfigError(f"Active pack '{pack_name}' not found")
            return found[0]

        return Pack(
            name=pack_name,
            path=pack_path,
            uid=active.get("uid") or generate_uid(str(pack_path))
        )

    def set_active_pack(self, pack: Pack) -> bool:
        """Sets the active wallpaper pack in the config"""

        self.logger.debug(f"🔁 Setting active pack to {pack.name}")
        self.load_config()
        self.config["active"] = {
            "name": pack.name,
            "path": str(pack.path),
            "uid": pack.uid
        }
        return self._save_config(self.config)

    def get_location(self) -> Optional[Location]:
        """Gets the global location from the config"""
        if "location" in self.config:
            loc_data = self.config["location"]
            return Location(
                name=loc_data.get("name", "location"),
                region=loc_data.get("region", "region"),
                latitude=float(loc_data["latitude"]),
                longitude=float(loc_data["longitude"]),
                timezone=loc_data.get("timezone", "UTC"),
            )
        return None

    def set_location(self, location: Location) -> bool:
        """Sets the global location in the config"""

        self.logger.debug("🔁 Setting global location")
        self.load_config()
        self.config["location"] = {
            "latitude": location.latitude,
            "longitude": location.longitude,
            "timezone": location.timezone,
            "name": location.name,
            "region": location.region
        }
        return self._save_config(self.config)

    def get_timezone(self, location: Optional[Location] = None) -> tzinfo:
        """Timezone of the configured location, UTC when unknown"""
        location = location or self.get_location()
        try:
            return resolve_timezone(location.timezone if location else None)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigError(f"Unknown timezone '{location.timezone}'") from e

    def _save_config(self, config: dict) -> bool:
        """Saves the configuration to the global config file"""

        self.logger.debug("🔁 Saving configuration")

        validation = self.validator.validate_config(config, self.wallpacks, self.config_dir)
        if validation.failed:
            self.logger.error("💀 Configuration validation failed")
            for key, result in validation.errors.items():
                self.logger.error(f"    ❗ {key.upper()}: {result}")
            return False

        for key, result in validation.warnings.items():
            self.logger.warning(f"    ⚠️ {key.upper()}: {result}")

        try:
            with open(self.config_file_path, "wb") as f:
                tomli_w.dump(config, f)
        except OSError as e:
            self.logger.error(f"💀 Error saving configuration: {e}")
            return False

        self.logger.debug("✅ Configuration saved")
        return True
