# schedule.py
import tomli
import logging
from pathlib import Path
from typing import Dict, List, Tuple

from suncycle.models import PackMeta, PackSchedule, Segment, SegmentImages

PACK_FILE = "pack.toml"
IMAGES_DIR = "images"


class ScheduleManager:
    """Loads pack files into per-segment image lists"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def load_schedule(self, path: Path) -> PackSchedule:
        """Load and parse a pack file

        Args:
            path (Path): Path to the pack file or to the pack directory
        """
        path = Path(path)
        if path.is_dir():
            path = path / PACK_FILE
        self.logger.debug(f"Loading pack schedule from {path}")
        return self._parse_file(path)

    def _parse_file(self, path: Path) -> PackSchedule:
        """Parse a pack file into a PackSchedule object"""
        try:
            with open(path, "rb") as f:
                data = tomli.load(f)
            self.logger.debug(f"Loaded pack file from {path}")
        except (OSError, tomli.TOMLDecodeError) as e:
            self.logger.error(f"Failed to load pack file from {path}: {e}")
            raise ValueError(f"Failed to load pack file: {e}")

        try:
            meta_data = data["meta"]
        except KeyError as e:
            self.logger.error(f"Missing 'meta' section in pack file: {e}")
            raise ValueError("Missing 'meta' section in pack file")

        meta = self._parse_meta(meta_data)
        images = self._parse_images(data.get("images", {}), path.parent / IMAGES_DIR)

        if images.total() == 0:
            self.logger.warning(f"⚠️ Pack '{meta.name}' has no images")

        self.logger.debug("Pack file parsed successfully")
        return PackSchedule(meta=meta, images=images)

    def _parse_meta(self, data: dict) -> PackMeta:
        """Parse pack metadata section"""
        try:
            meta = PackMeta(
                name=data["name"],
                author=data.get("author", ""),
                description=data.get("description", ""),
                version=str(data.get("version", "1.0"))
            )
            self.logger.debug("Parsed metadata successfully")
            return meta
        except KeyError as e:
            self.logger.error(f"Missing key in metadata: {e}")
            raise ValueError(f"Missing required meta field: {e}")

    def _parse_images(self, data: dict, images_dir: Path) -> SegmentImages:
        """Parse the [images] section, one list per segment"""
        if not isinstance(data, dict):
            raise ValueError("The 'images' section must be a table")

        images: Dict[Segment, Tuple[Path, ...]] = {}
        for key, names in data.items():
            segment = Segment.from_key(key)

            if isinstance(names, str):
                names = [names]
            if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
                self.logger.error(f"Invalid image list for segment '{key}'")
                raise ValueError(f"Images for segment '{key}' must be a list of file names")

            images[segment] = tuple(self._resolve_image(name, images_dir) for name in names)
            self.logger.debug(f"Parsed {len(names)} images for segment '{key}'")

        return SegmentImages(images)

    def _resolve_image(self, name: str, images_dir: Path) -> Path:
        path = Path(name).expanduser()
        if path.is_absolute():
            return path
        return images_dir / path

    def segment_summary(self, schedule: PackSchedule) -> List[Tuple[Segment, int]]:
        """Image counts per segment, in day order"""
        return [(segment, len(schedule.images[segment])) for segment in Segment]
