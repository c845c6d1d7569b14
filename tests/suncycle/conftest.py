import pytest
from pathlib import Path
from unittest.mock import Mock

import tomli_w

from suncycle.engine import WallpaperEngine
from suncycle.models import Anchor, AnchorSet, Location, Segment, SegmentImages
from suncycle.transit import TransitCalculator, TransitUnavailableError


# Offsets from the start of the day used by the dummy calculator
DUMMY_OFFSETS = {
    "midnight": 0,
    "moonset": 3600,
    "sunrise": 7200,
    "noon": 14400,
    "sunset": 21600,
    "moonrise": 25200,
}


class DummyTransitCalculator(TransitCalculator):
    """Predictable transits: fixed offsets from the given day"""

    def __init__(self, unavailable=()):
        super().__init__()
        self.unavailable = set(unavailable)
        self.calls = []

    def _fixed(self, event, day_midnight):
        self.calls.append((event, day_midnight))
        if event in self.unavailable:
            raise TransitUnavailableError(event)
        return day_midnight + DUMMY_OFFSETS[event]

    def sunrise(self, day_midnight, longitude, latitude, tz=None):
        return self._fixed("sunrise", day_midnight)

    def sunset(self, day_midnight, longitude, latitude, tz=None):
        return self._fixed("sunset", day_midnight)

    def moonrise(self, day_midnight, longitude, latitude, tz=None):
        return self._fixed("moonrise", day_midnight)

    def moonset(self, day_midnight, longitude, latitude, tz=None):
        return self._fixed("moonset", day_midnight)

    def noon(self, day_midnight, longitude, tz=None):
        return self._fixed("noon", day_midnight)

    def midnight(self, day_midnight, longitude, tz=None):
        return self._fixed("midnight", day_midnight)


@pytest.fixture
def calculator():
    return DummyTransitCalculator()


@pytest.fixture
def location():
    return Location(latitude=45.71, longitude=15.82, timezone="UTC", name="Zagreb", region="Europe")


@pytest.fixture
def short_day_anchors():
    """An 8 hour day"""
    return AnchorSet({
        Anchor.MIDNIGHT: 0,
        Anchor.MOONSET: 3600,
        Anchor.SUNRISE: 7200,
        Anchor.NOON: 14400,
        Anchor.SUNSET: 21600,
        Anchor.MOONRISE: 25200,
        Anchor.NEXT_MIDNIGHT: 28800,
    })


@pytest.fixture
def segment_images():
    return SegmentImages({
        Segment.MIDNIGHT: (Path("night-1.jpg"), Path("night-2.jpg")),
        Segment.MOONSET: (Path("blue-hour.jpg"),),
        Segment.SUNRISE: (Path("dawn.jpg"), Path("morning.jpg"), Path("late-morning.jpg")),
        Segment.NOON: (Path("afternoon.jpg"),),
        Segment.SUNSET: (),
        Segment.MOONRISE: (Path("moonlight-1.jpg"), Path("moonlight-2.jpg")),
    })


@pytest.fixture
def engine():
    engine = Mock(spec=WallpaperEngine)
    engine.set_wallpaper.return_value = True
    return engine


@pytest.fixture
def make_pack(tmp_path):
    """Create a pack directory with a pack.toml and touched images"""

    def _make_pack(name="lake", images=None, root=None):
        images = images if images is not None else {
            "midnight": ["night-1.jpg", "night-2.jpg"],
            "sunrise": ["dawn.jpg"],
        }
        pack_dir = (root or tmp_path / "packs") / name
        (pack_dir / "images").mkdir(parents=True)
        for names in images.values():
            for image in names:
                (pack_dir / "images" / image).touch()
        with open(pack_dir / "pack.toml", "wb") as f:
            tomli_w.dump({"meta": {"name": name.title(), "author": "Test Author"}, "images": images}, f)
        return pack_dir

    return _make_pack
