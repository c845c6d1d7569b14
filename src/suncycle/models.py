# src/suncycle/models.py
import sys
from pathlib import Path
from enum import Enum
from types import MappingProxyType
from dataclasses import dataclass, field
from typing import Optional, Dict, List, Mapping, Tuple, Iterable
from collections import defaultdict


# Anchor- and segment-related data structures
class Anchor(Enum):
    """Named instants of a day"""
    MIDNIGHT = "midnight"
    MOONSET = "moonset"
    SUNRISE = "sunrise"
    NOON = "noon"
    SUNSET = "sunset"
    MOONRISE = "moonrise"
    NEXT_MIDNIGHT = "next_midnight"

    @classmethod
    def base(cls) -> Tuple["Anchor", ...]:
        """The six anchors supplied by the transit provider"""
        return tuple(a for a in cls if a is not cls.NEXT_MIDNIGHT)


class Segment(Enum):
    """Day segments, in cyclic order, named after the anchor they start at"""
    MIDNIGHT = (Anchor.MIDNIGHT, Anchor.MOONSET)
    MOONSET = (Anchor.MOONSET, Anchor.SUNRISE)
    SUNRISE = (Anchor.SUNRISE, Anchor.NOON)
    NOON = (Anchor.NOON, Anchor.SUNSET)
    SUNSET = (Anchor.SUNSET, Anchor.MOONRISE)
    MOONRISE = (Anchor.MOONRISE, Anchor.NEXT_MIDNIGHT)

    @property
    def start(self) -> Anchor:
        return self.value[0]

    @property
    def end(self) -> Anchor:
        return self.value[1]

    @property
    def key(self) -> str:
        """Key used for the segment in pack files"""
        return self.start.value

    @classmethod
    def from_key(cls, key: str) -> "Segment":
        for segment in cls:
            if segment.key == key.lower():
                return segment
        raise ValueError(f"Unknown segment: '{key}'")

    def __str__(self) -> str:
        return f"{self.start.value} → {self.end.value}"


@dataclass(frozen=True)
class AnchorSet:
    """POSIX timestamps for every anchor of one day"""
    times: Mapping[Anchor, int]

    def __post_init__(self):
        missing = [a.value for a in Anchor if a not in self.times]
        if missing:
            raise ValueError(f"Anchor set is missing: {', '.join(missing)}")
        # Freeze the mapping so the set can't be patched after creation
        object.__setattr__(self, "times", MappingProxyType(dict(self.times)))

    def __getitem__(self, anchor: Anchor) -> int:
        return self.times[anchor]

    @property
    def midnight(self) -> int:
        return self.times[Anchor.MIDNIGHT]

    @property
    def next_midnight(self) -> int:
        return self.times[Anchor.NEXT_MIDNIGHT]

    def bounds(self, segment: Segment) -> Tuple[int, int]:
        """Start and end timestamps of a segment"""
        return self.times[segment.start], self.times[segment.end]

    def is_ordered(self) -> bool:
        """Check that anchors strictly increase in cyclic order"""
        return all(start < end for start, end in (self.bounds(s) for s in Segment))

    def outside_day(self) -> Tuple[Anchor, ...]:
        """Base anchors that fall outside [midnight, next_midnight)"""
        return tuple(a for a in Anchor.base() if not self.midnight <= self.times[a] < self.next_midnight)


@dataclass(frozen=True)
class TimelineEntry:
    """A single activation point of the day"""
    timestamp: int
    image: Path
    segment: Segment

    def __str__(self) -> str:
        return f"{self.timestamp} {self.image.name} ({self.segment.key})"


Timeline = Tuple[TimelineEntry, ...]


@dataclass(frozen=True)
class SegmentImages:
    """Ordered image lists for each day segment"""
    images: Mapping[Segment, Tuple[Path, ...]] = field(default_factory=dict)

    def __post_init__(self):
        frozen = {segment: tuple(self.images.get(segment, ())) for segment in Segment}
        object.__setattr__(self, "images", MappingProxyType(frozen))

    def __getitem__(self, segment: Segment) -> Tuple[Path, ...]:
        return self.images[segment]

    def total(self) -> int:
        return sum(len(images) for images in self.images.values())

    def all_images(self) -> Iterable[Path]:
        for segment in Segment:
            yield from self.images[segment]


# Scheduler-related data structures
class SchedulerPhase(Enum):
    """Phases of the day scheduler"""
    INITIALIZING = "initializing"
    RUNNING = "running"
    RECOMPUTING = "recomputing"
    TERMINATING = "terminating"


@dataclass(frozen=True)
class SchedulerState:
    """Everything the scheduler knows about the current day"""
    anchors: AnchorSet
    timeline: Timeline
    last_seen: int


# Config- and pack-related data structures
@dataclass
class Location:
    """Geographic location data for transit calculations"""
    latitude: float
    longitude: float
    timezone: str = "UTC"
    name: str = "location"
    region: str = "region"

    def __str__(self) -> str:
        """Human-readable representation of the location"""
        return f"{self.name} ({self.latitude:.2f}, {self.longitude:.2f})"


@dataclass
class PackMeta:
    """Metadata for a wallpaper pack"""
    name: str
    author: Optional[str] = None
    description: Optional[str] = None
    version: str = "1.0"

    def __str__(self) -> str:
        return f"{self.name} v{self.version}" + (f" by {self.author}" if self.author else "")


@dataclass
class PackSchedule:
    """Parsed pack file: metadata and per-segment images"""
    meta: PackMeta
    images: SegmentImages

    def __str__(self) -> str:
        return f"{self.meta.name}: {self.images.total()} images"


@dataclass
class Pack:
    """Wallpaper pack data structure"""
    name: str
    path: Path
    uid: str


@dataclass
class PackSearchPaths:
    """OS-specific wallpacks search paths"""
    linux: List[str] = None
    darwin: List[str] = None
    win32: List[str] = None

    def __post_init__(self):
        self.linux = [
            "~/.local/share/suncycle/packs",
            "/usr/share/suncycle/packs",
        ]
        self.darwin = [
            "~/Pictures/suncycle",
            "~/Library/Application Support/suncycle/packs",
        ]
        self.win32 = [
            "~/Pictures/suncycle",
            "C:/Users/Public/Pictures/suncycle",
        ]

    def get_paths(self) -> List[Path]:
        """Get paths for current platform"""
        platform_paths = getattr(self, sys.platform, None) or []
        return [Path(p).expanduser() for p in platform_paths]


class ValidationResult:
    def __init__(self):
        self.messages = []

    def add(self, check: str, level: str, message: str):
        """
        Add a message to the result.
        :param check: Identifier for the check (e.g., "pack_images").
        :param level: The level of the message (error or warning).
        :param message: The message to display.
        """

        self.messages.append({
            "check": check,
            "level": level,
            "message": message
        })

    @property
    def errors(self) -> Dict[str, List[str]]:
        errors = defaultdict(list)
        for msg in self.messages:
            if msg["level"] == "error":
                errors[msg["check"]].append(msg["message"])
        return errors

    @property
    def warnings(self) -> Dict[str, List[str]]:
        warnings = defaultdict(list)
        for msg in self.messages:
            if msg["level"] == "warning":
                warnings[msg["check"]].append(msg["message"])
        return warnings

    @property
    def passed(self) -> bool:
        """Validation is considered passed if there are no errors"""
        return len(self.errors) == 0

    @property
    def failed(self) -> bool:
        """Validation is considered failed if there are any errors"""
        return len(self.errors) > 0
