# timeline.py
import logging
from datetime import datetime, tzinfo
from typing import List, Optional, Tuple

from suncycle.models import AnchorSet, Segment, SegmentImages, Timeline, TimelineEntry

logger = logging.getLogger(__name__)


def partition(start: int, end: int, count: int) -> List[int]:
    """Split [start, end) into `count` evenly spaced activation points.

    The start instant itself is never emitted; the last point lands on `end`
    when the span divides evenly. No validation is performed, an inverted
    interval yields a decreasing sequence.
    """
    if count <= 0:
        return []

    span = end - start
    # Truncate towards zero, floor division would round negative spans down
    step = span // count if span >= 0 else -(-span // count)
    return [start + step * i for i in range(1, count + 1)]


def build_timeline(anchors: AnchorSet, images: SegmentImages) -> Timeline:
    """Build the ordered (timestamp, image) sequence for a whole day.

    Segments are concatenated in their cyclic order, the result is not sorted.
    """
    entries = []
    for segment in Segment:
        start, end = anchors.bounds(segment)
        segment_images = images[segment]
        timestamps = partition(start, end, len(segment_images))
        entries.extend(
            TimelineEntry(timestamp=ts, image=image, segment=segment)
            for ts, image in zip(timestamps, segment_images)
        )

    logger.debug(f"Built timeline with {len(entries)} entries")
    return tuple(entries)


def select_entry(timeline: Timeline, now: float) -> Optional[TimelineEntry]:
    """Get the first entry scheduled strictly after `now`"""
    for entry in timeline:
        if entry.timestamp > now:
            return entry
    return None


def describe_timeline(timeline: Timeline, tz: tzinfo) -> List[Tuple[str, str, str]]:
    """Rows of (local time, segment, image name) for display"""
    rows = []
    for entry in timeline:
        when = datetime.fromtimestamp(entry.timestamp, tz=tz)
        rows.append((when.strftime("%H:%M:%S"), entry.segment.key, entry.image.name))
    return rows
