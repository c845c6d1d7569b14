import pytest
from pathlib import Path
from datetime import timezone

from suncycle.models import Segment, SegmentImages, TimelineEntry
from suncycle.timeline import partition, build_timeline, select_entry, describe_timeline


class TestPartition:
    """Tests for splitting an interval into activation points"""

    @pytest.mark.parametrize("count", [0, 1, 2, 5, 17])
    def test_returns_count_points(self, count):
        """The number of points always equals the number of images"""
        assert len(partition(1000, 5000, count)) == count

    def test_empty_for_zero_count(self):
        assert partition(0, 3600, 0) == []

    def test_start_is_never_emitted(self):
        """Points start one step after the interval start and end on it when divisible"""
        assert partition(0, 3600, 2) == [1800, 3600]
        assert partition(100, 400, 3) == [200, 300, 400]

    def test_truncating_step(self):
        """The remainder of an uneven split is left after the last point"""
        assert partition(0, 10, 3) == [3, 6, 9]

    def test_non_decreasing(self):
        points = partition(1_700_000_000, 1_700_043_210, 7)
        assert points == sorted(points)

    def test_deterministic(self):
        assert partition(12, 98765, 9) == partition(12, 98765, 9)

    def test_inverted_interval_is_not_validated(self):
        """An end before the start yields a decreasing sequence, truncated towards zero"""
        assert partition(10, 0, 3) == [7, 4, 1]


class TestBuildTimeline:
    """Tests for assembling the day's timeline"""

    def test_length_is_total_images(self, short_day_anchors, segment_images):
        timeline = build_timeline(short_day_anchors, segment_images)
        assert len(timeline) == segment_images.total() == 9

    def test_first_segment_split(self, short_day_anchors, segment_images):
        """Two midnight images split the midnight→moonset hour in half"""
        timeline = build_timeline(short_day_anchors, segment_images)
        assert timeline[0] == TimelineEntry(1800, Path("night-1.jpg"), Segment.MIDNIGHT)
        assert timeline[1] == TimelineEntry(3600, Path("night-2.jpg"), Segment.MIDNIGHT)

    def test_segments_in_cyclic_order(self, short_day_anchors, segment_images):
        timeline = build_timeline(short_day_anchors, segment_images)
        segments = [entry.segment for entry in timeline]
        assert segments == [
            Segment.MIDNIGHT, Segment.MIDNIGHT,
            Segment.MOONSET,
            Segment.SUNRISE, Segment.SUNRISE, Segment.SUNRISE,
            Segment.NOON,
            Segment.MOONRISE, Segment.MOONRISE,
        ]

    def test_timestamps_non_decreasing(self, short_day_anchors, segment_images):
        timestamps = [entry.timestamp for entry in build_timeline(short_day_anchors, segment_images)]
        assert timestamps == sorted(timestamps)

    def test_last_entry_at_next_midnight(self, short_day_anchors, segment_images):
        timeline = build_timeline(short_day_anchors, segment_images)
        assert timeline[-1].timestamp == short_day_anchors.next_midnight

    def test_empty_segments(self, short_day_anchors):
        assert build_timeline(short_day_anchors, SegmentImages()) == ()

    def test_segment_images_stay_in_order(self, short_day_anchors, segment_images):
        timeline = build_timeline(short_day_anchors, segment_images)
        sunrise = [entry.image.name for entry in timeline if entry.segment is Segment.SUNRISE]
        assert sunrise == ["dawn.jpg", "morning.jpg", "late-morning.jpg"]


class TestSelectEntry:
    """Tests for picking the active wallpaper"""

    def test_first_future_entry(self, short_day_anchors, segment_images):
        timeline = build_timeline(short_day_anchors, segment_images)
        entry = select_entry(timeline, 1000)
        assert entry.timestamp == 1800
        assert entry.image == Path("night-1.jpg")

    def test_strictly_greater(self, short_day_anchors, segment_images):
        """An entry scheduled exactly at `now` is already in the past"""
        timeline = build_timeline(short_day_anchors, segment_images)
        assert select_entry(timeline, 1800).image == Path("night-2.jpg")

    def test_none_after_last_entry(self, short_day_anchors, segment_images):
        timeline = build_timeline(short_day_anchors, segment_images)
        assert select_entry(timeline, 28800) is None
        assert select_entry(timeline, 50000) is None

    def test_first_match_wins(self):
        """Later entries with smaller timestamps are never considered"""
        timeline = (
            TimelineEntry(500, Path("a.jpg"), Segment.MIDNIGHT),
            TimelineEntry(100, Path("b.jpg"), Segment.MOONSET),
        )
        assert select_entry(timeline, 50).image == Path("a.jpg")

    def test_empty_timeline(self):
        assert select_entry((), 0) is None


def test_describe_timeline(short_day_anchors, segment_images):
    rows = describe_timeline(build_timeline(short_day_anchors, segment_images), timezone.utc)
    assert rows[0] == ("00:30:00", "midnight", "night-1.jpg")
    assert rows[-1] == ("08:00:00", "moonrise", "moonlight-2.jpg")
