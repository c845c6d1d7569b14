import pytest
from pathlib import Path

from suncycle.models import Segment
from suncycle.schedule import ScheduleManager


@pytest.fixture
def schedule_manager():
    return ScheduleManager()


class TestScheduleParser:
    """Tests for parsing pack files"""

    def test_load_from_directory(self, schedule_manager, make_pack):
        pack_dir = make_pack("lake")
        schedule = schedule_manager.load_schedule(pack_dir)

        assert schedule.meta.name == "Lake"
        assert schedule.meta.author == "Test Author"
        assert schedule.meta.version == "1.0"
        assert schedule.images[Segment.MIDNIGHT] == (
            pack_dir / "images" / "night-1.jpg",
            pack_dir / "images" / "night-2.jpg",
        )
        assert schedule.images[Segment.SUNRISE] == (pack_dir / "images" / "dawn.jpg",)

    def test_missing_segments_are_empty(self, schedule_manager, make_pack):
        schedule = schedule_manager.load_schedule(make_pack("lake") / "pack.toml")
        assert schedule.images[Segment.NOON] == ()
        assert schedule.images[Segment.MOONRISE] == ()
        assert schedule.images.total() == 3

    def test_single_image_as_string(self, schedule_manager, tmp_path):
        path = tmp_path / "pack.toml"
        path.write_text('[meta]\nname = "Solo"\n\n[images]\nnoon = "noon.jpg"\n')

        schedule = schedule_manager.load_schedule(path)
        assert schedule.images[Segment.NOON] == (tmp_path / "images" / "noon.jpg",)

    def test_absolute_image_paths_are_kept(self, schedule_manager, tmp_path):
        image = tmp_path / "elsewhere" / "moon.jpg"
        path = tmp_path / "pack.toml"
        path.write_text(f'[meta]\nname = "Abs"\n\n[images]\nmoonrise = ["{image.as_posix()}"]\n')

        schedule = schedule_manager.load_schedule(path)
        assert schedule.images[Segment.MOONRISE] == (Path(image.as_posix()),)

    def test_segment_summary(self, schedule_manager, make_pack):
        schedule = schedule_manager.load_schedule(make_pack("lake"))
        summary = schedule_manager.segment_summary(schedule)
        assert [segment for segment, _ in summary] == list(Segment)
        assert dict(summary)[Segment.MIDNIGHT] == 2

    @pytest.mark.parametrize("content, error", [
        ('[images]\nnoon = ["a.jpg"]\n', "meta"),
        ('[meta]\nauthor = "x"\n', "name"),
        ('[meta]\nname = "x"\n[images]\ndusk = ["a.jpg"]\n', "Unknown segment"),
        ('[meta]\nname = "x"\n[images]\nnoon = [1, 2]\n', "list of file names"),
        ('[meta\nname = ', "Failed to load"),
    ])
    def test_invalid_pack_files(self, schedule_manager, tmp_path, content, error):
        path = tmp_path / "pack.toml"
        path.write_text(content)
        with pytest.raises(ValueError, match=error):
            schedule_manager.load_schedule(path)

    def test_missing_file(self, schedule_manager, tmp_path):
        with pytest.raises(ValueError):
            schedule_manager.load_schedule(tmp_path / "nope.toml")
