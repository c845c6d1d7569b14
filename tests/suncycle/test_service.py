import logging
import pytest
from unittest.mock import Mock

from suncycle.config import ConfigManager
from suncycle.models import Location
from suncycle.scheduler import DayScheduler
from suncycle.service import run_service

from conftest import DummyTransitCalculator


@pytest.fixture
def config_manager(tmp_path):
    manager = ConfigManager(config_dir=tmp_path / "config")
    manager.set_location(Location(latitude=45.71, longitude=15.82, timezone="UTC", name="Zagreb", region="Europe"))
    return manager


@pytest.fixture
def active_pack(config_manager, make_pack):
    make_pack("lake", root=config_manager.packs_dir)
    pack = config_manager.load_packs()["lake"][0]
    assert config_manager.set_active_pack(pack)
    return pack


def quiet_scheduler(created, now=1000):
    """Factory for a scheduler with a frozen clock that stops after one tick"""

    def factory(**kwargs):
        scheduler = DayScheduler(clock=lambda: now, sleep=lambda seconds: scheduler.request_shutdown(), **kwargs)
        created.append(scheduler)
        return scheduler

    return factory


class TestRunService:
    """Tests for the service entry point"""

    def test_not_configured(self, config_manager, engine, caplog):
        """An empty pack name exits cleanly before any transit or timeline work"""
        calculator = DummyTransitCalculator()
        factory = Mock()

        with caplog.at_level(logging.INFO):
            code = run_service(config_manager, engine, calculator, scheduler_factory=factory)

        assert code == 0
        assert calculator.calls == []
        factory.assert_not_called()
        engine.set_wallpaper.assert_not_called()
        assert "No pack selected" in caplog.text

    def test_runs_active_pack(self, config_manager, active_pack, engine):
        created = []
        code = run_service(
            config_manager, engine, DummyTransitCalculator(),
            poll_interval=5, scheduler_factory=quiet_scheduler(created),
        )

        assert code == 0
        assert len(created) == 1
        assert created[0].poll_interval == 5
        engine.set_wallpaper.assert_called_once_with(active_pack.path / "images" / "night-1.jpg")

    def test_sunrise_unavailable(self, config_manager, active_pack, engine, caplog):
        """A missing sunrise stops the service before any wallpaper is applied"""
        calculator = DummyTransitCalculator(unavailable={"sunrise"})
        created = []

        code = run_service(config_manager, engine, calculator, scheduler_factory=quiet_scheduler(created))

        assert code == 1
        assert created[0].state is None
        engine.set_wallpaper.assert_not_called()
        assert "sunrise" in caplog.text

    def test_apply_failure(self, config_manager, active_pack, engine, caplog):
        engine.set_wallpaper.return_value = False
        code = run_service(config_manager, engine, DummyTransitCalculator(), scheduler_factory=quiet_scheduler([]))

        assert code == 1
        assert "Error applying wallpaper" in caplog.text

    def test_broken_pack_file(self, config_manager, active_pack, engine, caplog):
        (active_pack.path / "pack.toml").write_text("[meta\nname = ")
        calculator = DummyTransitCalculator()

        code = run_service(config_manager, engine, calculator, scheduler_factory=quiet_scheduler([]))

        assert code == 1
        assert calculator.calls == []
        assert "Error loading pack" in caplog.text

    def test_unreadable_config(self, tmp_path, engine, caplog, monkeypatch):
        config_dir = tmp_path / "broken"
        config_dir.mkdir()
        (config_dir / "config.toml").write_text("this is not toml = = =")

        class BrokenConfigManager(ConfigManager):
            def __init__(self):
                super().__init__(config_dir=config_dir)

        # Construction fails, so hand run_service nothing and let it build one
        monkeypatch.setattr("suncycle.service.ConfigManager", BrokenConfigManager)
        code = run_service(engine=engine, calculator=DummyTransitCalculator())

        assert code == 1
        assert "Configuration error" in caplog.text
