# scheduler.py
import signal
import logging
import threading
import time
from datetime import datetime, timezone, tzinfo
from pathlib import Path
from typing import Callable, Dict, Optional

from suncycle.engine import WallpaperEngine
from suncycle.models import Location, SchedulerPhase, SchedulerState, SegmentImages, TimelineEntry
from suncycle.timeline import build_timeline, select_entry
from suncycle.transit import TransitCalculator, get_anchor_set, local_day_midnight

POLL_INTERVAL = 30  # seconds


class WallpaperApplyError(RuntimeError):
    """The OS refused to set a wallpaper"""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Can't set wallpaper to {path}")


class DayScheduler:
    """Keeps the wallpaper in step with the day's sun and moon transits.

    The scheduler owns a single `SchedulerState` (anchors, timeline and the last
    observed time) which is replaced as a whole whenever the day rolls over.
    The only state shared with other execution contexts is the shutdown event,
    set from a signal handler and checked at the top of every iteration.

    Calls to the wallpaper engine and the transit calculator have no timeout;
    if either hangs, the loop hangs with it.
    """

    def __init__(
        self,
        location: Location,
        images: SegmentImages,
        engine: WallpaperEngine,
        calculator: Optional[TransitCalculator] = None,
        tz: Optional[tzinfo] = None,
        poll_interval: float = POLL_INTERVAL,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.logger = logging.getLogger(__name__)
        self.location = location
        self.images = images
        self.engine = engine
        self.calculator = calculator or TransitCalculator()
        self.tz = tz or timezone.utc
        self.poll_interval = poll_interval
        self.clock = clock
        self.sleep = sleep

        self.phase = SchedulerPhase.INITIALIZING
        self.state: Optional[SchedulerState] = None
        self._shutdown = threading.Event()

    @property
    def shutdown_requested(self) -> bool:
        return self._shutdown.is_set()

    def request_shutdown(self) -> None:
        """Ask the loop to stop after the current iteration"""
        self._shutdown.set()

    def _handle_signal(self, signum, frame) -> None:
        self.logger.info(f"🛑 Received signal {signum}, stopping after this tick")
        self.request_shutdown()

    def install_signal_handlers(self) -> Dict[int, object]:
        """Route SIGINT/SIGTERM to the shutdown flag. Returns the previous handlers."""
        previous = {}
        for signum in (signal.SIGINT, signal.SIGTERM):
            previous[signum] = signal.signal(signum, self._handle_signal)
        return previous

    def _compute_state(self, now: float) -> SchedulerState:
        """Anchors and timeline for the local day containing `now`"""
        day = local_day_midnight(now, self.tz)
        anchors = get_anchor_set(day, self.location, self.calculator, self.tz)
        timeline = build_timeline(anchors, self.images)

        day_str = datetime.fromtimestamp(day, tz=timezone.utc).date()
        self.logger.info(f"📅 Schedule for {day_str}: {len(timeline)} wallpapers")
        for anchor, ts in anchors.times.items():
            self.logger.debug(f"    {anchor.value}: {datetime.fromtimestamp(ts, tz=self.tz)}")
        return SchedulerState(anchors=anchors, timeline=timeline, last_seen=int(now))

    def initialize(self) -> SchedulerState:
        """Build the state for the current day"""
        self.phase = SchedulerPhase.INITIALIZING
        self.logger.debug("🔧 Initializing day scheduler")
        self.state = self._compute_state(self.clock())
        self.phase = SchedulerPhase.RUNNING
        return self.state

    def rollover(self, now: float) -> SchedulerState:
        """Discard the current day and compute the next one"""
        self.phase = SchedulerPhase.RECOMPUTING
        self.logger.info("🔁 Day rolled over, recomputing schedule")
        self.state = self._compute_state(now)
        self.phase = SchedulerPhase.RUNNING
        return self.state

    def tick(self) -> Optional[TimelineEntry]:
        """Run one iteration. Returns the entry that was applied, if any."""
        if self.state is None:
            raise RuntimeError("Scheduler is not initialized")

        now = self.clock()
        if now > self.state.anchors.next_midnight:
            self.rollover(now)
            return None

        self.state = SchedulerState(self.state.anchors, self.state.timeline, int(now))

        entry = select_entry(self.state.timeline, now)
        if entry is None:
            self.logger.debug("No wallpapers left for today")
            return None

        self.logger.debug(f"🖼️ Applying {entry.image} (until {entry.timestamp})")
        if not self.engine.set_wallpaper(entry.image):
            raise WallpaperApplyError(entry.image)
        return entry

    def run(self) -> None:
        """Poll until shutdown is requested"""
        self.logger.info(f"✨ Scheduler running (every {self.poll_interval}s)")
        while not self._shutdown.is_set():
            self.tick()
            self.sleep(self.poll_interval)

        self.phase = SchedulerPhase.TERMINATING
        self.logger.info("👋 Scheduler stopped")

    def start(self) -> None:
        """Initialize, hook up signals and run until shutdown"""
        self.initialize()
        previous = self.install_signal_handlers()
        try:
            self.run()
        finally:
            for signum, handler in previous.items():
                if handler is not None:
                    signal.signal(signum, handler)
