# transit.py
import logging
from datetime import datetime, date, time, timedelta, timezone, tzinfo
from typing import Callable, Dict, List, Optional, Tuple, Union
from zoneinfo import ZoneInfo

from astral import Observer, sun, moon

from suncycle.models import Anchor, AnchorSet, Location


class TransitUnavailableError(ValueError):
    """A transit can't be computed for the given day and location"""

    def __init__(self, event: str, reason: Optional[str] = None):
        self.event = event
        self.reason = reason
        message = f"Can't get {event}."
        if reason:
            message += f" ({reason})"
        super().__init__(message)


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """tzinfo for an IANA name, UTC when empty"""
    if not name or name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def day_to_date(day_midnight: int) -> date:
    """Calendar date of a UTC-midnight POSIX timestamp"""
    return datetime.fromtimestamp(day_midnight, tz=timezone.utc).date()


def local_day_midnight(now: float, tz: tzinfo) -> int:
    """UTC-midnight POSIX timestamp of the local calendar date of `now`"""
    local_date = datetime.fromtimestamp(now, tz=tz).date()
    return int(datetime.combine(local_date, time(0, 0), tzinfo=timezone.utc).timestamp())


def add_calendar_day(timestamp: int, tz: tzinfo) -> int:
    """Add one calendar day in the given timezone (DST-aware)"""
    local = datetime.fromtimestamp(timestamp, tz=tz)
    # Aware datetime arithmetic keeps the wall-clock time; the UTC offset is
    # re-evaluated when converting back.
    return int((local + timedelta(days=1)).timestamp())


class TransitCalculator:
    """Calculator for sun and moon transit times.

    Every method takes the day as the UTC-midnight timestamp of a local
    calendar date, plus the timezone that date belongs to. The day itself runs
    from the solar midnight nearest to local clock midnight up to one calendar
    day later, and every other transit is picked from inside that window.
    """

    def __init__(self):
        self._cache: Dict[Tuple[str, int, float, float, tzinfo], int] = {}
        self._raw: Dict[Tuple[str, date, float, float], Optional[int]] = {}
        self.logger = logging.getLogger(__name__)

    def _query(self, event: str, func: Callable, on: date, longitude: float, latitude: float) -> Optional[int]:
        """Raw astral lookup for a UTC date, None when the event doesn't happen"""
        key = (event, on, longitude, latitude)
        if key not in self._raw:
            observer = Observer(latitude=latitude, longitude=longitude)
            try:
                result = func(observer, on, tzinfo=timezone.utc)
            except ValueError as e:
                self.logger.debug(f"No {event} on {on}: {e}")
                result = None
            self._raw[key] = int(result.timestamp()) if result is not None else None
        return self._raw[key]

    def _candidates(self, event: str, func: Callable, day_midnight: int, longitude: float, latitude: float) -> List[int]:
        # A local day overlaps at most three UTC dates
        local_date = day_to_date(day_midnight)
        found = []
        for offset in (-1, 0, 1):
            ts = self._query(event, func, local_date + timedelta(days=offset), longitude, latitude)
            if ts is not None:
                found.append(ts)
        return found

    def _resolve(
        self,
        event: str,
        func: Callable,
        day_midnight: int,
        longitude: float,
        latitude: float,
        tz: tzinfo
    ) -> int:
        cache_key = (event, day_midnight, longitude, latitude, tz)
        if cache_key in self._cache:
            return self._cache[cache_key]

        start = self.midnight(day_midnight, longitude, tz)
        end = add_calendar_day(start, tz)

        for ts in sorted(self._candidates(event, func, day_midnight, longitude, latitude)):
            if start <= ts < end:
                self._cache[cache_key] = ts
                return ts

        window = f"{datetime.fromtimestamp(start, tz=tz):%Y-%m-%d %H:%M} - {datetime.fromtimestamp(end, tz=tz):%Y-%m-%d %H:%M}"
        raise TransitUnavailableError(event, f"none between {window}")

    def sunrise(self, day_midnight: int, longitude: float, latitude: float, tz: tzinfo = timezone.utc) -> int:
        return self._resolve("sunrise", sun.sunrise, day_midnight, longitude, latitude, tz)

    def sunset(self, day_midnight: int, longitude: float, latitude: float, tz: tzinfo = timezone.utc) -> int:
        return self._resolve("sunset", sun.sunset, day_midnight, longitude, latitude, tz)

    def moonrise(self, day_midnight: int, longitude: float, latitude: float, tz: tzinfo = timezone.utc) -> int:
        return self._resolve("moonrise", moon.moonrise, day_midnight, longitude, latitude, tz)

    def moonset(self, day_midnight: int, longitude: float, latitude: float, tz: tzinfo = timezone.utc) -> int:
        return self._resolve("moonset", moon.moonset, day_midnight, longitude, latitude, tz)

    def noon(self, day_midnight: int, longitude: float, tz: tzinfo = timezone.utc) -> int:
        return self._resolve("noon", sun.noon, day_midnight, longitude, 0.0, tz)

    def midnight(self, day_midnight: int, longitude: float, tz: tzinfo = timezone.utc) -> int:
        """Solar midnight closest to the local clock midnight of the day"""
        cache_key = ("midnight", day_midnight, longitude, 0.0, tz)
        if cache_key in self._cache:
            return self._cache[cache_key]

        candidates = self._candidates("midnight", sun.midnight, day_midnight, longitude, 0.0)
        if not candidates:
            raise TransitUnavailableError("midnight")

        clock_midnight = datetime.combine(day_to_date(day_midnight), time(0, 0), tzinfo=tz).timestamp()
        ts = min(candidates, key=lambda c: abs(c - clock_midnight))
        self._cache[cache_key] = ts
        return ts


def get_anchor_set(
    day_midnight: int,
    location: Location,
    calculator: TransitCalculator,
    tz: Union[tzinfo, None] = None
) -> AnchorSet:
    """Fetch all anchors for a day.

    The first unavailable transit propagates as `TransitUnavailableError`;
    no partial anchor set is ever returned.

    Args:
        day_midnight (int): UTC-midnight POSIX timestamp of the local date
        location (Location): Where to compute the transits
        calculator (TransitCalculator): Transit provider
        tz (tzinfo, optional): Timezone of the location, used to pick the
            local day and the next midnight. Defaults to UTC.
    """

    logger = logging.getLogger(__name__)
    lon, lat = location.longitude, location.latitude
    tz = tz or timezone.utc

    times = {
        Anchor.SUNRISE: calculator.sunrise(day_midnight, lon, lat, tz),
        Anchor.SUNSET: calculator.sunset(day_midnight, lon, lat, tz),
        Anchor.NOON: calculator.noon(day_midnight, lon, tz),
        Anchor.MIDNIGHT: calculator.midnight(day_midnight, lon, tz),
        Anchor.MOONRISE: calculator.moonrise(day_midnight, lon, lat, tz),
        Anchor.MOONSET: calculator.moonset(day_midnight, lon, lat, tz),
    }
    times[Anchor.NEXT_MIDNIGHT] = add_calendar_day(times[Anchor.MIDNIGHT], tz)

    anchors = AnchorSet(times)
    outside = anchors.outside_day()
    if outside:
        names = ", ".join(a.value for a in outside)
        logger.warning(f"⚠️ Anchors outside the day of {day_to_date(day_midnight)}: {names}")
    elif not anchors.is_ordered():
        logger.warning(f"⚠️ Anchors for {day_to_date(day_midnight)} are not in cyclic order, images may be skipped")
    return anchors
