"""Market timezone lookup and day-window computation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from zoneinfo import ZoneInfo

from quoterecorder.core.config.settings import DEFAULT_MARKETS

DAY_SECONDS = int(timedelta(days=1).total_seconds())


def normalize_market(market: str) -> str:
    """Normalize market identifiers for calendar lookups."""

    return market.strip().lower()


@dataclass(frozen=True)
class MarketCalendar:
    """A market name bound to the timezone its trading days are counted in."""

    name: str
    timezone: str = "UTC"

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def day_window(self, day: date) -> tuple[int, int]:
        return day_window(day, self.tz)


def day_window(day: date | datetime, tz: tzinfo | None = None) -> tuple[int, int]:
    """Return epoch bounds of ``[local midnight, local midnight + 24h)``.

    An aware ``datetime`` supplies its own timezone; otherwise ``tz`` is
    used, defaulting to UTC. The end bound is always 24 hours after the
    start, also across DST changes.
    """

    if isinstance(day, datetime):
        zone = day.tzinfo or tz or ZoneInfo("UTC")
        day = day.date()
    else:
        zone = tz or ZoneInfo("UTC")

    start = datetime(day.year, day.month, day.day, tzinfo=zone)
    start_epoch = int(start.timestamp())
    return start_epoch, start_epoch + DAY_SECONDS


class MarketCalendarProvider:
    """Provides market calendars keyed by normalized market names."""

    def __init__(
        self,
        markets: Mapping[str, str] | None = None,
        default_calendar: MarketCalendar | None = None,
    ) -> None:
        source = DEFAULT_MARKETS if markets is None else markets
        self._calendars = {
            normalize_market(name): MarketCalendar(name=normalize_market(name), timezone=tz)
            for name, tz in source.items()
        }
        self._default_calendar = default_calendar or MarketCalendar(name="default")

    def get_calendar(self, market: str) -> MarketCalendar:
        """Return the matching calendar or fallback to the UTC default."""

        return self._calendars.get(normalize_market(market), self._default_calendar)

    def day_window(self, market: str, day: date | datetime) -> tuple[int, int]:
        """Day window of ``day`` in the timezone of ``market``."""

        return day_window(day, self.get_calendar(market).tz)


__all__ = [
    "DAY_SECONDS",
    "MarketCalendar",
    "MarketCalendarProvider",
    "day_window",
    "normalize_market",
]
