"""Fetch orchestration: skip stored days, download the rest, enqueue raw payloads."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from loguru import logger

from quoterecorder.core.config import FetchConfig
from quoterecorder.core.data.cache.raw_file import RawFileCache
from quoterecorder.core.exceptions import StoreLookupError
from quoterecorder.core.interfaces import RawPayloadSink, TextFetcher
from quoterecorder.core.logging import log_context
from quoterecorder.core.models.analysis import RawPayload
from quoterecorder.core.models.market import INTERVAL_1M, RawStatus
from quoterecorder.core.services.calendars import MarketCalendarProvider

CHART_EVENTS = "div|split|earn"


def build_chart_params(period1: int, period2: int, interval: str = INTERVAL_1M) -> dict[str, Any]:
    """Query parameters of a minute chart request including pre/post market and events."""

    return {
        "period1": period1,
        "period2": period2,
        "interval": interval,
        "indicators": "quote",
        "includeTimestamps": "true",
        "includePrePost": "true",
        "events": CHART_EVENTS,
        "corsDomain": "finance.yahoo.com",
    }


class IngestionOrchestrator:
    """Download one day of minute quotes per call unless it is already stored.

    Instances hold no per-call state, so one orchestrator can serve many
    concurrent ``fetch_daily_quotes`` tasks.
    """

    def __init__(
        self,
        sink: RawPayloadSink,
        fetcher: TextFetcher,
        *,
        config: FetchConfig | None = None,
        calendars: MarketCalendarProvider | None = None,
        file_cache: RawFileCache | None = None,
    ) -> None:
        self.sink = sink
        self.fetcher = fetcher
        self.config = config or FetchConfig()
        self.calendars = calendars or MarketCalendarProvider()
        self.file_cache = file_cache

    def chart_url(self, query_code: str) -> str:
        return f"{self.config.chart_url.rstrip('/')}/{query_code}"

    def _exists(self, market: str, company_code: str, day: date) -> bool:
        try:
            return self.sink.exists(market, company_code, day)
        except StoreLookupError:
            raise
        except Exception as exc:
            raise StoreLookupError(f"existence check failed: {exc}", market, company_code, day) from exc

    async def fetch_daily_quotes(
        self,
        market: str,
        company_code: str,
        query_code: str,
        day: date | datetime,
    ) -> bool:
        """Fetch and enqueue the minute quotes of ``company_code`` on ``day``.

        Returns:
            False when the day was already stored and nothing was fetched,
            True when a new raw payload was enqueued.

        Raises:
            StoreLookupError: the existence check failed.
            FetchError: the download failed after all retries.
            CacheError: the raw file cache could not be written.
        """

        trade_date = day.date() if isinstance(day, datetime) else day

        with log_context(market=market, code=company_code, date=trade_date.isoformat()):
            if self._exists(market, company_code, trade_date):
                logger.debug("daily quotes already stored, skipping fetch")
                return False

            period1, period2 = self.calendars.day_window(market, day)
            url = self.chart_url(query_code)
            content = await self.fetcher.download_text(url, build_chart_params(period1, period2))

            payload = RawPayload(
                market=market,
                code=company_code,
                date=trade_date,
                json_text=content,
                status=RawStatus.UNPROCESSED,
            )
            self.sink.enqueue(payload)
            logger.info("enqueued raw daily quotes ({size} bytes)", size=len(content))

            if self.file_cache is not None:
                self.file_cache.save(market, company_code, trade_date, content)

        return True


__all__ = ["CHART_EVENTS", "IngestionOrchestrator", "build_chart_params"]
