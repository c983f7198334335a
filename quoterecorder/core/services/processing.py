"""Turn stored raw payloads into daily analyses."""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from quoterecorder.core.data.ingestion.parser import parse_daily_chart
from quoterecorder.core.data.storage.repository import QuoteStore
from quoterecorder.core.exceptions import ParseError
from quoterecorder.core.logging import log_context
from quoterecorder.core.models.analysis import DailyAnalysis, RawPayload
from quoterecorder.core.models.market import RawStatus


@dataclass(slots=True)
class ProcessingSummary:
    """Counts of one processing run."""

    processed: int = 0
    invalid: int = 0
    failed: int = 0
    analyses: list[DailyAnalysis] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.processed + self.failed


class RawPayloadProcessor:
    """Parse unprocessed raw payloads and persist the results.

    A day that fails validation is still stored, as an error analysis, so it
    is not fetched again; only undecodable payloads are marked failed.
    """

    def __init__(self, store: QuoteStore) -> None:
        self.store = store

    def process(self, payload: RawPayload) -> DailyAnalysis | None:
        with log_context(market=payload.market, code=payload.code, date=payload.date.isoformat()):
            try:
                analysis = parse_daily_chart(payload.code, payload.market, payload.date, payload.json_text)
            except ParseError as exc:
                logger.bind(error_code=exc.error_code).warning("raw payload could not be decoded: {}", exc.message)
                self.store.mark_raw(payload.market, payload.code, payload.date, RawStatus.FAILED, exc.message)
                return None

            self.store.save_analysis(analysis)
            self.store.mark_raw(payload.market, payload.code, payload.date, RawStatus.PROCESSED, analysis.message)
            if analysis.error:
                logger.warning("daily quotes invalid: {}", analysis.message)
            else:
                logger.info(
                    "classified {count} minute bars (pre={pre}, regular={regular}, post={post})",
                    count=analysis.bar_count,
                    pre=len(analysis.pre),
                    regular=len(analysis.regular),
                    post=len(analysis.post),
                )
            return analysis

    def process_pending(self, limit: int | None = None) -> ProcessingSummary:
        summary = ProcessingSummary()
        for payload in self.store.pending_raw(limit):
            analysis = self.process(payload)
            if analysis is None:
                summary.failed += 1
                continue
            summary.processed += 1
            if analysis.error:
                summary.invalid += 1
            summary.analyses.append(analysis)
        return summary


__all__ = ["ProcessingSummary", "RawPayloadProcessor"]
