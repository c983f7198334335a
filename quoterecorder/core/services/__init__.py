"""Orchestration services."""

from quoterecorder.core.services.calendars import MarketCalendar, MarketCalendarProvider, day_window
from quoterecorder.core.services.ingestion import IngestionOrchestrator, build_chart_params
from quoterecorder.core.services.processing import ProcessingSummary, RawPayloadProcessor

__all__ = [
    "IngestionOrchestrator",
    "MarketCalendar",
    "MarketCalendarProvider",
    "ProcessingSummary",
    "RawPayloadProcessor",
    "build_chart_params",
    "day_window",
]
