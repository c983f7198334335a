"""quoterecorder - 分钟级股票行情采集

抓取上游图表接口的分钟行情, 校验结构并按盘前/盘中/盘后时段归类后入库.
"""

from quoterecorder.core.data.ingestion import parse_daily_chart, validate_chart
from quoterecorder.core.models import DailyAnalysis, MinuteBar, RawPayload, TradingSession
from quoterecorder.core.services import IngestionOrchestrator, RawPayloadProcessor

__version__ = "0.1.0"

__all__ = [
    "DailyAnalysis",
    "IngestionOrchestrator",
    "MinuteBar",
    "RawPayload",
    "RawPayloadProcessor",
    "TradingSession",
    "parse_daily_chart",
    "validate_chart",
]
