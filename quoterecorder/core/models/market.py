"""Market-related enums and types."""

from enum import Enum, IntEnum

BAR_SECONDS = 60
INTERVAL_1M = "1m"


class TradingSession(str, Enum):
    """交易时段枚举."""

    PRE = "pre"
    REGULAR = "regular"
    POST = "post"


class RawStatus(IntEnum):
    """原始数据处理状态."""

    UNPROCESSED = 0
    PROCESSED = 1
    FAILED = 2
