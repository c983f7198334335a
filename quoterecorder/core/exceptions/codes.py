"""Stable error codes shared by the exception hierarchy and the CLI."""

from enum import Enum


class ErrorCode(str, Enum):
    """错误代码枚举."""

    GENERAL_ERROR = "GENERAL_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # 持久化
    STORE_LOOKUP_ERROR = "STORE_LOOKUP_ERROR"
    STORAGE_ERROR = "STORAGE_ERROR"
    CACHE_ERROR = "CACHE_ERROR"

    # 网络抓取
    FETCH_ERROR = "FETCH_ERROR"

    # 解析与校验
    PARSE_ERROR = "PARSE_ERROR"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    EMPTY_RESULT = "EMPTY_RESULT"
    EMPTY_QUOTES = "EMPTY_QUOTES"
    QUOTE_COUNT_MISMATCH = "QUOTE_COUNT_MISMATCH"
    TRADING_PERIODS_INCORRECT = "TRADING_PERIODS_INCORRECT"


__all__ = ["ErrorCode"]
