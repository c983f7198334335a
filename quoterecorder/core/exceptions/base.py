"""quoterecorder核心异常类."""

from __future__ import annotations

from datetime import date
from typing import Any

from quoterecorder.core.exceptions.codes import ErrorCode


class QuoteRecorderError(Exception):
    """quoterecorder基础异常类."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode | str = ErrorCode.GENERAL_ERROR,
        details: dict[str, Any] | None = None,
    ):
        """初始化异常.

        Args:
            message: 错误消息
            error_code: 错误代码
            details: 额外详情
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code.value if isinstance(error_code, ErrorCode) else error_code
        self.details = details or {}

    def to_payload(self) -> dict[str, Any]:
        """Return a serializable payload representing the error."""

        payload: dict[str, Any] = {"code": self.error_code, "message": self.message}
        if self.details:
            payload["details"] = dict(self.details)
        return payload


def _key_details(market: str, code: str, day: date | None) -> dict[str, Any]:
    details: dict[str, Any] = {"market": market, "code": code}
    if day is not None:
        details["date"] = day.isoformat()
    return details


class StoreLookupError(QuoteRecorderError):
    """持久化存在性检查失败."""

    def __init__(
        self,
        message: str,
        market: str,
        code: str,
        day: date | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = {**_key_details(market, code, day), **(details or {})}
        super().__init__(message, ErrorCode.STORE_LOOKUP_ERROR, super_details)


class StorageError(QuoteRecorderError):
    """持久化读写失败."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.STORAGE_ERROR, details)


class FetchError(QuoteRecorderError):
    """网络抓取在重试耗尽后仍然失败."""

    def __init__(
        self,
        message: str,
        url: str,
        attempts: int,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        super_details["url"] = url
        super_details["attempts"] = attempts
        if status_code is not None:
            super_details["status_code"] = status_code
        super().__init__(message, ErrorCode.FETCH_ERROR, super_details)
        self.url = url
        self.attempts = attempts
        self.status_code = status_code


class ParseError(QuoteRecorderError):
    """原始报价数据无法解码."""

    def __init__(
        self,
        message: str,
        market: str,
        code: str,
        day: date | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = {**_key_details(market, code, day), **(details or {})}
        super().__init__(message, ErrorCode.PARSE_ERROR, super_details)


class CacheError(QuoteRecorderError):
    """原始文件缓存读写失败."""

    def __init__(self, message: str, path: str | None = None, details: dict[str, Any] | None = None):
        super_details = details or {}
        if path:
            super_details["path"] = path
        super().__init__(message, ErrorCode.CACHE_ERROR, super_details)


class ConfigurationError(QuoteRecorderError):
    """配置文件无法读取或内容非法."""

    def __init__(self, message: str, path: str | None = None, details: dict[str, Any] | None = None):
        super_details = details or {}
        if path:
            super_details["path"] = path
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, super_details)
