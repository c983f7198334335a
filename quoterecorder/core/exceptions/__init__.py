"""Exception handling module."""

from quoterecorder.core.exceptions.base import (
    CacheError,
    ConfigurationError,
    FetchError,
    ParseError,
    QuoteRecorderError,
    StorageError,
    StoreLookupError,
)
from quoterecorder.core.exceptions.codes import ErrorCode

__all__ = [
    "QuoteRecorderError",
    "StoreLookupError",
    "StorageError",
    "FetchError",
    "ParseError",
    "CacheError",
    "ConfigurationError",
    "ErrorCode",
]
