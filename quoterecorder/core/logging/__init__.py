"""Structured JSON logging for the recorder."""

from quoterecorder.core.logging.config import LOG_LEVELS, LogConfig
from quoterecorder.core.logging.logger import configure_logging, log_context, logger

__all__ = ["LOG_LEVELS", "LogConfig", "configure_logging", "log_context", "logger"]
