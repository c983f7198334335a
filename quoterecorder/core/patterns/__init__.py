"""Resilience patterns module."""

from quoterecorder.core.patterns.retry import RetryConfig, RetryExecutor, RetryState

__all__ = ["RetryConfig", "RetryExecutor", "RetryState"]
