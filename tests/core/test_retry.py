"""测试重试机制实现."""

import pytest

from quoterecorder.core.patterns import RetryConfig, RetryExecutor
from quoterecorder.core.patterns.retry import RetryState


class FakeSleep:
    """记录等待时间而不真正睡眠."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


class Flaky:
    def __init__(self, failures, exc_type=ConnectionError):
        self.failures = failures
        self.exc_type = exc_type
        self.calls = 0

    async def __call__(self, value="ok"):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc_type(f"failure {self.calls}")
        return value


class TestRetryConfig:
    """测试重试配置."""

    def test_default_config(self):
        """测试默认配置."""
        config = RetryConfig()

        assert config.max_attempts == 3
        assert config.base_delay == 1.0
        assert config.max_delay == 60.0
        assert config.exponential_base == 1.0
        assert config.jitter is False
        assert config.retry_on_exceptions == (Exception,)

    def test_invalid_config(self):
        """测试非法配置."""
        with pytest.raises(ValueError):
            RetryConfig(max_attempts=0)
        with pytest.raises(ValueError):
            RetryConfig(base_delay=-1)


class TestRetryExecutor:
    """测试重试执行器."""

    @pytest.mark.asyncio
    async def test_success_first_attempt(self):
        """测试首次成功."""
        sleep = FakeSleep()
        executor = RetryExecutor(RetryConfig(), sleep=sleep)

        assert await executor.execute(Flaky(0), "value") == "value"
        assert executor.attempt_count == 1
        assert executor.state is RetryState.COMPLETED
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_fixed_interval_between_attempts(self):
        """测试固定间隔重试."""
        sleep = FakeSleep()
        executor = RetryExecutor(RetryConfig(max_attempts=5, base_delay=10.0, max_delay=10.0), sleep=sleep)
        func = Flaky(3)

        assert await executor.execute(func) == "ok"
        assert func.calls == 4
        assert sleep.delays == [10.0, 10.0, 10.0]
        assert executor.get_stats()["total_delay"] == 30.0

    @pytest.mark.asyncio
    async def test_exhausted_retries_raise_last_exception(self):
        """测试重试耗尽."""
        sleep = FakeSleep()
        executor = RetryExecutor(RetryConfig(max_attempts=3, base_delay=0.5), sleep=sleep)

        with pytest.raises(ConnectionError, match="failure 3"):
            await executor.execute(Flaky(10))

        assert executor.attempt_count == 3
        assert executor.state is RetryState.FAILED
        assert len(sleep.delays) == 2
        assert executor.get_stats()["last_exception"] == "failure 3"

    @pytest.mark.asyncio
    async def test_non_retryable_exception_raised_immediately(self):
        """测试不可重试异常."""
        sleep = FakeSleep()
        executor = RetryExecutor(RetryConfig(retry_on_exceptions=(ConnectionError,)), sleep=sleep)
        func = Flaky(5, exc_type=KeyError)

        with pytest.raises(KeyError):
            await executor.execute(func)

        assert func.calls == 1
        assert sleep.delays == []

    def test_exponential_delay_is_capped(self):
        """测试指数退避上限."""
        executor = RetryExecutor(RetryConfig(base_delay=1.0, max_delay=5.0, exponential_base=2.0))

        assert [executor._calculate_delay(n) for n in range(5)] == [1.0, 2.0, 4.0, 5.0, 5.0]
