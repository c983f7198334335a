"""重试机制实现, 默认为固定间隔重试."""

from __future__ import annotations

import asyncio
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from loguru import logger

T = TypeVar("T")


class RetryState(Enum):
    """重试状态."""

    READY = "ready"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class RetryConfig:
    """重试配置.

    ``exponential_base`` 为 1.0 时每次等待 ``base_delay`` 秒.
    """

    max_attempts: int = 3  # 总尝试次数
    base_delay: float = 1.0  # 基础延迟时间(秒)
    max_delay: float = 60.0  # 最大延迟时间(秒)
    exponential_base: float = 1.0  # 指数基数
    jitter: bool = False  # 是否添加随机抖动
    retry_on_exceptions: tuple[type[BaseException], ...] = field(default_factory=lambda: (Exception,))

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay must be non-negative")


class RetryExecutor:
    """按配置重试异步调用."""

    def __init__(
        self,
        config: RetryConfig,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.config = config
        self._sleep = sleep
        self.attempt_count = 0
        self.total_delay = 0.0
        self.state = RetryState.READY
        self.last_exception: BaseException | None = None

    async def execute(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """执行函数, 应用重试逻辑.

        Args:
            func: 要执行的函数
            *args: 函数参数
            **kwargs: 函数关键字参数

        Returns:
            函数返回结果

        Raises:
            Exception: 不可重试的异常立即抛出; 重试耗尽时抛出最后一次的异常
        """
        self.reset()
        self.state = RetryState.RUNNING

        while True:
            self.attempt_count += 1
            try:
                result = await func(*args, **kwargs)
            except self.config.retry_on_exceptions as e:
                self.last_exception = e
                if self.attempt_count >= self.config.max_attempts:
                    self.state = RetryState.FAILED
                    raise

                delay = self._calculate_delay(self.attempt_count - 1)
                logger.warning(
                    "attempt {attempt}/{max_attempts} failed: {error}; retrying in {delay:.1f}s",
                    attempt=self.attempt_count,
                    max_attempts=self.config.max_attempts,
                    error=e,
                    delay=delay,
                )
                await self._sleep(delay)
                self.total_delay += delay
            except BaseException as e:
                self.last_exception = e
                self.state = RetryState.FAILED
                raise
            else:
                self.state = RetryState.COMPLETED
                return result

    def _calculate_delay(self, attempt_number: int) -> float:
        """计算第 ``attempt_number`` 次重试(从0开始)前的等待时间."""
        delay = self.config.base_delay * (self.config.exponential_base**attempt_number)

        if self.config.jitter:
            jitter_range = min(delay * 0.1, 1.0)  # 最多10%的抖动
            delay += random.uniform(-jitter_range, jitter_range)

        return max(0.0, min(delay, self.config.max_delay))

    def get_stats(self) -> dict[str, Any]:
        """获取重试统计信息."""
        return {
            "attempts": self.attempt_count,
            "max_attempts": self.config.max_attempts,
            "total_delay": self.total_delay,
            "state": self.state.value,
            "last_exception": str(self.last_exception) if self.last_exception else None,
        }

    def reset(self) -> None:
        """重置重试状态."""
        self.attempt_count = 0
        self.total_delay = 0.0
        self.state = RetryState.READY
        self.last_exception = None
