"""Log output settings for the recorder."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from quoterecorder.core.config import LoggingConfig

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class LogConfig(BaseModel):
    """日志输出设置

    每条记录是一行 JSON，写到 ``stream``（为空时使用 stderr，stdout 留给命令输出），
    设置了 ``file`` 时同时追加到该文件。
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    level: str = "INFO"
    console: bool = True
    stream: Any = None
    file: Path | None = None

    @field_validator("level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level {value!r}, expected one of {', '.join(LOG_LEVELS)}")
        return level

    @classmethod
    def from_settings(cls, settings: LoggingConfig, level: str | None = None) -> LogConfig:
        """由 ``[logging]`` 配置节构建；``level`` 覆盖配置中的级别"""
        return cls(level=level or settings.level, file=settings.file)


__all__ = ["LOG_LEVELS", "LogConfig"]
