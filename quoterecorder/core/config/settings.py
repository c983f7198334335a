"""配置管理模块 - 处理quoterecorder的配置"""

from __future__ import annotations

import os
import tomllib
from dataclasses import MISSING, asdict, dataclass, field, fields
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from quoterecorder.core.exceptions import ConfigurationError

DEFAULT_CHART_URL = "https://finance-yql.media.yahoo.com/v7/finance/chart"

DEFAULT_MARKETS: dict[str, str] = {
    "america": "America/New_York",
    "china": "Asia/Shanghai",
    "hongkong": "Asia/Hong_Kong",
}


@dataclass
class FetchConfig:
    """抓取配置"""

    chart_url: str = DEFAULT_CHART_URL
    retry_times: int = 5
    retry_interval_seconds: float = 10.0
    timeout: float = 30.0
    user_agent: str = "quoterecorder/0.1.0"

    def __post_init__(self) -> None:
        if self.retry_times < 1:
            raise ConfigurationError("fetch.retry_times must be at least 1")
        if self.retry_interval_seconds < 0:
            raise ConfigurationError("fetch.retry_interval_seconds must be non-negative")
        if self.timeout <= 0:
            raise ConfigurationError("fetch.timeout must be positive")


@dataclass
class StorageConfig:
    """存储配置"""

    database: str = str(Path.home() / ".quoterecorder" / "quotes.duckdb")
    data_dir: str = str(Path.home() / ".quoterecorder" / "data")
    cache_raw_files: bool = False
    queue_size: int = 0  # 0 表示无界队列

    def __post_init__(self) -> None:
        if self.queue_size < 0:
            raise ConfigurationError("storage.queue_size must be non-negative")


@dataclass
class LoggingConfig:
    """日志配置"""

    level: str = "INFO"
    file: str | None = None


@dataclass
class RecorderConfig:
    """quoterecorder主配置"""

    fetch: FetchConfig = field(default_factory=FetchConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    markets: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_MARKETS))

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> RecorderConfig:
        """从字典创建配置

        未知键、类型不符的值和无法识别的市场时区都会抛出 ConfigurationError。
        """
        fetch_config = _build_section(FetchConfig, "fetch", config_dict.get("fetch", {}))
        storage_config = _build_section(StorageConfig, "storage", config_dict.get("storage", {}))
        logging_config = _build_section(LoggingConfig, "logging", config_dict.get("logging", {}))

        markets = dict(DEFAULT_MARKETS)
        for name, tz in _require_table("markets", config_dict.get("markets", {})).items():
            markets[name.lower()] = _check_timezone(name, tz)

        return cls(fetch=fetch_config, storage=storage_config, logging=logging_config, markets=markets)

    def to_dict(self) -> dict[str, Any]:
        """转换为字典"""
        return {
            "fetch": asdict(self.fetch),
            "storage": asdict(self.storage),
            "logging": asdict(self.logging),
            "markets": dict(self.markets),
        }


def _require_table(name: str, values: Any) -> dict[str, Any]:
    if not isinstance(values, dict):
        raise ConfigurationError(f"[{name}] must be a table, got {type(values).__name__}")
    return values


def _accepts(default: Any, value: Any) -> bool:
    # bool 是 int 的子类，需要单独处理
    if isinstance(default, bool):
        return isinstance(value, bool)
    if isinstance(default, float):
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if isinstance(default, int):
        return isinstance(value, int) and not isinstance(value, bool)
    if default is None:
        return value is None or isinstance(value, str)
    return isinstance(value, type(default))


def _build_section(section_cls: type, name: str, values: Any) -> Any:
    """校验单个配置节并构建对应的 dataclass"""
    values = _require_table(name, values)
    defaults = {f.name: f.default for f in fields(section_cls) if f.default is not MISSING}

    unknown = sorted(set(values) - set(defaults))
    if unknown:
        raise ConfigurationError(f"unknown configuration key in [{name}]: {', '.join(unknown)}")

    for key, value in values.items():
        if not _accepts(defaults[key], value):
            expected = "str" if defaults[key] is None else type(defaults[key]).__name__
            raise ConfigurationError(f"{name}.{key} must be {expected}, got {type(value).__name__}")

    return section_cls(**values)


def _check_timezone(market: str, tz: Any) -> str:
    if not isinstance(tz, str):
        raise ConfigurationError(f"markets.{market} must be a timezone name, got {type(tz).__name__}")
    try:
        ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(f"markets.{market}: unknown timezone {tz!r}", details={"market": market}) from e
    return tz


def _deep_update(d: dict[str, Any], u: dict[str, Any]) -> dict[str, Any]:
    """深度更新字典"""
    for k, v in u.items():
        if isinstance(v, dict):
            d[k] = _deep_update(d.get(k, {}), v)
        else:
            d[k] = v
    return d


class ConfigManager:
    """配置管理器"""

    def __init__(self, config_path: Path | None = None, *, use_env: bool = True):
        """初始化配置管理器

        Args:
            config_path: 配置文件路径，如果为None则使用默认路径
            use_env: 是否叠加 QUOTERECORDER_* 环境变量
        """
        self.config_path = config_path or Path.home() / ".quoterecorder" / "config.toml"
        self.use_env = use_env
        self.config = self._load_config()

    def _load_config(self) -> RecorderConfig:
        """加载配置"""
        config_dict: dict[str, Any] = {}
        if self.config_path.exists():
            try:
                with open(self.config_path, "rb") as f:
                    config_dict = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                raise ConfigurationError(f"failed to load config: {e}", path=str(self.config_path)) from e

        if self.use_env:
            _deep_update(config_dict, load_config_from_env())
        return RecorderConfig.from_dict(config_dict)

    def get_config(self) -> RecorderConfig:
        """获取当前配置"""
        return self.config


def load_config_from_env() -> dict[str, Any]:
    """从环境变量加载配置"""
    config: dict[str, Any] = {}

    # 抓取配置
    fetch_config: dict[str, Any] = {}
    if os.getenv("QUOTERECORDER_CHART_URL"):
        fetch_config["chart_url"] = os.getenv("QUOTERECORDER_CHART_URL")
    retry_times = os.getenv("QUOTERECORDER_RETRY_TIMES")
    if retry_times is not None:
        fetch_config["retry_times"] = int(retry_times)
    retry_interval = os.getenv("QUOTERECORDER_RETRY_INTERVAL_SECONDS")
    if retry_interval is not None:
        fetch_config["retry_interval_seconds"] = float(retry_interval)
    timeout = os.getenv("QUOTERECORDER_FETCH_TIMEOUT")
    if timeout is not None:
        fetch_config["timeout"] = float(timeout)

    if fetch_config:
        config["fetch"] = fetch_config

    # 存储配置
    storage_config: dict[str, Any] = {}
    if os.getenv("QUOTERECORDER_DATABASE"):
        storage_config["database"] = os.getenv("QUOTERECORDER_DATABASE")
    if os.getenv("QUOTERECORDER_DATA_DIR"):
        storage_config["data_dir"] = os.getenv("QUOTERECORDER_DATA_DIR")
    cache_raw = os.getenv("QUOTERECORDER_CACHE_RAW_FILES")
    if cache_raw is not None:
        storage_config["cache_raw_files"] = cache_raw.lower() == "true"

    if storage_config:
        config["storage"] = storage_config

    # 日志配置
    logging_config: dict[str, Any] = {}
    log_level = os.getenv("QUOTERECORDER_LOGGING_LEVEL")
    if log_level is not None:
        logging_config["level"] = log_level
    log_file = os.getenv("QUOTERECORDER_LOGGING_FILE")
    if log_file is not None:
        logging_config["file"] = log_file

    if logging_config:
        config["logging"] = logging_config

    return config
