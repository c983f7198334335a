"""Pytest configuration and shared fixtures for the quoterecorder test suite."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator, Sequence
from typing import Any

import pytest

from quoterecorder.core.data.storage.repository import QuoteStore

# 2023-11-14 22:13:20 UTC
T0 = 1_700_000_000


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line options for controlling integration tests."""

    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run quoterecorder integration tests that require network access.",
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register the integration marker."""

    config.addinivalue_line(
        "markers",
        "integration: marks tests requiring network or external services",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests unless explicitly requested."""

    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="integration tests require --run-integration")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


def _window(start: int, end: int) -> dict[str, Any]:
    return {"timezone": "EST", "start": start, "end": end, "gmtoffset": -18000}


def build_chart(
    timestamps: Sequence[int],
    *,
    pre: tuple[int, int] = (T0 - 3600, T0),
    regular: tuple[int, int] = (T0, T0 + 3600),
    post: tuple[int, int] = (T0 + 3600, T0 + 7200),
    quote: dict[str, list[Any]] | None = None,
    error: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a v7 chart document; quote values default to index-derived numbers."""

    n = len(timestamps)
    quote = quote or {
        "open": [10.0 + i for i in range(n)],
        "close": [10.5 + i for i in range(n)],
        "high": [11.0 + i for i in range(n)],
        "low": [9.5 + i for i in range(n)],
        "volume": [100 * (i + 1) for i in range(n)],
    }
    return {
        "chart": {
            "result": [
                {
                    "meta": {
                        "currency": "USD",
                        "symbol": "AAPL",
                        "exchangeName": "NMS",
                        "timezone": "EST",
                        "gmtoffset": -18000,
                        "tradingPeriods": {
                            "pre": [[_window(*pre)]],
                            "regular": [[_window(*regular)]],
                            "post": [[_window(*post)]],
                        },
                    },
                    "timestamp": list(timestamps),
                    "indicators": {"quote": [quote]},
                }
            ],
            "error": error,
        }
    }


@pytest.fixture
def chart_payload() -> Callable[..., dict[str, Any]]:
    return build_chart


@pytest.fixture
def chart_json() -> Callable[..., str]:
    def _build(*args: Any, **kwargs: Any) -> str:
        return json.dumps(build_chart(*args, **kwargs))

    return _build


@pytest.fixture
def store() -> Iterator[QuoteStore]:
    quote_store = QuoteStore.open(":memory:")
    yield quote_store
    quote_store.close()
