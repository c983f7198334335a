from __future__ import annotations

from quoterecorder.core.data.ingestion.validator import validate_chart
from quoterecorder.core.exceptions import ErrorCode
from quoterecorder.core.models.chart import ChartEnvelope

T = 1_700_000_000


def _envelope(document: dict) -> ChartEnvelope:
    return ChartEnvelope.model_validate(document)


def test_valid_payload_has_no_issue(chart_payload) -> None:
    assert validate_chart(_envelope(chart_payload([T, T + 60]))) is None


def test_upstream_error_reported_with_code_and_description(chart_payload) -> None:
    document = chart_payload([T], error={"code": "Not Found", "description": "No data found, symbol may be delisted"})

    issue = validate_chart(_envelope(document))

    assert issue is not None
    assert issue.code is ErrorCode.UPSTREAM_ERROR
    assert issue.message == "[Not Found] No data found, symbol may be delisted"


def test_upstream_error_checked_before_empty_result() -> None:
    document = {"chart": {"result": None, "error": {"code": "Bad Request", "description": "Invalid input"}}}

    issue = validate_chart(_envelope(document))

    assert issue is not None
    assert issue.message == "[Bad Request] Invalid input"


def test_empty_result() -> None:
    for document in ({"chart": {"result": []}}, {"chart": {"result": None, "error": None}}, {}):
        issue = validate_chart(_envelope(document))
        assert issue is not None
        assert issue.code is ErrorCode.EMPTY_RESULT
        assert issue.message == "empty result"


def test_empty_quotes(chart_payload) -> None:
    document = chart_payload([T])
    document["chart"]["result"][0]["indicators"] = {"quote": []}

    issue = validate_chart(_envelope(document))

    assert issue is not None
    assert issue.message == "empty quotes"


def test_missing_indicators_counts_as_empty_quotes(chart_payload) -> None:
    document = chart_payload([T])
    del document["chart"]["result"][0]["indicators"]

    issue = validate_chart(_envelope(document))

    assert issue is not None
    assert issue.code is ErrorCode.EMPTY_QUOTES


def test_quote_count_mismatch_for_each_series(chart_payload) -> None:
    for series in ("open", "close", "high", "low", "volume"):
        document = chart_payload([T, T + 60, T + 120, T + 180, T + 240])
        document["chart"]["result"][0]["indicators"]["quote"][0][series].pop()

        issue = validate_chart(_envelope(document))

        assert issue is not None, series
        assert issue.code is ErrorCode.QUOTE_COUNT_MISMATCH
        assert issue.message == "quote count mismatch"
        assert issue.field == f"indicators.quote.{series}"


def test_missing_timestamps_mismatch_non_empty_quotes(chart_payload) -> None:
    document = chart_payload([T, T + 60])
    del document["chart"]["result"][0]["timestamp"]

    issue = validate_chart(_envelope(document))

    assert issue is not None
    assert issue.message == "quote count mismatch"


def test_null_values_keep_their_slot(chart_payload) -> None:
    document = chart_payload([T, T + 60])
    document["chart"]["result"][0]["indicators"]["quote"][0]["close"] = [None, 10.0]

    assert validate_chart(_envelope(document)) is None


def test_trading_periods_missing_session(chart_payload) -> None:
    for session in ("pre", "regular", "post"):
        document = chart_payload([T])
        document["chart"]["result"][0]["meta"]["tradingPeriods"][session] = []

        issue = validate_chart(_envelope(document))

        assert issue is not None, session
        assert issue.code is ErrorCode.TRADING_PERIODS_INCORRECT
        assert issue.message == "trading periods count incorrect"


def test_trading_periods_empty_first_group(chart_payload) -> None:
    document = chart_payload([T])
    document["chart"]["result"][0]["meta"]["tradingPeriods"]["post"] = [[]]

    issue = validate_chart(_envelope(document))

    assert issue is not None
    assert issue.message == "trading periods count incorrect"


def test_regular_only_trading_periods_fail_validation(chart_payload) -> None:
    document = chart_payload([T])
    meta = document["chart"]["result"][0]["meta"]
    meta["tradingPeriods"] = meta["tradingPeriods"]["regular"]

    issue = validate_chart(_envelope(document))

    assert issue is not None
    assert issue.field == "meta.tradingPeriods.pre"


def test_quote_mismatch_checked_before_trading_periods(chart_payload) -> None:
    document = chart_payload([T, T + 60])
    result = document["chart"]["result"][0]
    result["indicators"]["quote"][0]["low"] = [1.0]
    result["meta"]["tradingPeriods"] = None

    issue = validate_chart(_envelope(document))

    assert issue is not None
    assert issue.code is ErrorCode.QUOTE_COUNT_MISMATCH
