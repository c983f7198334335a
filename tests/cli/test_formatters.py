from __future__ import annotations

import io
import json
from datetime import date

import pytest

from quoterecorder.cli.formatters import (
    BAR_COLUMNS,
    SUMMARY_COLUMNS,
    JSONLFormatter,
    TableFormatter,
    bar_rows,
    create_formatter,
    format_cell,
    summary_row,
)
from quoterecorder.core.models.analysis import DailyAnalysis, MinuteBar
from quoterecorder.core.models.market import TradingSession

T = 1_700_000_000


def _analysis() -> DailyAnalysis:
    analysis = DailyAnalysis(code="AAPL", market="america", date=date(2023, 11, 14))
    for session, start in ((TradingSession.POST, T + 3600), (TradingSession.PRE, T - 60), (TradingSession.REGULAR, T)):
        analysis.bars(session).append(
            MinuteBar.at("AAPL", "america", start, open=10.0, close=10.5, high=11.0, low=9.5, volume=1_234_567)
        )
    return analysis


@pytest.mark.parametrize(
    ("column", "value", "expected"),
    [
        ("start", T, "2023-11-14 22:13 UTC"),
        ("close", 10.5, "10.5000"),
        ("open", 10, "10.0000"),
        ("volume", 1_234_567, "1,234,567"),
        ("error", True, "yes"),
        ("message", None, "-"),
        ("date", "2023-11-14", "2023-11-14"),
    ],
)
def test_format_cell(column, value, expected) -> None:
    assert format_cell(column, value) == expected


def test_bar_rows_follow_session_order() -> None:
    rows = bar_rows(_analysis())

    assert [row["session"] for row in rows] == ["pre", "regular", "post"]
    assert rows[0]["start"] == T - 60


def test_summary_row_counts_bars() -> None:
    row = summary_row(_analysis())

    assert (row["pre"], row["regular"], row["post"]) == (1, 1, 1)
    assert row["date"] == "2023-11-14"


def test_jsonl_keeps_raw_values_and_selected_columns() -> None:
    stream = io.StringIO()

    JSONLFormatter().render(bar_rows(_analysis()), stream=stream, columns=BAR_COLUMNS)

    first = json.loads(stream.getvalue().splitlines()[0])
    assert list(first) == list(BAR_COLUMNS)
    assert first["start"] == T - 60
    assert first["volume"] == 1_234_567


def test_table_formats_cells_and_title(monkeypatch) -> None:
    monkeypatch.setenv("COLUMNS", "200")
    stream = io.StringIO()

    TableFormatter(no_color=True).render(
        bar_rows(_analysis()), stream=stream, columns=BAR_COLUMNS, title="america/AAPL 2023-11-14"
    )

    text = stream.getvalue()
    assert "america/AAPL 2023-11-14" in text
    assert "1,234,567" in text
    assert "10.5000" in text
    assert "22:13 UTC" in text


def test_table_without_rows() -> None:
    stream = io.StringIO()

    TableFormatter(no_color=True).render([], stream=stream, columns=SUMMARY_COLUMNS)

    assert stream.getvalue().strip() == "No quotes."


def test_create_formatter() -> None:
    assert isinstance(create_formatter(" JSONL "), JSONLFormatter)
    assert create_formatter("table", no_color=True).no_color is True
    with pytest.raises(ValueError, match="expected one of table, jsonl"):
        create_formatter("xml")
