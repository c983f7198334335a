"""Renderers for quote command output.

The table renderer is for people: epoch columns become UTC clock times,
prices get a fixed precision and counts get thousands separators. JSON Lines
keeps the stored values untouched so the output can be piped into other tools.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Mapping, Sequence, TextIO

from rich.box import SIMPLE
from rich.console import Console
from rich.table import Table

from quoterecorder.core.models.analysis import DailyAnalysis
from quoterecorder.core.models.market import TradingSession

Row = Mapping[str, object]

FETCH_COLUMNS = ("market", "code", "date", "status")
BAR_COLUMNS = ("session", "start", "end", "open", "close", "high", "low", "volume")
SUMMARY_COLUMNS = ("market", "code", "date", "error", "message", "pre", "regular", "post")

EPOCH_COLUMNS = frozenset({"start", "end"})
PRICE_COLUMNS = frozenset({"open", "close", "high", "low"})
COUNT_COLUMNS = frozenset({"volume", "pre", "regular", "post"})


def bar_rows(analysis: DailyAnalysis) -> list[dict[str, object]]:
    """One row per minute bar, pre-market first and post-market last."""

    return [
        {"session": session.value, **bar.to_dict()}
        for session in TradingSession
        for bar in analysis.bars(session)
    ]


def summary_row(analysis: DailyAnalysis) -> dict[str, object]:
    """Per-session bar counts of a classified day."""

    return {
        "market": analysis.market,
        "code": analysis.code,
        "date": analysis.date.isoformat(),
        "error": analysis.error,
        "message": analysis.message,
        **{session.value: len(analysis.bars(session)) for session in TradingSession},
    }


def format_cell(column: str, value: object, *, precision: int = 4) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "yes" if value else "no"
    if column in EPOCH_COLUMNS and isinstance(value, int):
        return datetime.fromtimestamp(value, tz=timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    if column in PRICE_COLUMNS and isinstance(value, (int, float)):
        return f"{value:.{precision}f}"
    if column in COUNT_COLUMNS and isinstance(value, int):
        return f"{value:,}"
    return str(value)


class OutputFormatter:
    """Base class for quote output renderers."""

    name: str

    def render(self, rows: Sequence[Row], *, stream: TextIO, columns: Sequence[str], title: str | None = None) -> None:
        raise NotImplementedError


@dataclass(slots=True)
class TableFormatter(OutputFormatter):
    """Rich table; numeric columns are right aligned."""

    name: str = "table"
    no_color: bool = False
    precision: int = 4

    def render(self, rows: Sequence[Row], *, stream: TextIO, columns: Sequence[str], title: str | None = None) -> None:
        console = Console(file=stream, color_system=None if self.no_color else "auto", no_color=self.no_color)
        if not rows:
            console.print(f"{title}: no quotes." if title else "No quotes.")
            return

        table = Table(box=SIMPLE, title=title, header_style="" if self.no_color else "bold")
        for column in columns:
            numeric = column in PRICE_COLUMNS or column in COUNT_COLUMNS
            table.add_column(column, justify="right" if numeric else "left")
        for row in rows:
            table.add_row(*(format_cell(column, row.get(column), precision=self.precision) for column in columns))
        console.print(table)


@dataclass(slots=True)
class JSONLFormatter(OutputFormatter):
    """One JSON object per row holding exactly ``columns``."""

    name: str = "jsonl"

    def render(self, rows: Sequence[Row], *, stream: TextIO, columns: Sequence[str], title: str | None = None) -> None:
        for row in rows:
            stream.write(json.dumps({column: row.get(column) for column in columns}, ensure_ascii=False, default=str))
            stream.write("\n")
        stream.flush()


FORMATS = ("table", "jsonl")


def create_formatter(name: str, *, no_color: bool = False) -> OutputFormatter:
    normalized = name.strip().lower()
    if normalized == "table":
        return TableFormatter(no_color=no_color)
    if normalized == "jsonl":
        return JSONLFormatter()
    raise ValueError(f"unsupported format {name!r}, expected one of {', '.join(FORMATS)}")


__all__ = [
    "BAR_COLUMNS",
    "FETCH_COLUMNS",
    "SUMMARY_COLUMNS",
    "FORMATS",
    "JSONLFormatter",
    "OutputFormatter",
    "TableFormatter",
    "bar_rows",
    "create_formatter",
    "format_cell",
    "summary_row",
]
