"""Quote commands: fetch, process, parse and show."""

from __future__ import annotations

import asyncio
from datetime import date
from pathlib import Path

import typer

from quoterecorder.core.config import RecorderConfig
from quoterecorder.core.data.cache.raw_file import RawFileCache
from quoterecorder.core.data.ingestion.parser import parse_daily_chart
from quoterecorder.core.data.storage.queue import PersistenceQueue
from quoterecorder.core.data.storage.repository import QuoteStore
from quoterecorder.core.exceptions import ParseError, QuoteRecorderError, StorageError
from quoterecorder.core.http.downloader import ResilientDownloader
from quoterecorder.core.models.analysis import DailyAnalysis
from quoterecorder.core.services.calendars import MarketCalendarProvider
from quoterecorder.core.services.ingestion import IngestionOrchestrator
from quoterecorder.core.services.processing import RawPayloadProcessor

from .constants import NOT_FOUND_EXIT_CODE
from .formatters import BAR_COLUMNS, FETCH_COLUMNS, SUMMARY_COLUMNS, bar_rows, summary_row
from .utils import CommandOutput, emit_error, fail, open_output, parse_day


def open_store(config: RecorderConfig) -> QuoteStore:
    """Factory hook for the DuckDB store."""

    return QuoteStore.open(config.storage.database)


def create_fetcher(config: RecorderConfig) -> ResilientDownloader:
    """Factory hook for the HTTP downloader."""

    return ResilientDownloader(config.fetch)


def register(app: typer.Typer) -> None:
    """Register the quote commands on the provided application."""

    app.command("fetch")(fetch_command)
    app.command("process")(process_command)
    app.command("parse")(parse_command)
    app.command("show")(show_command)


async def _fetch(
    config: RecorderConfig,
    sink: PersistenceQueue,
    market: str,
    code: str,
    query_code: str,
    day: date,
) -> bool:
    fetcher = create_fetcher(config)
    file_cache = RawFileCache(config.storage.data_dir) if config.storage.cache_raw_files else None
    orchestrator = IngestionOrchestrator(
        sink,
        fetcher,
        config=config.fetch,
        calendars=MarketCalendarProvider(config.markets),
        file_cache=file_cache,
    )
    try:
        return await orchestrator.fetch_daily_quotes(market, code, query_code, day)
    finally:
        await fetcher.close()


def fetch_command(
    ctx: typer.Context,
    market: str = typer.Argument(..., help="Market name, e.g. america."),
    code: str = typer.Argument(..., help="Company code the quotes are stored under."),
    query_code: str | None = typer.Option(None, "--query-code", help="Upstream symbol; defaults to CODE."),
    day: str | None = typer.Option(None, "--date", help="Trading day (YYYY-MM-DD); defaults to today."),
) -> None:
    """Download one day of minute quotes unless it is already stored."""

    trade_date = parse_day(day)
    key = {"market": market, "code": code, "date": trade_date.isoformat()}

    with open_output(ctx) as out:
        config = out.config
        store = _open_store(config)
        try:
            with PersistenceQueue(store, maxsize=config.storage.queue_size) as sink:
                fetched = asyncio.run(_fetch(config, sink, market, code, query_code or code, trade_date))
            if sink.failed_writes:
                raise StorageError("raw payload could not be stored", details=key)
        except QuoteRecorderError as error:
            raise fail(error) from error
        finally:
            store.close()

        out.render([{**key, "status": "fetched" if fetched else "skipped"}], FETCH_COLUMNS)


def process_command(
    ctx: typer.Context,
    limit: int | None = typer.Option(None, "--limit", min=1, help="Process at most N raw payloads."),
) -> None:
    """Parse stored raw payloads that have not been processed yet."""

    with open_output(ctx) as out:
        store = _open_store(out.config)
        try:
            summary = RawPayloadProcessor(store).process_pending(limit)
        except QuoteRecorderError as error:
            raise fail(error) from error
        finally:
            store.close()

        out.render([summary_row(analysis) for analysis in summary.analyses], SUMMARY_COLUMNS)
        typer.echo(f"processed={summary.processed} invalid={summary.invalid} failed={summary.failed}", err=True)


def parse_command(
    ctx: typer.Context,
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Raw chart JSON file."),
    market: str = typer.Option(..., "--market", help="Market name."),
    code: str = typer.Option(..., "--code", help="Company code."),
    day: str = typer.Option(..., "--date", help="Trading day (YYYY-MM-DD)."),
) -> None:
    """Parse a raw chart file and print the classified bars."""

    trade_date = parse_day(day)
    with open_output(ctx) as out:
        try:
            analysis = parse_daily_chart(code, market, trade_date, path.read_bytes())
        except ParseError as error:
            raise fail(error) from error
        _render_analysis(out, analysis)


def show_command(
    ctx: typer.Context,
    market: str = typer.Argument(..., help="Market name."),
    code: str = typer.Argument(..., help="Company code."),
    day: str = typer.Option(..., "--date", help="Trading day (YYYY-MM-DD)."),
) -> None:
    """Print a stored daily analysis."""

    trade_date = parse_day(day)
    with open_output(ctx) as out:
        store = _open_store(out.config)
        try:
            analysis = store.load_analysis(market, code, trade_date)
        except QuoteRecorderError as error:
            raise fail(error) from error
        finally:
            store.close()

        if analysis is None:
            emit_error(
                f"no analysis stored for {market}/{code} on {trade_date.isoformat()}",
                "NOT_FOUND",
                details={"market": market, "code": code, "date": trade_date.isoformat()},
            )
            raise typer.Exit(code=NOT_FOUND_EXIT_CODE)
        _render_analysis(out, analysis)


def _open_store(config: RecorderConfig) -> QuoteStore:
    try:
        return open_store(config)
    except QuoteRecorderError as error:
        raise fail(error) from error


def _render_analysis(out: CommandOutput, analysis: DailyAnalysis) -> None:
    title = f"{analysis.market}/{analysis.code} {analysis.date.isoformat()}"
    if analysis.error:
        out.render([summary_row(analysis)], SUMMARY_COLUMNS, title=title)
    else:
        out.render(bar_rows(analysis), BAR_COLUMNS, title=title)


__all__ = ["create_fetcher", "open_store", "register"]
