"""DuckDB-backed store for raw payloads and daily analyses."""

from __future__ import annotations

import threading
from datetime import date

import duckdb
from duckdb import DuckDBPyConnection

from quoterecorder.core.data.storage.duckdb_factory import DuckDBFactory, DuckDBFactoryConfig
from quoterecorder.core.data.storage.schema import ensure_tables
from quoterecorder.core.exceptions import StorageError, StoreLookupError
from quoterecorder.core.models.analysis import DailyAnalysis, MinuteBar, RawPayload
from quoterecorder.core.models.market import RawStatus, TradingSession


class QuoteStore:
    """Persistence for ``raw_daily``, ``daily_analysis`` and ``minute_bars``.

    A single connection is shared; a lock serialises every statement so the
    store can be used from the queue writer thread and from request tasks.
    """

    def __init__(self, conn: DuckDBPyConnection) -> None:
        self._conn = conn
        self._lock = threading.RLock()
        with self._lock:
            ensure_tables(self._conn)

    @classmethod
    def open(cls, database: str = ":memory:") -> QuoteStore:
        factory = DuckDBFactory(DuckDBFactoryConfig(database=database))
        try:
            return cls(factory.create_connection())
        except (duckdb.Error, OSError) as exc:
            raise StorageError(f"failed to open database: {exc}", details={"database": database}) from exc

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def exists(self, market: str, code: str, day: date) -> bool:
        """Return whether a raw payload is stored for the key."""

        try:
            with self._lock:
                row = self._conn.execute(
                    "SELECT 1 FROM raw_daily WHERE market = ? AND code = ? AND trade_date = ? LIMIT 1",
                    [market, code, day],
                ).fetchone()
        except duckdb.Error as exc:
            raise StoreLookupError(f"existence check failed: {exc}", market, code, day) from exc
        return row is not None

    def save_raw(self, payload: RawPayload) -> bool:
        """Insert ``payload`` unless its key is already stored.

        Returns:
            True when a new row was written.
        """

        try:
            with self._lock:
                before = self._count_raw(payload)
                self._conn.execute(
                    "INSERT OR IGNORE INTO raw_daily (market, code, trade_date, json_text, status, message) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    [
                        payload.market,
                        payload.code,
                        payload.date,
                        payload.json_text,
                        int(payload.status),
                        payload.message,
                    ],
                )
                return self._count_raw(payload) > before
        except duckdb.Error as exc:
            raise StorageError(
                f"failed to save raw payload: {exc}",
                details=_key(payload.market, payload.code, payload.date),
            ) from exc

    def _count_raw(self, payload: RawPayload) -> int:
        row = self._conn.execute(
            "SELECT count(*) FROM raw_daily WHERE market = ? AND code = ? AND trade_date = ?",
            [payload.market, payload.code, payload.date],
        ).fetchone()
        return int(row[0]) if row else 0

    def load_raw(self, market: str, code: str, day: date) -> RawPayload | None:
        try:
            with self._lock:
                row = self._conn.execute(
                    "SELECT market, code, trade_date, json_text, status, message FROM raw_daily "
                    "WHERE market = ? AND code = ? AND trade_date = ?",
                    [market, code, day],
                ).fetchone()
        except duckdb.Error as exc:
            raise StorageError(f"failed to load raw payload: {exc}", details=_key(market, code, day)) from exc
        return _raw_from_row(row) if row else None

    def pending_raw(self, limit: int | None = None) -> list[RawPayload]:
        """Return unprocessed raw payloads, oldest trade date first."""

        sql = (
            "SELECT market, code, trade_date, json_text, status, message FROM raw_daily "
            "WHERE status = ? ORDER BY trade_date, market, code"
        )
        params: list[object] = [int(RawStatus.UNPROCESSED)]
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)
        try:
            with self._lock:
                rows = self._conn.execute(sql, params).fetchall()
        except duckdb.Error as exc:
            raise StorageError(f"failed to list pending raw payloads: {exc}") from exc
        return [_raw_from_row(row) for row in rows]

    def mark_raw(self, market: str, code: str, day: date, status: RawStatus, message: str = "") -> None:
        try:
            with self._lock:
                self._conn.execute(
                    "UPDATE raw_daily SET status = ?, message = ? WHERE market = ? AND code = ? AND trade_date = ?",
                    [int(status), message, market, code, day],
                )
        except duckdb.Error as exc:
            raise StorageError(f"failed to update raw status: {exc}") from exc

    def save_analysis(self, analysis: DailyAnalysis) -> None:
        """Replace any stored analysis for the key with ``analysis``."""

        key = [analysis.market, analysis.code, analysis.date]
        bar_rows = [
            (analysis.market, analysis.code, analysis.date, session.value, seq, *_bar_values(bar))
            for session in TradingSession
            for seq, bar in enumerate(analysis.bars(session))
        ]
        try:
            with self._lock:
                self._conn.execute("BEGIN TRANSACTION")
                try:
                    self._conn.execute(
                        "DELETE FROM minute_bars WHERE market = ? AND code = ? AND trade_date = ?", key
                    )
                    self._conn.execute(
                        "INSERT OR REPLACE INTO daily_analysis (market, code, trade_date, is_error, message) "
                        "VALUES (?, ?, ?, ?, ?)",
                        [*key, analysis.error, analysis.message],
                    )
                    if bar_rows:
                        self._conn.executemany(
                            "INSERT INTO minute_bars (market, code, trade_date, session, seq, start_ts, end_ts, "
                            "open, close, high, low, volume) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                            bar_rows,
                        )
                except duckdb.Error:
                    self._conn.execute("ROLLBACK")
                    raise
                self._conn.execute("COMMIT")
        except duckdb.Error as exc:
            raise StorageError(
                f"failed to save analysis: {exc}",
                details=_key(analysis.market, analysis.code, analysis.date),
            ) from exc

    def load_analysis(self, market: str, code: str, day: date) -> DailyAnalysis | None:
        try:
            with self._lock:
                head = self._conn.execute(
                    "SELECT is_error, message FROM daily_analysis WHERE market = ? AND code = ? AND trade_date = ?",
                    [market, code, day],
                ).fetchone()
                if head is None:
                    return None
                rows = self._conn.execute(
                    "SELECT session, start_ts, end_ts, open, close, high, low, volume FROM minute_bars "
                    "WHERE market = ? AND code = ? AND trade_date = ? ORDER BY session, seq",
                    [market, code, day],
                ).fetchall()
        except duckdb.Error as exc:
            raise StorageError(f"failed to load analysis: {exc}", details=_key(market, code, day)) from exc

        analysis = DailyAnalysis(code=code, market=market, date=day, error=bool(head[0]), message=head[1] or "")
        for session, start, end, open_, close, high, low, volume in rows:
            analysis.bars(TradingSession(session)).append(
                MinuteBar(
                    code=code,
                    market=market,
                    start=start,
                    end=end,
                    open=open_,
                    close=close,
                    high=high,
                    low=low,
                    volume=volume,
                )
            )
        return analysis


def _key(market: str, code: str, day: date) -> dict[str, str]:
    return {"market": market, "code": code, "date": day.isoformat()}


def _bar_values(bar: MinuteBar) -> tuple[object, ...]:
    return (bar.start, bar.end, bar.open, bar.close, bar.high, bar.low, bar.volume)


def _raw_from_row(row: tuple[object, ...]) -> RawPayload:
    market, code, trade_date, json_text, status, message = row
    return RawPayload(
        market=str(market),
        code=str(code),
        date=trade_date,  # type: ignore[arg-type]
        json_text=str(json_text),
        status=RawStatus(int(status)),  # type: ignore[arg-type]
        message=str(message or ""),
    )


__all__ = ["QuoteStore"]
