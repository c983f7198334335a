"""DuckDB table definitions for raw payloads and classified bars."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from duckdb import DuckDBPyConnection


@dataclass(frozen=True)
class ColumnDef:
    """Represents a DuckDB table column definition."""

    name: str
    data_type: str
    constraints: Sequence[str] = ()

    def render(self) -> str:
        parts = [self.name, self.data_type, *self.constraints]
        return " ".join(parts)


@dataclass(frozen=True)
class TableSchema:
    """Utility wrapper describing a DuckDB table schema."""

    name: str
    columns: Sequence[ColumnDef]
    primary_key: Sequence[str] = ()

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]

    def create_ddl(self) -> str:
        column_defs: list[str] = [column.render() for column in self.columns]
        if self.primary_key:
            pk_cols = ", ".join(self.primary_key)
            column_defs.append(f"PRIMARY KEY ({pk_cols})")
        columns_sql = ",\n                ".join(column_defs)
        return f"""
            CREATE TABLE IF NOT EXISTS {self.name} (
                {columns_sql}
            )
            """.strip()

    def ensure(self, conn: DuckDBPyConnection) -> None:
        """Create the table on the provided connection if it does not exist."""

        conn.execute(self.create_ddl())


RAW_DAILY_TABLE = TableSchema(
    name="raw_daily",
    columns=(
        ColumnDef("market", "VARCHAR", ("NOT NULL",)),
        ColumnDef("code", "VARCHAR", ("NOT NULL",)),
        ColumnDef("trade_date", "DATE", ("NOT NULL",)),
        ColumnDef("json_text", "VARCHAR", ("NOT NULL",)),
        ColumnDef("status", "INTEGER", ("NOT NULL", "DEFAULT 0")),
        ColumnDef("message", "VARCHAR", ("DEFAULT ''",)),
        ColumnDef("fetched_at", "TIMESTAMP", ("DEFAULT CURRENT_TIMESTAMP",)),
    ),
    primary_key=("market", "code", "trade_date"),
)

DAILY_ANALYSIS_TABLE = TableSchema(
    name="daily_analysis",
    columns=(
        ColumnDef("market", "VARCHAR", ("NOT NULL",)),
        ColumnDef("code", "VARCHAR", ("NOT NULL",)),
        ColumnDef("trade_date", "DATE", ("NOT NULL",)),
        ColumnDef("is_error", "BOOLEAN", ("NOT NULL",)),
        ColumnDef("message", "VARCHAR", ("DEFAULT ''",)),
        ColumnDef("analyzed_at", "TIMESTAMP", ("DEFAULT CURRENT_TIMESTAMP",)),
    ),
    primary_key=("market", "code", "trade_date"),
)

MINUTE_BAR_TABLE = TableSchema(
    name="minute_bars",
    columns=(
        ColumnDef("market", "VARCHAR", ("NOT NULL",)),
        ColumnDef("code", "VARCHAR", ("NOT NULL",)),
        ColumnDef("trade_date", "DATE", ("NOT NULL",)),
        ColumnDef("session", "VARCHAR", ("NOT NULL",)),
        ColumnDef("seq", "INTEGER", ("NOT NULL",)),
        ColumnDef("start_ts", "BIGINT", ("NOT NULL",)),
        ColumnDef("end_ts", "BIGINT", ("NOT NULL",)),
        ColumnDef("open", "DOUBLE"),
        ColumnDef("close", "DOUBLE"),
        ColumnDef("high", "DOUBLE"),
        ColumnDef("low", "DOUBLE"),
        ColumnDef("volume", "BIGINT"),
    ),
)

ALL_TABLES: tuple[TableSchema, ...] = (RAW_DAILY_TABLE, DAILY_ANALYSIS_TABLE, MINUTE_BAR_TABLE)


def ensure_tables(conn: DuckDBPyConnection, tables: Iterable[TableSchema] = ALL_TABLES) -> None:
    """Create every table in ``tables`` that does not exist yet."""

    for table in tables:
        table.ensure(conn)


__all__ = [
    "ALL_TABLES",
    "ColumnDef",
    "DAILY_ANALYSIS_TABLE",
    "MINUTE_BAR_TABLE",
    "RAW_DAILY_TABLE",
    "TableSchema",
    "ensure_tables",
]
