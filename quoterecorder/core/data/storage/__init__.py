"""DuckDB storage for raw payloads and classified bars."""

from quoterecorder.core.data.storage.duckdb_factory import DuckDBFactory, DuckDBFactoryConfig
from quoterecorder.core.data.storage.queue import PersistenceQueue
from quoterecorder.core.data.storage.repository import QuoteStore
from quoterecorder.core.data.storage.schema import ColumnDef, TableSchema, ensure_tables

__all__ = [
    "ColumnDef",
    "DuckDBFactory",
    "DuckDBFactoryConfig",
    "PersistenceQueue",
    "QuoteStore",
    "TableSchema",
    "ensure_tables",
]
