"""Data ingestion, storage and caching."""
