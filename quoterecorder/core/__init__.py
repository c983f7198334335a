"""Core ingestion pipeline: models, parsing, storage and orchestration."""
