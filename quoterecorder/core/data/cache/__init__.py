"""Raw payload file cache."""

from quoterecorder.core.data.cache.raw_file import RawFileCache

__all__ = ["RawFileCache"]
