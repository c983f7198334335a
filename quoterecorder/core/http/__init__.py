"""HTTP access to the upstream chart endpoint."""

from quoterecorder.core.http.downloader import ResilientDownloader

__all__ = ["ResilientDownloader"]
