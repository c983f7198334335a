from __future__ import annotations

from datetime import date

import pytest

from quoterecorder.core.data.cache import RawFileCache, raw_file
from quoterecorder.core.exceptions import CacheError

DAY = date(2023, 11, 4)


def test_path_layout(tmp_path) -> None:
    cache = RawFileCache(tmp_path)

    assert cache.path_for("america", "AAPL", DAY) == tmp_path / "america" / "AAPL" / "20231104_raw.txt"


def test_save_is_write_once(tmp_path) -> None:
    cache = RawFileCache(tmp_path)

    assert cache.save("america", "AAPL", DAY, '{"chart": 1}') is True
    assert cache.save("america", "AAPL", DAY, b'{"chart": 2}') is False

    assert cache.exists("america", "AAPL", DAY)
    assert cache.load("america", "AAPL", DAY) == b'{"chart": 1}'


def test_load_missing_returns_none(tmp_path) -> None:
    assert RawFileCache(tmp_path).load("america", "AAPL", DAY) is None


def test_unwritable_directory_raises_cache_error(tmp_path) -> None:
    blocker = tmp_path / "america"
    blocker.write_text("not a directory")
    cache = RawFileCache(tmp_path)

    with pytest.raises(CacheError) as exc_info:
        cache.save("america", "AAPL", DAY, "{}")

    assert exc_info.value.details["path"].endswith("20231104_raw.txt")


class _FailingWriter:
    """Writes part of the payload, then fails like a full disk."""

    def __init__(self, f) -> None:
        self._f = f

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self._f.close()

    def write(self, data: bytes) -> int:
        self._f.write(data[:2])
        self._f.flush()
        raise OSError(28, "No space left on device")


def test_failed_write_leaves_no_partial_file(tmp_path, monkeypatch) -> None:
    cache = RawFileCache(tmp_path)
    monkeypatch.setattr(raw_file, "open", lambda path, mode: _FailingWriter(open(path, mode)), raising=False)

    with pytest.raises(CacheError, match="No space left on device"):
        cache.save("america", "AAPL", DAY, '{"chart": 1}')

    assert not cache.exists("america", "AAPL", DAY)

    monkeypatch.delattr(raw_file, "open")
    assert cache.save("america", "AAPL", DAY, '{"chart": 1}') is True
    assert cache.load("america", "AAPL", DAY) == b'{"chart": 1}'
