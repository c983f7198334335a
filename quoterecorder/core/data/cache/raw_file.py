"""Write-once on-disk cache of raw chart payloads."""

from __future__ import annotations

from datetime import date
from pathlib import Path

from quoterecorder.core.exceptions import CacheError


class RawFileCache:
    """Stores payloads at ``<data_dir>/<market>/<code>/<YYYYMMDD>_raw.txt``."""

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)

    def path_for(self, market: str, code: str, day: date) -> Path:
        return self.data_dir / market / code / f"{day:%Y%m%d}_raw.txt"

    def exists(self, market: str, code: str, day: date) -> bool:
        return self.path_for(market, code, day).exists()

    def save(self, market: str, code: str, day: date, content: bytes | str) -> bool:
        """Write ``content`` unless a file for the key already exists.

        Returns:
            True when the file was written.
        """

        path = self.path_for(market, code, day)
        data = content.encode("utf-8") if isinstance(content, str) else content
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            f = open(path, "xb")
        except FileExistsError:
            return False
        except OSError as e:
            raise CacheError(f"failed to write raw file: {e}", path=str(path)) from e

        try:
            with f:
                f.write(data)
        except OSError as e:
            # 不保留半截文件，否则后续写入会被当成已缓存而跳过
            path.unlink(missing_ok=True)
            raise CacheError(f"failed to write raw file: {e}", path=str(path)) from e
        return True

    def load(self, market: str, code: str, day: date) -> bytes | None:
        path = self.path_for(market, code, day)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CacheError(f"failed to read raw file: {e}", path=str(path)) from e


__all__ = ["RawFileCache"]
