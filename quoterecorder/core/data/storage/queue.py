"""Fire-and-forget save queue drained by a single writer thread."""

from __future__ import annotations

import queue
import threading
from datetime import date
from typing import Union

from loguru import logger

from quoterecorder.core.data.storage.repository import QuoteStore
from quoterecorder.core.exceptions import QuoteRecorderError
from quoterecorder.core.models.analysis import DailyAnalysis, RawPayload

QueueItem = Union[RawPayload, DailyAnalysis]

_STOP = object()


class PersistenceQueue:
    """Decouple producers from the serialized DuckDB writer.

    ``enqueue`` and ``save`` never block on storage; the writer thread
    persists items in arrival order. Write failures are logged and counted
    because there is no producer left to raise into.
    """

    def __init__(self, store: QuoteStore, maxsize: int = 0) -> None:
        self.store = store
        self._queue: queue.Queue[object] = queue.Queue(maxsize=maxsize)
        self._worker: threading.Thread | None = None
        self._lock = threading.Lock()
        self.written = 0
        self.skipped = 0
        self.failed_writes = 0

    def __enter__(self) -> PersistenceQueue:
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def running(self) -> bool:
        return self._worker is not None and self._worker.is_alive()

    def start(self) -> None:
        with self._lock:
            if self.running:
                return
            self._worker = threading.Thread(target=self._drain, name="quoterecorder-writer", daemon=True)
            self._worker.start()

    def exists(self, market: str, code: str, day: date) -> bool:
        return self.store.exists(market, code, day)

    def enqueue(self, payload: RawPayload) -> None:
        """Queue a raw payload for durable storage."""

        self._put(payload)

    def save(self, analysis: DailyAnalysis) -> None:
        """Queue a classified result for durable storage."""

        self._put(analysis)

    def _put(self, item: QueueItem) -> None:
        if not self.running:
            self.start()
        self._queue.put_nowait(item)

    def join(self) -> None:
        """Block until every queued item has been handled."""

        self._queue.join()

    def close(self, timeout: float | None = None) -> None:
        """Flush pending items and stop the writer thread."""

        with self._lock:
            worker = self._worker
            if worker is None:
                return
            self._queue.put(_STOP)
            worker.join(timeout)
            self._worker = None

    def _drain(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                self._write(item)  # type: ignore[arg-type]
            finally:
                self._queue.task_done()

    def _write(self, item: QueueItem) -> None:
        key = {"market": item.market, "code": item.code, "date": item.date}
        try:
            if isinstance(item, RawPayload):
                if self.store.save_raw(item):
                    self.written += 1
                else:
                    self.skipped += 1
                    logger.debug("raw payload already stored", **key)
            else:
                self.store.save_analysis(item)
                self.written += 1
        except QuoteRecorderError as exc:
            self.failed_writes += 1
            logger.bind(error_code=exc.error_code, **key).error("queued write failed: {}", exc.message)


__all__ = ["PersistenceQueue", "QueueItem"]
