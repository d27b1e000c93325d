"""Blocking FIFO of messages and a background worker that drains it."""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Any, Callable, Optional

_log = logging.getLogger(__name__)

Handler = Callable[[Any, int], None]

_STOP = object()


class WorkQueue:
    """Thread-safe FIFO of ``(message, size)`` pairs; ``get`` blocks until one arrives."""

    def __init__(self) -> None:
        self._items: deque[tuple[Any, int]] = deque()
        self._cond = threading.Condition()

    def put(self, msg: Any, size: int) -> None:
        """Append a message and wake one waiting reader."""
        with self._cond:
            self._items.append((msg, size))
            self._cond.notify()

    def get(self) -> tuple[Any, int]:
        """Remove and return the oldest ``(message, size)``, waiting if empty."""
        with self._cond:
            while not self._items:
                self._cond.wait()
            return self._items.popleft()

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)

    def _drain(self) -> list[tuple[Any, int]]:
        with self._cond:
            items = list(self._items)
            self._items.clear()
        return items


class WorkerQueue:
    """A WorkQueue served by a daemon thread that passes each message to ``handler``."""

    def __init__(self, handler: Handler) -> None:
        self._queue = WorkQueue()
        self._handler = handler
        self._running = True
        self._closed = False
        self._leftover: list[tuple[Any, int]] = []
        self._thread = threading.Thread(
            target=self._run, name="work-queue", daemon=True
        )
        self._thread.start()

    def _run(self) -> None:
        while True:
            msg, size = self._queue.get()
            if not self._running or msg is _STOP:
                if msg is not _STOP:
                    self._leftover.append((msg, size))
                _log.debug("work queue thread exit")
                return
            try:
                self._handler(msg, size)
            except Exception:
                _log.exception("message handler failed")

    def __len__(self) -> int:
        return len(self._queue)

    def put(self, msg: Any, size: int) -> None:
        """Queue a message for the worker thread."""
        if self._closed:
            raise RuntimeError("work queue is closed")
        self._queue.put(msg, size)

    def close(self, clean: Optional[Handler] = None) -> int:
        """Stop the worker and pass every message it did not handle to ``clean``.

        Returns the number of messages that were cleaned up.
        """
        if self._closed:
            return 0
        self._closed = True
        self._running = False
        self._queue.put(_STOP, 0)
        self._thread.join()
        pending = self._leftover + [
            item for item in self._queue._drain() if item[0] is not _STOP
        ]
        self._leftover = []
        for msg, size in pending:
            if clean is not None:
                clean(msg, size)
        return len(pending)

    def __enter__(self) -> "WorkerQueue":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class MessageHandler:
    """Owns a WorkerQueue whose handler also cleans up what is left on close."""

    def __init__(self) -> None:
        self._worker: Optional[WorkerQueue] = None
        self._handler: Optional[Handler] = None

    def register(self, handler: Handler) -> None:
        """Start a worker that hands each queued message to ``handler``."""
        self._handler = handler
        self._worker = WorkerQueue(handler)

    def put(self, msg: Any, size: int) -> None:
        """Queue a message for the registered handler."""
        if self._worker is None:
            raise RuntimeError("no handler registered")
        self._worker.put(msg, size)

    def close(self) -> None:
        """Stop the worker; unhandled messages go to the registered handler."""
        if self._worker is not None:
            self._worker.close(self._handler)
            self._worker = None