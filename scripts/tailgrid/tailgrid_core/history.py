"""Bounded, lock-guarded line history for one source."""

from __future__ import annotations

import threading
from collections import deque

from tailgrid_core.models import DEFAULT_MAX_HISTORY


class HistoryBuffer:
    """FIFO line buffer holding at most ``max_history`` lines.

    The ingestion thread is the only writer; the render loop reads through
    ``snapshot`` or ``window``. Every mutation happens inside one lock
    acquisition so a reader never sees more than ``max_history`` lines.

    Each line ever pushed gets a sequence number; ``first_seq`` is the number
    of the oldest line still held, so readers can tell appends from evictions.
    """

    def __init__(self, max_history: int = DEFAULT_MAX_HISTORY):
        if max_history < 1:
            raise ValueError(f"max_history must be positive, got {max_history}")
        self.max_history = max_history
        self._lines: deque[str] = deque()
        self._first_seq = 0
        self._lock = threading.Lock()

    def push(self, line: str) -> int:
        """Append ``line`` and evict the oldest lines; returns the new length."""
        with self._lock:
            self._lines.append(line)
            while len(self._lines) > self.max_history:
                self._lines.popleft()
                self._first_seq += 1
            return len(self._lines)

    def clear(self) -> None:
        with self._lock:
            self._first_seq += len(self._lines)
            self._lines.clear()

    def snapshot(self) -> list[str]:
        with self._lock:
            return list(self._lines)

    def window(self) -> tuple[int, list[str]]:
        """Sequence number of the oldest held line plus the held lines."""
        with self._lock:
            return self._first_seq, list(self._lines)

    def __len__(self) -> int:
        with self._lock:
            return len(self._lines)
