# src/prodash/core/ids.py

from __future__ import annotations

import threading
import time
from collections.abc import Callable


class MonotonicIdGenerator:
    """
    Integer ids derived from the creation instant (epoch ms), but never repeating:
    each id is max(now_ms, previous + 1).
    """

    def __init__(self, *, clock: Callable[[], float] = time.time, start_after: int = 0) -> None:
        self._clock = clock
        self._last = int(start_after)
        self._lock = threading.Lock()

    def observe(self, existing_id: int) -> None:
        """Make sure future ids are greater than an id already in use."""
        with self._lock:
            self._last = max(self._last, int(existing_id))

    def next_id(self) -> int:
        with self._lock:
            candidate = int(self._clock() * 1000)
            self._last = max(candidate, self._last + 1)
            return self._last
