"""In-memory proxy counters and request history"""

import threading
from collections import deque
from typing import Deque, List

from ..models.admin import HistoryEntry, StatisticsSnapshot

MAX_HISTORY_ENTRIES = 1000


class ProxyStatistics:
    """Record/hit/miss counters, alive for the lifetime of the process"""

    def __init__(self):
        self._record_count = 0
        self._playback_hits = 0
        self._playback_misses = 0
        self._lock = threading.Lock()

    def increment_record(self):
        with self._lock:
            self._record_count += 1

    def increment_hit(self):
        with self._lock:
            self._playback_hits += 1

    def increment_miss(self):
        with self._lock:
            self._playback_misses += 1

    def snapshot(self) -> StatisticsSnapshot:
        """Get a consistent copy of all counters"""
        with self._lock:
            return StatisticsSnapshot(
                record_count=self._record_count,
                playback_hits=self._playback_hits,
                playback_misses=self._playback_misses
            )


class RequestHistory:
    """
    Bounded log of proxied requests, newest first.

    Once ``max_entries`` is reached every new entry evicts the oldest one.
    """

    def __init__(self, max_entries: int = MAX_HISTORY_ENTRIES):
        self._entries: Deque[HistoryEntry] = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    def add(self, entry: HistoryEntry):
        """Add an entry at the front of the log"""
        with self._lock:
            self._entries.appendleft(entry)

    def entries(self) -> List[HistoryEntry]:
        """Get a copy of the log, newest first"""
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
