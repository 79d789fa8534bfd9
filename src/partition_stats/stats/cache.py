"""Identity-keyed memoisation of collection stats."""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from partition_stats.errors import CacheTypeMismatchError
from partition_stats.stats.types import DatasetStats

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _Entry:
    stats: DatasetStats
    stored_at: float


class StatsCache:
    """
    Thread-safe store computing each collection's stats at most once.

    Callers racing on the same collection id share a single computation;
    callers on different ids never wait for each other's computation. The
    shared lock only guards dictionary bookkeeping.

    Entries never expire unless ``ttl`` (seconds) is given. ``invalidate``
    and ``clear`` drop entries explicitly, e.g. when an engine recycles ids.
    """

    def __init__(self, ttl: float | None = None, clock: Callable[[], float] = time.monotonic):
        if ttl is not None and ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        self._ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[int, _Entry] = {}
        self._key_locks: dict[int, threading.Lock] = {}

    def _lookup(self, collection_id: int) -> DatasetStats | None:
        """Return the live entry for ``collection_id``. Caller holds ``_lock``."""
        entry = self._entries.get(collection_id)
        if entry is None:
            return None
        if self._ttl is not None and self._clock() - entry.stored_at >= self._ttl:
            logger.debug("Stats for collection %d expired", collection_id)
            del self._entries[collection_id]
            return None
        return entry.stats

    def _key_lock(self, collection_id: int) -> threading.Lock:
        with self._lock:
            key_lock = self._key_locks.get(collection_id)
            if key_lock is None:
                key_lock = self._key_locks[collection_id] = threading.Lock()
            return key_lock

    def get(self, collection_id: int, element_type: type | None = None) -> DatasetStats | None:
        """Return cached stats for ``collection_id`` or None, never computing."""
        with self._lock:
            stats = self._lookup(collection_id)
        if stats is not None:
            _check_type(collection_id, stats, element_type)
        return stats

    def get_or_compute(
        self,
        collection_id: int,
        compute: Callable[[], DatasetStats],
        element_type: type | None = None,
    ) -> DatasetStats:
        """
        Return the stats stored for ``collection_id``, computing them on a miss.

        ``compute`` runs at most once per id while its entry is live. If it
        raises, nothing is stored and the exception propagates.

        Raises:
            CacheTypeMismatchError: ``element_type`` is given and the stats
                are tagged with a different element type.
        """
        stats = self.get(collection_id, element_type)
        if stats is not None:
            logger.debug("Stats cache hit for collection %d", collection_id)
            return stats

        with self._key_lock(collection_id):
            # Another caller may have finished while we waited for the key lock.
            with self._lock:
                stats = self._lookup(collection_id)

            if stats is None:
                logger.debug("Stats cache miss for collection %d", collection_id)
                try:
                    stats = compute()
                    with self._lock:
                        self._entries[collection_id] = _Entry(stats, self._clock())
                finally:
                    with self._lock:
                        self._key_locks.pop(collection_id, None)

        _check_type(collection_id, stats, element_type)
        return stats

    def invalidate(self, collection_id: int) -> bool:
        """Drop the entry for ``collection_id``. Returns True if one was present."""
        with self._lock:
            return self._entries.pop(collection_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, collection_id: object) -> bool:
        if not isinstance(collection_id, int):
            return False
        with self._lock:
            return self._lookup(collection_id) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def _check_type(collection_id: int, stats: DatasetStats, expected: type | None) -> None:
    actual = stats.element_type
    if expected is not None and actual is not None and actual is not expected:
        raise CacheTypeMismatchError(collection_id, expected, actual)
