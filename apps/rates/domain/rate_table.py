"""
In-memory, day-bucketed rate store.

Writers build a complete new mapping and swap the reference in one assignment,
so readers never need a lock and always see a whole bucket for any day.
"""

import threading
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from apps.rates.domain.models import RateEntry


DayBucket = Mapping[str, RateEntry]


class RateTable:
    """Maps day keys to immutable day buckets (currency code -> RateEntry)."""

    def __init__(self):
        self._buckets: Mapping[int, DayBucket] = MappingProxyType({})
        self._version = 0
        self._write_lock = threading.Lock()

    @property
    def version(self) -> int:
        """Incremented on every install; lets derived caches detect staleness."""
        return self._version

    def get(self, day_key: int) -> Optional[DayBucket]:
        return self._buckets.get(day_key)

    def snapshot(self) -> Tuple[int, Mapping[int, DayBucket]]:
        """Return (version, buckets) without taking the write lock."""
        # version first: a racing install can only make the pair look older
        version = self._version
        return version, self._buckets

    def is_empty(self) -> bool:
        return not self._buckets

    def __len__(self):
        return len(self._buckets)

    def __contains__(self, day_key):
        return day_key in self._buckets

    def install(self, buckets: Mapping[int, Mapping[str, RateEntry]]) -> int:
        """
        Install whole buckets, replacing any existing bucket for the same day.

        Returns:
            Number of days that were not present before.
        """
        frozen: Dict[int, DayBucket] = {
            day_key: MappingProxyType(dict(bucket))
            for day_key, bucket in buckets.items()
        }
        with self._write_lock:
            current = self._buckets
            added = sum(1 for day_key in frozen if day_key not in current)
            merged = dict(current)
            merged.update(frozen)
            self._buckets = MappingProxyType(merged)
            self._version += 1
        return added


class RecentDayPointer:
    """
    Lazily computed max(day keys) of a RateTable.

    No lock: recomputation is idempotent for a given table version, and the
    cached (version, key) pair is published with a single assignment.
    """

    def __init__(self, table: RateTable):
        self._table = table
        self._cached: Optional[Tuple[int, int]] = None

    def get(self) -> Optional[int]:
        cached = self._cached
        if cached is not None and cached[0] == self._table.version:
            return cached[1]

        version, buckets = self._table.snapshot()
        if not buckets:
            return None
        recent = max(buckets)
        self._cached = (version, recent)
        return recent

    def invalidate(self) -> None:
        self._cached = None
