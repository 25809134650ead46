"""
In-memory tracking record store with per-entry expiry.

Records are keyed by ``tracking_id`` and held in a ``cachetools.TTLCache``,
so each one expires a fixed number of seconds after it was inserted. Reads
never extend an entry's lifetime. Expired entries are hidden from every read
immediately and physically removed by ``purge_expired``, which the service
runs periodically.
"""

import math
import threading
import time
from typing import Any, Callable, Dict, List, Optional

from cachetools import TTLCache

from services.common.logging_config import get_logger
from services.shipments.schemas import TrackingRecord
from services.shipments.settings import ONE_DAY_SECONDS

logger = get_logger(__name__)

Clock = Callable[[], float]


class TrackingStore:
    """Process-local store of tracking records with time-based expiry."""

    def __init__(
        self, ttl_seconds: float = ONE_DAY_SECONDS, clock: Clock = time.monotonic
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._lock = threading.Lock()
        self._cache: TTLCache = TTLCache(
            maxsize=math.inf, ttl=ttl_seconds, timer=clock
        )
        self._hits = 0
        self._misses = 0

    def put(self, record: TrackingRecord) -> None:
        """Insert ``record`` under its tracking_id, replacing any existing entry."""
        with self._lock:
            # TTLCache restarts the TTL and moves the key to the end on re-set
            self._cache[record.tracking_id] = record

    def get(self, tracking_id: str) -> Optional[TrackingRecord]:
        with self._lock, self._cache.timer:
            record = self._cache.get(tracking_id)
            if record is None:
                self._misses += 1
            else:
                self._hits += 1
            return record

    def _snapshot(self) -> List[TrackingRecord]:
        # Freeze the cache timer so one scan sees a single point in time
        with self._cache.timer:
            return list(self._cache.values())

    def list_all(self) -> List[TrackingRecord]:
        """Return every non-expired record in insertion order."""
        with self._lock:
            return self._snapshot()

    def find_by_shipment(self, shipment_id: str) -> List[TrackingRecord]:
        """Return every non-expired record belonging to ``shipment_id``."""
        with self._lock:
            records = [
                record
                for record in self._snapshot()
                if record.shipment_id == shipment_id
            ]
            if records:
                self._hits += 1
            else:
                self._misses += 1
            return records

    def keys(self) -> List[str]:
        return [record.tracking_id for record in self.list_all()]

    def purge_expired(self) -> int:
        """Delete expired entries and return how many were removed."""
        with self._lock:
            expired = self._cache.expire()
        if expired:
            logger.debug("Purged expired tracking records", count=len(expired))
        return len(expired)

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "keys": len(self._snapshot()),
                "hits": self._hits,
                "misses": self._misses,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._snapshot())
