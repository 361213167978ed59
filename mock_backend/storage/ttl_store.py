"""In-memory keyed storage with per-record expiry (can be replaced with Redis)"""

from typing import Callable, Dict, Generic, List, Optional, Tuple, TypeVar
from datetime import datetime, timedelta
from ..utils import timeutils
import threading

T = TypeVar("T")


class TTLStore(Generic[T]):
    """
    In-memory record storage with expiring entries.

    Each record carries its own expiration. Expired records are treated as
    absent and removed lazily on access; `purge_expired` sweeps them eagerly.

    All read-modify-write access goes through `update`, which runs the
    mutation under the store lock so concurrent writers to one key never
    lose an update. Callers must keep mutations short: no I/O or sleeping
    while the lock is held.
    """

    def __init__(self, name: str):
        self.name = name
        self._records: Dict[str, Tuple[T, datetime]] = {}
        self._lock = threading.Lock()

    def _live(self, key: str, now: datetime) -> Optional[Tuple[T, datetime]]:
        """Return the entry for key, dropping it if expired. Lock must be held."""
        entry = self._records.get(key)
        if entry is None:
            return None
        if now >= entry[1]:
            del self._records[key]
            return None
        return entry

    def put(self, key: str, value: T, expires_at: datetime) -> T:
        """Store a record that expires at `expires_at`"""
        with self._lock:
            self._records[key] = (value, expires_at)
        return value

    def put_for(self, key: str, value: T, ttl_seconds: int) -> T:
        """Store a record that expires `ttl_seconds` from now"""
        return self.put(key, value, timeutils.utcnow() + timedelta(seconds=ttl_seconds))

    def get(self, key: str) -> Optional[T]:
        """Get a live record"""
        with self._lock:
            entry = self._live(key, timeutils.utcnow())
            return entry[0] if entry else None

    def update(
        self,
        key: str,
        mutate: Callable[[T], T],
        expires_at: Optional[datetime] = None
    ) -> Optional[T]:
        """
        Atomically apply `mutate` to a live record.

        Args:
            key: Record key
            mutate: Function receiving the current value and returning the new one
            expires_at: New expiration; the existing one is kept when omitted

        Returns:
            The stored value, or None if the record does not exist
        """
        with self._lock:
            entry = self._live(key, timeutils.utcnow())
            if entry is None:
                return None
            value = mutate(entry[0])
            self._records[key] = (value, expires_at or entry[1])
            return value

    def delete(self, key: str) -> bool:
        """Delete a record; True if a live record was removed"""
        with self._lock:
            entry = self._live(key, timeutils.utcnow())
            if entry is None:
                return False
            del self._records[key]
            return True

    def exists(self, key: str) -> bool:
        with self._lock:
            return self._live(key, timeutils.utcnow()) is not None

    def values(self) -> List[T]:
        """Snapshot of all live records"""
        with self._lock:
            now = timeutils.utcnow()
            return [value for value, expires_at in self._records.values() if now < expires_at]

    def purge_expired(self) -> int:
        """Remove expired records, returning how many were dropped"""
        with self._lock:
            now = timeutils.utcnow()
            expired = [key for key, (_, expires_at) in self._records.items() if now >= expires_at]
            for key in expired:
                del self._records[key]
            return len(expired)

    def count(self) -> int:
        with self._lock:
            now = timeutils.utcnow()
            return sum(1 for _, expires_at in self._records.values() if now < expires_at)

    def clear(self):
        with self._lock:
            self._records.clear()
