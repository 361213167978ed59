"""Shared lifecycle for per-session test trackers"""

import logging
from datetime import timedelta
from typing import Callable, Generic, Iterable, List, Optional, TypeVar
from pydantic import BaseModel
from ..core.config import settings
from ..storage.ttl_store import TTLStore
from ..utils import timeutils

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)


def unique_identifiers(identifiers: Iterable[Optional[str]]) -> List[str]:
    """Distinct non-empty identifiers in order of first appearance"""
    seen = {}
    for identifier in identifiers:
        if identifier:
            seen.setdefault(identifier, None)
    return list(seen)


def as_identifier(value) -> Optional[str]:
    """Normalize a payload identifier to a string, keeping missing values as None"""
    if value is None or value == "":
        return None
    return str(value)


class SessionTracker(Generic[R]):
    """
    Accumulates observed request events for one test session.

    One record is kept per session id with its own TTL. `initialize` creates
    or wipes it; track calls append to it and are dropped with a warning
    when no record exists; `clear_session` deletes it.
    """

    tag = "TRACKER"
    record_type: Callable[..., R]

    def __init__(self, ttl_seconds: Optional[int] = None):
        self.ttl_seconds = ttl_seconds or settings.tracker_ttl_seconds
        self.store: TTLStore[R] = TTLStore(self.tag.lower())

    def initialize_session(self, session_id: str) -> None:
        """Create an empty record, replacing any existing one"""
        started_at = timeutils.now_iso()
        self.store.put_for(
            session_id,
            self.record_type(session_id=session_id, started_at=started_at),
            self.ttl_seconds
        )
        logger.info(f"[{self.tag}] Session initialized - session_id: {session_id}, timestamp: {started_at}")

    def session_exists(self, session_id: str) -> bool:
        return self.store.exists(session_id)

    def clear_session(self, session_id: str) -> None:
        """Delete the record entirely"""
        self.store.delete(session_id)
        logger.info(f"[{self.tag}] Session cleared - session_id: {session_id}")

    def get_record(self, session_id: str) -> Optional[R]:
        record = self.store.get(session_id)
        return record.model_copy(deep=True) if record else None

    def _track(self, session_id: str, mutate: Callable[[R], None], what: str) -> Optional[R]:
        """
        Atomically append to a session record.

        `mutate` receives a private copy of the record and changes it in
        place; the copy replaces the stored record. The TTL is refreshed.
        """
        def apply(record: R) -> R:
            updated = record.model_copy(deep=True)
            mutate(updated)
            return updated

        expires_at = timeutils.utcnow() + timedelta(seconds=self.ttl_seconds)
        record = self.store.update(session_id, apply, expires_at=expires_at)
        if record is None:
            logger.warning(f"[{self.tag}] Session not found for {what} tracking - session_id: {session_id}")
        return record
