"""Test session lifecycle service"""

import logging
import uuid
from datetime import timedelta
from typing import Any, Dict, List, Mapping, Optional
from ..models.session import TestSession, SessionState
from ..storage.ttl_store import TTLStore
from ..core.config import settings
from ..utils import timeutils

logger = logging.getLogger(__name__)

SESSION_PREFIX = "maestro_session_"
SESSION_HEADER = "X-Test-Session-ID"
SESSION_PARAM = "test_session_id"


def extract_session_id(
    headers: Mapping[str, str],
    query_params: Mapping[str, str],
    cookies: Optional[Mapping[str, str]] = None
) -> Optional[str]:
    """
    Extract a test session id from request parts.

    Priority: header, then query parameter, then cookie (only when cookies
    are supplied).
    """
    session_id = headers.get(SESSION_HEADER)
    if session_id:
        return session_id

    session_id = query_params.get(SESSION_PARAM)
    if session_id:
        return session_id

    if cookies is not None:
        session_id = cookies.get(SESSION_PARAM)
        if session_id:
            return session_id

    return None


class TestSessionService:
    """Manages test session lifecycle"""
    __test__ = False  # not a pytest test class

    def __init__(self, store: Optional[TTLStore[TestSession]] = None):
        self.store: TTLStore[TestSession] = store or TTLStore("test_session")

    def create_session(self, scenario: str, metadata: Optional[Dict[str, Any]] = None) -> TestSession:
        """
        Create a new test session.

        Args:
            scenario: Scenario name to bind to the session
            metadata: Free-form metadata from the test runner

        Returns:
            The stored session
        """
        if settings.auto_cleanup_enabled:
            purged = self.store.purge_expired()
            if purged:
                logger.info(f"Purged {purged} expired test sessions")

        active = self.store.count()
        if active >= settings.max_concurrent_sessions:
            logger.warning(
                f"Active test sessions ({active}) reached the advisory limit "
                f"of {settings.max_concurrent_sessions}"
            )

        session_id = f"{SESSION_PREFIX}{uuid.uuid4()}"
        created_at = timeutils.utcnow()
        expires_at = created_at + timedelta(seconds=settings.session_ttl_seconds)

        session = TestSession(
            session_id=session_id,
            scenario=scenario,
            created_at=created_at,
            expires_at=expires_at,
            metadata=metadata or {},
            state=SessionState()
        )

        self.store.put(session_id, session, expires_at)
        logger.info(f"Test session {session_id} created for scenario '{scenario}'")

        return session.model_copy(deep=True)

    def get_session(self, session_id: str) -> Optional[TestSession]:
        """Get a live session, or None if missing or expired"""
        session = self.store.get(session_id)
        if session is None:
            return None

        if session.expires_at <= timeutils.utcnow():
            self.destroy_session(session_id)
            return None

        return session.model_copy(deep=True)

    def switch_scenario(self, session_id: str, scenario: str) -> Optional[TestSession]:
        """
        Switch the scenario of a session.

        The original expiry is kept; switching never extends the session.
        """
        def mutate(session: TestSession) -> TestSession:
            updated = session.model_copy(deep=True)
            updated.scenario = scenario
            updated.state.last_request_at = timeutils.utcnow()
            return updated

        session = self.store.update(session_id, mutate)
        if session is None:
            return None

        logger.info(f"Test session {session_id} switched to scenario '{scenario}'")
        return session.model_copy(deep=True)

    def increment_request_count(self, session_id: str) -> None:
        """Bump the request counter; silently ignored for unknown sessions"""
        def mutate(session: TestSession) -> TestSession:
            updated = session.model_copy(deep=True)
            updated.state.request_count += 1
            updated.state.last_request_at = timeutils.utcnow()
            return updated

        self.store.update(session_id, mutate)

    def update_session_data(self, session_id: str, custom_data: Dict[str, Any]) -> Optional[TestSession]:
        """Merge custom data into the session state"""
        def mutate(session: TestSession) -> TestSession:
            updated = session.model_copy(deep=True)
            updated.state.custom_data = {**updated.state.custom_data, **custom_data}
            return updated

        session = self.store.update(session_id, mutate)
        return session.model_copy(deep=True) if session else None

    def destroy_session(self, session_id: str) -> bool:
        """Destroy a session; True if one existed"""
        destroyed = self.store.delete(session_id)
        if destroyed:
            logger.info(f"Test session {session_id} destroyed")
        return destroyed

    def get_all_sessions(self) -> List[TestSession]:
        """All live sessions (diagnostics only)"""
        return [session.model_copy(deep=True) for session in self.store.values()]

    def cleanup_expired(self) -> int:
        """Remove expired sessions"""
        return self.store.purge_expired()


# Singleton instance
_session_service = TestSessionService()


def get_session_service() -> TestSessionService:
    """Get the session service instance"""
    return _session_service
