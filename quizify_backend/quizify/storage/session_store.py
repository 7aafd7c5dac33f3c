import logging
import threading
import time
import uuid
from typing import Callable, List, Optional

from cachetools import TTLCache

from quizify.errors import SessionNotFoundError
from quizify.workflow.controller import QuizWorkflow

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL_SECONDS = 60 * 60
DEFAULT_MAX_SESSIONS = 1000


class WorkflowSessionStore:
    """
    In-memory registry of quiz workflows, one per browser session.

    Sessions share nothing with each other; the lock only protects the registry
    itself because sync endpoints run in a thread pool. Nothing is persisted.

    A session idle for longer than `ttl_seconds` expires, and once `max_sessions`
    are held the least recently used one is evicted. Either way it then behaves
    exactly like a deleted session.
    """

    # PUBLIC_INTERFACE
    def __init__(
        self,
        workflow_factory: Callable[[], QuizWorkflow],
        ttl_seconds: float = DEFAULT_SESSION_TTL_SECONDS,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Args:
            workflow_factory: Builds a fresh workflow wired to the service adapters.
            ttl_seconds: Idle time after which a session is dropped.
            max_sessions: Upper bound on live sessions.
            timer: Clock used for expiry; injectable for tests.
        """
        self._workflow_factory = workflow_factory
        self._sessions: TTLCache = TTLCache(maxsize=max_sessions, ttl=ttl_seconds, timer=timer)
        self._lock = threading.Lock()

    # PUBLIC_INTERFACE
    def create(self) -> str:
        """Start a new workflow in CONFIG and return its session id."""
        session_id = uuid.uuid4().hex
        workflow = self._workflow_factory()
        with self._lock:
            self._sessions[session_id] = workflow
            logger.debug("Created session %s (%d live)", session_id, len(self._sessions))
        return session_id

    # PUBLIC_INTERFACE
    def get(self, session_id: str) -> QuizWorkflow:
        """
        Return the session's workflow and restart its idle timer.

        Raises:
            SessionNotFoundError: if the id is unknown, deleted, expired or evicted.
        """
        with self._lock:
            workflow = self._sessions.get(session_id)
            if workflow is not None:
                # Re-inserting resets the expiry.
                self._sessions[session_id] = workflow
        if workflow is None:
            raise SessionNotFoundError(session_id)
        return workflow

    # PUBLIC_INTERFACE
    def delete(self, session_id: str) -> None:
        with self._lock:
            removed: Optional[QuizWorkflow] = self._sessions.pop(session_id, None)
        if removed is None:
            raise SessionNotFoundError(session_id)

    # PUBLIC_INTERFACE
    def list_ids(self) -> List[str]:
        with self._lock:
            self._sessions.expire()
            return list(self._sessions)
