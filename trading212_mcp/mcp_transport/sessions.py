"""Session table for the streamable HTTP transport."""

import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable

import structlog

from .service import DispatchContext


logger = structlog.get_logger(__name__)


@dataclass
class Session:
    """One MCP client session and its protocol endpoint."""

    session_id: str
    context: DispatchContext
    created_at: float = field(default_factory=time.time)
    is_open: bool = True


class SessionManager:
    """Maps session ids to live sessions.

    Ids are random UUIDs issued on initialize; a closed session is removed
    from the table and its id is never reused.
    """

    def __init__(self):
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def create(self, factory: Callable[[], DispatchContext]) -> Session:
        session_id = str(uuid.uuid4())
        context = factory()
        context.session_id = session_id
        session = Session(session_id=session_id, context=context)
        with self._lock:
            self._sessions[session_id] = session
        logger.info("mcp_session_created", session_id=session_id)
        return session

    def get(self, session_id: str) -> Session | None:
        with self._lock:
            return self._sessions.get(session_id)

    def close(self, session_id: str) -> bool:
        """Close and forget a session. Returns False if it was unknown."""
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.is_open = False
        logger.info(
            "mcp_session_closed",
            session_id=session_id,
            lifetime_s=round(time.time() - session.created_at, 3),
        )
        return True

    def close_all(self) -> None:
        with self._lock:
            session_ids = list(self._sessions)
        for session_id in session_ids:
            self.close(session_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions
