"""Per-client session map for the HTTP API, bounded by least-recent use."""

from collections import OrderedDict
from collections.abc import Callable

from formulab.session import FormulationSession
from formulab.utils.logger import get_logger

logger = get_logger("formulab.api.sessions")


class SessionRegistry:
    """Sessions keyed by the session header value.

    Holds at most ``max_sessions`` entries; when full, the least recently used
    idle sessions are dropped. A session with a generation in flight is never
    evicted, so the map can exceed the bound only while that many are loading.
    """

    def __init__(self, factory: Callable[[str], FormulationSession], max_sessions: int = 1000):
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self._factory = factory
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[str, FormulationSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def items(self):
        return self._sessions.items()

    def get_or_create(self, session_id: str) -> FormulationSession:
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
            return session
        session = self._factory(session_id)
        self._sessions[session_id] = session
        logger.debug("api.session.created", session_id=session_id)
        self._evict(keep=session_id)
        return session

    def _evict(self, keep: str) -> None:
        excess = len(self._sessions) - self.max_sessions
        if excess <= 0:
            return
        idle = [sid for sid, s in self._sessions.items() if sid != keep and not s.is_loading]
        for sid in idle[:excess]:
            del self._sessions[sid]
            logger.info("api.session.evicted", session_id=sid)
