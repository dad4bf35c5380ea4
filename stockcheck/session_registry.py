"""
In-memory registry of server-hosted scan sessions.

Each entry is independent; sessions are dropped on submit, on "start over",
or once idle for longer than SCAN_SESSION_TTL_SECONDS. State does not
survive a process restart.
"""
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from .core.config import settings
from .error_handlers import ResourceNotFoundError
from .logging_config import get_logger
from .scan_session import progress_percent
from .schemas.scan_session import ScanSession, ScanSessionState

logger = get_logger("session_registry")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class HostedSession:
    """
    A scan session plus the godown context needed to report it.

    Endpoints run in a threadpool; hold `lock` around anything that reads
    and then mutates `session`.
    """

    def __init__(self, session: ScanSession, godown_id: int, godown_name: str, product_type: str):
        self.id = uuid.uuid4().hex
        self.session = session
        self.godown_id = godown_id
        self.godown_name = godown_name
        self.product_type = product_type
        self.lock = threading.Lock()
        self.closed = False
        self.last_activity = _now()

    def touch(self) -> None:
        self.last_activity = _now()

    def state(self) -> ScanSessionState:
        return ScanSessionState(
            id=self.id,
            godown_id=self.godown_id,
            godown_name=self.godown_name,
            product_type=self.product_type,
            progress_percent=progress_percent(self.session),
            **self.session.model_dump(),
        )


class SessionRegistry:
    def __init__(self, ttl_seconds: Optional[float] = None):
        self.ttl = timedelta(seconds=settings.scan_session_ttl_seconds if ttl_seconds is None else ttl_seconds)
        self._sessions: Dict[str, HostedSession] = {}
        self._lock = threading.Lock()

    def add(self, hosted: HostedSession) -> HostedSession:
        with self._lock:
            self._evict_idle()
            self._sessions[hosted.id] = hosted
        logger.info(f"[SESSION] Opened {hosted.id} godown={hosted.godown_name} type={hosted.product_type}")
        return hosted

    def get(self, session_id: str) -> HostedSession:
        with self._lock:
            self._evict_idle()
            hosted = self._sessions.get(session_id)
            if hosted is None:
                raise ResourceNotFoundError("Scan session", session_id)
            hosted.touch()
            return hosted

    def discard(self, session_id: str) -> Optional[HostedSession]:
        with self._lock:
            hosted = self._sessions.pop(session_id, None)
        if hosted is not None:
            logger.info(f"[SESSION] Closed {session_id}")
        return hosted

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def _evict_idle(self) -> None:
        cutoff = _now() - self.ttl
        idle = [sid for sid, h in self._sessions.items() if h.last_activity < cutoff]
        for sid in idle:
            del self._sessions[sid]
            logger.info(f"[SESSION] Evicted idle session {sid}")

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


registry = SessionRegistry()


def get_registry() -> SessionRegistry:
    """Dependency injection for FastAPI."""
    return registry
