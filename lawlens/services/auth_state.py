"""
Admin Auth State
Session and login-attempt storage behind a common interface
"""

import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Dict, Optional, Iterator

from lawlens.schemas.auth import AdminSession, RateLimitEntry
from lawlens.core.logging import logger


class AuthStateStore(ABC):
    """
    Storage for admin sessions (by session id) and login attempts (by client IP).
    Callers wrap read-modify-write sequences in `locked()`.
    """

    @abstractmethod
    def locked(self):
        """Context manager holding the store lock"""

    @abstractmethod
    def get_session(self, session_id: str) -> Optional[AdminSession]:
        ...

    @abstractmethod
    def save_session(self, session: AdminSession) -> None:
        ...

    @abstractmethod
    def delete_session(self, session_id: str) -> None:
        ...

    @abstractmethod
    def list_sessions(self) -> Dict[str, AdminSession]:
        ...

    @abstractmethod
    def get_attempts(self, ip: str) -> Optional[RateLimitEntry]:
        ...

    @abstractmethod
    def save_attempts(self, ip: str, entry: RateLimitEntry) -> None:
        ...

    @abstractmethod
    def delete_attempts(self, ip: str) -> None:
        ...

    @abstractmethod
    def list_attempts(self) -> Dict[str, RateLimitEntry]:
        ...


class MemoryAuthStateStore(AuthStateStore):
    """Process-local state; sync endpoints run on a thread pool, hence the RLock"""

    def __init__(self):
        self._lock = threading.RLock()
        self._sessions: Dict[str, AdminSession] = {}
        self._attempts: Dict[str, RateLimitEntry] = {}

    @contextmanager
    def locked(self) -> Iterator[None]:
        with self._lock:
            yield

    def get_session(self, session_id):
        with self._lock:
            return self._sessions.get(session_id)

    def save_session(self, session):
        with self._lock:
            self._sessions[session.session_id] = session

    def delete_session(self, session_id):
        with self._lock:
            self._sessions.pop(session_id, None)

    def list_sessions(self):
        with self._lock:
            return dict(self._sessions)

    def get_attempts(self, ip):
        with self._lock:
            return self._attempts.get(ip)

    def save_attempts(self, ip, entry):
        with self._lock:
            self._attempts[ip] = entry

    def delete_attempts(self, ip):
        with self._lock:
            self._attempts.pop(ip, None)

    def list_attempts(self):
        with self._lock:
            return dict(self._attempts)


class RedisAuthStateStore(AuthStateStore):
    """State shared between instances through two Redis hashes"""

    SESSIONS_KEY = "lawlens:admin_sessions"
    ATTEMPTS_KEY = "lawlens:login_attempts"
    LOCK_KEY = "lawlens:auth_state_lock"

    def __init__(self, client, lock_timeout: int = 10):
        self.client = client
        self.lock_timeout = lock_timeout
        self._local = threading.local()

    @contextmanager
    def locked(self) -> Iterator[None]:
        # redis-py locks are not reentrant; nested calls reuse the held lock
        depth = getattr(self._local, "depth", 0)
        if depth:
            self._local.depth = depth + 1
            try:
                yield
            finally:
                self._local.depth -= 1
            return

        lock = self.client.lock(self.LOCK_KEY, timeout=self.lock_timeout, blocking_timeout=self.lock_timeout)
        with lock:
            self._local.depth = 1
            try:
                yield
            finally:
                self._local.depth = 0

    def get_session(self, session_id):
        raw = self.client.hget(self.SESSIONS_KEY, session_id)
        return AdminSession.model_validate_json(raw) if raw else None

    def save_session(self, session):
        self.client.hset(self.SESSIONS_KEY, session.session_id, session.model_dump_json())

    def delete_session(self, session_id):
        self.client.hdel(self.SESSIONS_KEY, session_id)

    def list_sessions(self):
        return {
            key: AdminSession.model_validate_json(raw)
            for key, raw in self.client.hgetall(self.SESSIONS_KEY).items()
        }

    def get_attempts(self, ip):
        raw = self.client.hget(self.ATTEMPTS_KEY, ip)
        return RateLimitEntry.model_validate_json(raw) if raw else None

    def save_attempts(self, ip, entry):
        self.client.hset(self.ATTEMPTS_KEY, ip, entry.model_dump_json())

    def delete_attempts(self, ip):
        self.client.hdel(self.ATTEMPTS_KEY, ip)

    def list_attempts(self):
        return {
            key: RateLimitEntry.model_validate_json(raw)
            for key, raw in self.client.hgetall(self.ATTEMPTS_KEY).items()
        }


def build_auth_state_store(backend: str) -> AuthStateStore:
    """Store for the configured backend (memory | redis)"""
    if backend == "redis":
        from lawlens.config.redis import get_redis
        logger.info("Admin auth state stored in Redis")
        return RedisAuthStateStore(get_redis())
    if backend != "memory":
        logger.warning(f"Unknown AUTH_STATE_BACKEND '{backend}', using in-memory auth state")
    return MemoryAuthStateStore()
