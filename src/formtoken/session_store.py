"""
Session-scoped key/value stores.

A store is bound to ONE session identity. The TokenRegistry only needs
get/set plus a lock serializing read-modify-write on a key.
"""
import json
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, ContextManager, Dict, Iterator, Optional
import redis

class SessionStore(ABC):
    """
    Abstract Base Class for session storage.
    """
    def __init__(self, session_id: str):
        if not session_id:
            raise ValueError("session_id is required")
        self.session_id = session_id

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        pass

    @abstractmethod
    def set(self, key: str, value: Any):
        pass

    @abstractmethod
    def delete(self, key: str):
        pass

    @abstractmethod
    def lock(self, key: str) -> ContextManager:
        """
        Serializes access to `key` within this session.
        """
        pass

class SessionBackend(dict):
    """
    Process-local session data: {session_id: {key: value}}.
    Also owns the per-session locks, so ending a session releases them.
    """
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.locks: Dict[str, Dict[str, threading.Lock]] = {}
        self._locks_guard = threading.Lock()

    def lock_for(self, session_id: str, key: str) -> threading.Lock:
        with self._locks_guard:
            return self.locks.setdefault(session_id, {}).setdefault(key, threading.Lock())

    def end_session(self, session_id: str):
        with self._locks_guard:
            self.locks.pop(session_id, None)
        self.pop(session_id, None)

class InMemorySessionStore(SessionStore):
    """
    Store over a SessionBackend shared by every store of the process (or test).
    Values are held by reference, so nested mutations are visible to later reads.
    """
    _default_backend = SessionBackend()

    def __init__(self, session_id: str, backend: Optional[SessionBackend] = None):
        super().__init__(session_id)
        self.backend = self._default_backend if backend is None else backend

    def get(self, key: str, default: Any = None) -> Any:
        return self.backend.get(self.session_id, {}).get(key, default)

    def set(self, key: str, value: Any):
        self.backend.setdefault(self.session_id, {})[key] = value

    def delete(self, key: str):
        self.backend.get(self.session_id, {}).pop(key, None)

    @contextmanager
    def lock(self, key: str) -> Iterator[None]:
        with self.backend.lock_for(self.session_id, key):
            yield

    def clear(self):
        """Ends the session: drops every key it holds and its locks."""
        self.backend.end_session(self.session_id)

class RedisSessionStore(SessionStore):
    """
    Redis-backed store. Each key is a JSON document under session:<id>:<key>.
    JSON objects keep insertion order, which FIFO eviction relies on.
    """
    def __init__(self, session_id: str, redis_url: str = "redis://localhost:6379/0",
                 client: Optional[redis.Redis] = None, ttl: Optional[int] = None,
                 lock_timeout: float = 5.0):
        super().__init__(session_id)
        self.redis = client if client is not None else redis.from_url(redis_url, decode_responses=True)
        self.ttl = ttl
        self.lock_timeout = lock_timeout
        self.PREFIX = f"session:{session_id}"

    def _key(self, key: str) -> str:
        return f"{self.PREFIX}:{key}"

    def get(self, key: str, default: Any = None) -> Any:
        raw = self.redis.get(self._key(key))
        if raw is None:
            return default
        return json.loads(raw)

    def set(self, key: str, value: Any):
        self.redis.set(self._key(key), json.dumps(value), ex=self.ttl)

    def delete(self, key: str):
        self.redis.delete(self._key(key))

    @contextmanager
    def lock(self, key: str) -> Iterator[None]:
        with self.redis.lock(f"{self._key(key)}:lock", timeout=self.lock_timeout):
            yield

