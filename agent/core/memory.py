"""Server-side session memory.

Game progress is kept in process, keyed by the opaque session id carried in
the signed session cookie. Each session id has its own lock so that two
requests from the same player run one after the other; different sessions
never wait on each other. Entries idle for longer than the TTL are dropped.
"""
from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from functools import lru_cache
from typing import Any, Dict, Iterator, List, Optional, Tuple

from config.settings import get_settings


class _SessionLock:
    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.holders = 0


class SessionMemory:
    def __init__(self, ttl_seconds: float = 86400.0) -> None:
        self.ttl_seconds = ttl_seconds
        self._records: Dict[str, Tuple[float, Dict[str, Any]]] = {}
        self._locks: Dict[str, _SessionLock] = {}
        self._guard = threading.Lock()

    @contextmanager
    def locked(self, session_id: str) -> Iterator[None]:
        # holders counts requests waiting on or holding the lock; the entry
        # is only dropped once nobody references it
        with self._guard:
            entry = self._locks.get(session_id)
            if entry is None:
                entry = self._locks[session_id] = _SessionLock()
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.holders -= 1
                if entry.holders == 0 and session_id not in self._records:
                    self._locks.pop(session_id, None)

    def load(self, session_id: str) -> Optional[Dict[str, Any]]:
        with self._guard:
            item = self._records.get(session_id)
        if item is None:
            return None
        return dict(item[1])

    def save(self, session_id: str, record: Dict[str, Any]) -> None:
        with self._guard:
            self._records[session_id] = (time.monotonic(), dict(record))

    def touch(self, session_id: str) -> bool:
        """Mark a session as active without changing its record."""
        with self._guard:
            item = self._records.get(session_id)
            if item is None:
                return False
            self._records[session_id] = (time.monotonic(), item[1])
            return True

    def clear(self, session_id: str) -> None:
        with self._guard:
            self._records.pop(session_id, None)
            entry = self._locks.get(session_id)
            if entry is not None and entry.holders == 0:
                del self._locks[session_id]

    def purge_expired(self, now: Optional[float] = None) -> int:
        now = time.monotonic() if now is None else now
        with self._guard:
            expired = [
                sid for sid, (touched, _) in self._records.items()
                if now - touched > self.ttl_seconds
            ]
            for sid in expired:
                del self._records[sid]
                entry = self._locks.get(sid)
                if entry is not None and entry.holders == 0:
                    del self._locks[sid]
        return len(expired)

    def session_ids(self) -> List[str]:
        with self._guard:
            return list(self._records)

    def lock_count(self) -> int:
        with self._guard:
            return len(self._locks)

    def __len__(self) -> int:
        with self._guard:
            return len(self._records)


@lru_cache(maxsize=1)
def get_memory() -> SessionMemory:
    return SessionMemory(ttl_seconds=get_settings().session_ttl_seconds)
