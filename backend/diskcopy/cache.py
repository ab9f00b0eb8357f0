"""In-memory TTL cache for Azure lookups that rarely change.

Only read-only metadata (subscription enumeration) goes through here; anything
the orchestrator mutates, such as resource groups, is always fetched fresh.
FastAPI runs sync endpoints in a threadpool, so the store is guarded by a lock.
"""
from __future__ import annotations

import functools
import os
import threading
import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple, TypeVar

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 300


def _now() -> float:
    return time.monotonic()


def current_ttl() -> int:
    """TTL from CACHE_TTL_SECONDS, read on every call so it can change at runtime."""
    raw = os.getenv("CACHE_TTL_SECONDS")
    if raw:
        try:
            return max(0, int(raw))
        except ValueError:
            pass
    return DEFAULT_TTL_SECONDS


class TTLStore:
    """Expiring key/value store shared by every cached function."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: Dict[Hashable, Tuple[float, Any]] = {}

    def get(self, key: Hashable) -> Tuple[bool, Any]:
        with self._lock:
            record = self._entries.get(key)
            if record is None:
                return False, None
            expires_at, value = record
            if expires_at <= _now():
                del self._entries[key]
                return False, None
            return True, value

    def put(self, key: Hashable, value: Any, ttl: int) -> None:
        if ttl <= 0:
            return
        with self._lock:
            self._entries[key] = (_now() + ttl, value)

    def drop(self, owner: str) -> None:
        with self._lock:
            for key in [k for k in self._entries if k[0] == owner]:
                del self._entries[key]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


_store = TTLStore()


def ttl_cache(ttl_seconds: Optional[int] = None):
    """Cache results per argument tuple.

    With no explicit ttl_seconds the TTL follows CACHE_TTL_SECONDS (default 5
    minutes); a TTL of 0 disables caching. The wrapped function gets an
    ``invalidate()`` attribute dropping only its own entries.
    """

    def decorator(fn: Callable[..., T]) -> Callable[..., T]:
        owner = f"{fn.__module__}.{fn.__qualname__}"

        @functools.wraps(fn)
        def inner(*args, **kwargs):
            key = (owner, args, tuple(sorted(kwargs.items())))
            hit, value = _store.get(key)
            if hit:
                return value
            value = fn(*args, **kwargs)
            _store.put(key, value, ttl_seconds if ttl_seconds is not None else current_ttl())
            return value

        inner.invalidate = lambda: _store.drop(owner)  # type: ignore[attr-defined]
        return inner

    return decorator


def clear_all_cache() -> None:
    _store.clear()
