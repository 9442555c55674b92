"""Tiny in-process token store with TTL eviction.

Holds the short purchase tokens minted for offers. Entries live for a fixed
TTL after insertion; everything resets when the process restarts.
"""

from __future__ import annotations

import logging
import secrets
import threading
import time
from dataclasses import dataclass
from threading import RLock
from typing import Callable, Dict, Generic, Hashable, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)

TOKEN_BYTES = 5


@dataclass(frozen=True)
class _Entry(Generic[T]):
    created_at: float
    value: T


class TokenStore(Generic[T]):
    def __init__(
        self,
        ttl_seconds: float,
        maxsize: int = 10000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._ttl = float(ttl_seconds)
        self._maxsize = int(maxsize)
        self._clock = clock
        self._lock = RLock()
        self._data: Dict[Hashable, _Entry[T]] = {}

    @property
    def ttl(self) -> float:
        return self._ttl

    def _expired(self, entry: _Entry[T], now: float) -> bool:
        return now - entry.created_at >= self._ttl

    def get(self, key: Hashable) -> Optional[T]:
        now = self._clock()
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            # the sweeper may not have run yet
            if self._expired(entry, now):
                self._data.pop(key, None)
                return None
            return entry.value

    def put(self, key: Hashable, value: T) -> None:
        now = self._clock()
        with self._lock:
            if key not in self._data and len(self._data) >= self._maxsize:
                self._purge(now)
                # simple size cap, oldest first
                while len(self._data) >= self._maxsize:
                    self._data.pop(next(iter(self._data)))
            self._data.pop(key, None)
            self._data[key] = _Entry(created_at=now, value=value)

    def mint(self, value: T) -> str:
        """Store value under a fresh random token and return the token."""
        with self._lock:
            token = secrets.token_hex(TOKEN_BYTES)
            while token in self._data:
                token = secrets.token_hex(TOKEN_BYTES)
            self.put(token, value)
        return token

    def sweep(self) -> int:
        """Drop every expired entry. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            return self._purge(now)

    def _purge(self, now: float) -> int:
        expired_keys = [k for k, v in self._data.items() if self._expired(v, now)]
        for k in expired_keys:
            self._data.pop(k, None)
        return len(expired_keys)

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class TokenSweeper:
    """Background thread calling ``store.sweep()`` on a fixed interval."""

    def __init__(self, store: TokenStore, interval_sec: float) -> None:
        self._store = store
        self._interval = interval_sec
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def _loop(self) -> None:
        while not self._stop.wait(timeout=self._interval):
            try:
                removed = self._store.sweep()
            except Exception as e:
                logger.warning("Token sweep failed: %s", e)
                continue
            if removed:
                logger.debug("Swept %d expired tokens", removed)

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="token-sweeper", daemon=True)
        self._thread.start()
        logger.info("Token sweeper started (interval %.1fs)", self._interval)

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None
