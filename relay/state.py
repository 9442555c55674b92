"""Shared application state (injected into routes)."""
import threading
import time
from dataclasses import dataclass
from typing import Mapping, Optional

from fastapi import Request

from relay.cache import TokenStore
from relay.catalog import WooCommerceCatalog
from relay.config import Settings, load_sku_map
from relay.livepush import LivepushDirectory


@dataclass(frozen=True)
class NowPlayingState:
    artist_id: Optional[str] = None
    artist_name: Optional[str] = None
    updated_at: float = 0.0

    def to_dict(self) -> dict:
        return {
            "artist_id": self.artist_id,
            "artist_name": self.artist_name,
            "ts": int(self.updated_at * 1000),
        }


@dataclass(frozen=True)
class ShortLink:
    """Payload behind a short token."""
    product_id: int
    artist_id: str


class NowPlayingBoard:
    """Holds the current now-playing state; updates replace it whole."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = NowPlayingState()

    def current(self) -> NowPlayingState:
        with self._lock:
            return self._state

    def update(self, artist_id: str, artist_name: Optional[str] = None) -> NowPlayingState:
        state = NowPlayingState(
            artist_id=artist_id,
            artist_name=artist_name or artist_id,
            updated_at=time.time(),
        )
        with self._lock:
            self._state = state
        return state


class AppState:
    def __init__(
        self,
        settings: Settings,
        *,
        sku_map: Optional[Mapping[str, str]] = None,
        store: Optional[TokenStore[ShortLink]] = None,
        catalog=None,
        directory=None,
    ) -> None:
        self.settings = settings
        self.now_playing = NowPlayingBoard()
        self.sku_map: Mapping[str, str] = (
            sku_map if sku_map is not None else load_sku_map(settings.sku_map_path)
        )
        self.store: TokenStore[ShortLink] = store if store is not None else TokenStore(
            ttl_seconds=settings.short_token_ttl_sec,
            maxsize=settings.token_store_maxsize,
        )
        self.catalog = catalog if catalog is not None else WooCommerceCatalog(
            settings.wc_api_url,
            settings.wc_key,
            settings.wc_secret,
            timeout=settings.http_timeout_sec,
        )
        self.directory = directory if directory is not None else LivepushDirectory(
            settings.livepush_api_base,
            settings.livepush_api_token,
            timeout=settings.http_timeout_sec,
        )

    def public_base_url(self, request: Request) -> str:
        if self.settings.public_base_url:
            return self.settings.public_base_url
        return str(request.base_url).rstrip("/")


def get_state(request: Request) -> AppState:
    return request.app.state.relay
