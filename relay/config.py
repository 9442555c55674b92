"""
Configuration for the stream offer relay
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from dotenv import load_dotenv

load_dotenv(os.path.join(os.getcwd(), ".env"))

logger = logging.getLogger(__name__)


class Config:
    """Application configuration"""

    # API settings
    TITLE = "Stream Offer Relay"
    DESCRIPTION = "Now-playing relay between the live stream and the shop"
    VERSION = "2.1.0"
    DOCS_URL = "/docs"
    REDOC_URL = "/redoc"

    # CORS settings
    ALLOW_ORIGINS = ["*"]
    ALLOW_CREDENTIALS = False
    ALLOW_METHODS = ["*"]
    ALLOW_HEADERS = ["*"]

    # Server settings
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "8080"))
    RELOAD = os.getenv("RELOAD", "0").lower() in ("1", "true", "yes")


def _env_int(name: str, default: int) -> int:
    """Positive int from env, falling back to default on junk."""
    try:
        value = int(os.getenv(name, ""))
    except ValueError:
        return default
    return value if value > 0 else default


def _env_float(name: str, default: float) -> float:
    try:
        value = float(os.getenv(name, ""))
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class Settings:
    """Runtime settings, read once at startup."""

    shop_base: str = "https://subamerica.net/shop"
    wc_api_url: str = "https://subamerica.net/wp-json/wc/v3"
    wc_key: str = ""
    wc_secret: str = ""
    livepush_api_token: str = ""
    livepush_api_base: str = "https://dev.livepush.io/api/v1"
    short_token_ttl_sec: int = 1800
    offer_ttl_sec: int = 25
    currency: str = "USD"
    sku_map_path: str = "sku_map.json"
    http_timeout_sec: float = 5.0
    sweep_interval_sec: float = 60.0
    token_store_maxsize: int = 10000
    public_base_url: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            shop_base=os.getenv("SHOP_BASE", cls.shop_base).rstrip("/"),
            wc_api_url=os.getenv("WC_API_URL", cls.wc_api_url).rstrip("/"),
            wc_key=os.getenv("WC_KEY", ""),
            wc_secret=os.getenv("WC_SECRET", ""),
            livepush_api_token=os.getenv("LIVEPUSH_API_TOKEN", ""),
            livepush_api_base=os.getenv("LIVEPUSH_API_BASE", cls.livepush_api_base).rstrip("/"),
            short_token_ttl_sec=_env_int("SHORT_TOKEN_TTL_SEC", cls.short_token_ttl_sec),
            offer_ttl_sec=_env_int("OFFER_TTL_SEC", cls.offer_ttl_sec),
            currency=os.getenv("CURRENCY", cls.currency),
            sku_map_path=os.getenv("SKU_MAP_PATH", cls.sku_map_path),
            http_timeout_sec=_env_float("HTTP_TIMEOUT_SEC", cls.http_timeout_sec),
            sweep_interval_sec=_env_float("SWEEP_INTERVAL_SEC", cls.sweep_interval_sec),
            token_store_maxsize=_env_int("TOKEN_STORE_MAXSIZE", cls.token_store_maxsize),
            public_base_url=(os.getenv("PUBLIC_BASE_URL") or "").rstrip("/") or None,
        )


def load_sku_map(path: str) -> Mapping[str, str]:
    """Load the artist_id -> SKU mapping. Missing or broken file means no offers."""
    p = Path(path)
    if not p.exists():
        logger.warning("SKU map %s not found; no offers will be shown", p)
        return MappingProxyType({})
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("SKU map %s unreadable: %s", p, e)
        return MappingProxyType({})
    if not isinstance(data, dict):
        logger.warning("SKU map %s is not an object", p)
        return MappingProxyType({})
    return MappingProxyType({str(k): str(v) for k, v in data.items() if v})
