"""Utility functions for the stream offer relay."""

from __future__ import annotations

import re
from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


_HTTP_SESSION: requests.Session | None = None

_TAG_RE = re.compile(r"<[^>]*>")

DESCRIPTION_MAX_CHARS = 160

_CURRENCY_SYMBOLS = {
    "USD": "$",
    "CAD": "CA$",
    "AUD": "A$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}


def get_http_session() -> requests.Session:
    """Shared requests session with connection pooling.

    Only failed connects are retried; reads get a single attempt so the
    per-call timeout bounds the request.
    """
    global _HTTP_SESSION
    if _HTTP_SESSION is not None:
        return _HTTP_SESSION

    session = requests.Session()
    retry = Retry(
        total=1,
        connect=1,
        read=0,
        status=0,
        backoff_factor=0,
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(pool_connections=20, pool_maxsize=20, max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    _HTTP_SESSION = session
    return session


def parse_price(value: Any) -> float:
    """Parse a catalog price string; anything unparsable counts as 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(str(value).strip())
    except ValueError:
        return 0.0
    if amount != amount or amount in (float("inf"), float("-inf")):
        return 0.0
    return amount


def format_price(amount: float, currency: str) -> str:
    """Format an amount like ``$19.99``; unknown currencies get a code suffix."""
    symbol = _CURRENCY_SYMBOLS.get((currency or "").upper())
    if symbol is None:
        return f"{amount:,.2f} {currency}".strip()
    if currency.upper() == "JPY":
        return f"{symbol}{amount:,.0f}"
    return f"{symbol}{amount:,.2f}"


def strip_html(text: Optional[str], limit: int = DESCRIPTION_MAX_CHARS) -> str:
    """Drop HTML tags and cut to ``limit`` characters"""
    return _TAG_RE.sub("", text or "")[:limit]
