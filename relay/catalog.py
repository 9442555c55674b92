"""
Read-only WooCommerce catalog client
"""

import logging
from typing import Optional

import requests

from relay.upstream import UpstreamResult
from relay.utils import get_http_session

logger = logging.getLogger(__name__)


class WooCommerceCatalog:
    """Looks up published products by SKU through the wc/v3 REST API."""

    def __init__(
        self,
        api_url: str,
        key: str,
        secret: str,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._key = key
        self._secret = secret
        self._timeout = timeout
        self._session = session

    @property
    def configured(self) -> bool:
        return bool(self._key and self._secret)

    def find_product_by_sku(self, sku: str) -> UpstreamResult[dict]:
        """Return the first published product for ``sku``; OK(None) when there is none."""
        if not self.configured:
            return UpstreamResult.not_configured()
        session = self._session or get_http_session()
        try:
            response = session.get(
                f"{self._api_url}/products",
                params={"sku": sku, "status": "publish"},
                auth=(self._key, self._secret),
                timeout=self._timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.Timeout:
            logger.warning("Catalog lookup for sku %s timed out", sku)
            return UpstreamResult.failed("timeout")
        except (requests.RequestException, ValueError) as e:
            logger.warning("Catalog lookup for sku %s failed: %s", sku, e)
            return UpstreamResult.failed(str(e))

        if not isinstance(data, list):
            logger.warning("Catalog returned %s instead of a list", type(data).__name__)
            return UpstreamResult.failed("unexpected payload")
        if not data or not isinstance(data[0], dict):
            return UpstreamResult.ok(None)
        return UpstreamResult.ok(data[0])
