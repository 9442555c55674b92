"""
Livepush live-stream directory client
"""

import logging
from typing import Any, List, Optional

import requests

from relay.upstream import UpstreamResult
from relay.utils import get_http_session

logger = logging.getLogger(__name__)


class LivepushDirectory:
    """Lists the account's live streams. Without a token there is nothing to ask."""

    def __init__(
        self,
        api_base: str,
        token: str,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._api_base = api_base.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._session = session

    @property
    def configured(self) -> bool:
        return bool(self._token)

    def list_live_streams(self) -> UpstreamResult[List[Any]]:
        if not self.configured:
            return UpstreamResult.not_configured()
        session = self._session or get_http_session()
        try:
            response = session.get(
                f"{self._api_base}/streams",
                headers={"Authorization": f"Bearer {self._token}"},
                timeout=self._timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.Timeout:
            logger.warning("Livepush stream lookup timed out")
            return UpstreamResult.failed("timeout")
        except (requests.RequestException, ValueError) as e:
            logger.warning("Livepush stream lookup failed: %s", e)
            return UpstreamResult.failed(str(e))

        if not isinstance(data, list):
            logger.warning("Livepush returned %s instead of a list", type(data).__name__)
            return UpstreamResult.failed("unexpected payload")
        return UpstreamResult.ok(data)
