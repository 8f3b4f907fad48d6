from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

import httpx

from ...domain.constants import PARTNER_CENTER_API_BASE_URL
from ...domain.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


class PartnerCenter:
    """
    Minimal Partner Center REST client bound to one access token.

    - sends the bearer token plus MS-RequestId / MS-CorrelationId headers
    - raises UnauthorizedError on 401, httpx.HTTPStatusError on other errors
    - never refreshes the token itself

    Resource operations (customers, orders, ...) are built on top of
    `request` / `get` / `post`.
    """

    def __init__(
        self,
        access_token: str,
        *,
        base_url: str = PARTNER_CENTER_API_BASE_URL,
        timeout: float = 30.0,
        verify: bool = True,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._access_token = access_token
        self._base_url = base_url.rstrip("/") + "/"
        self._client = client or httpx.Client(verify=verify, timeout=timeout)
        self._correlation_id = str(uuid.uuid4())

    @property
    def access_token(self) -> str:
        return self._access_token

    @property
    def correlation_id(self) -> str:
        return self._correlation_id

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "PartnerCenter":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------ #
    # request plumbing
    # ------------------------------------------------------------------ #

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._access_token}",
            "Accept": "application/json",
            "MS-RequestId": str(uuid.uuid4()),
            "MS-CorrelationId": self._correlation_id,
        }

    def _url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return self._base_url + path.lstrip("/")

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        """
        Send a request and return the decoded JSON body (None when empty).

        Raises:
            UnauthorizedError on 401
            httpx.HTTPStatusError on any other non-2xx response
        """
        url = self._url(path)
        resp = self._client.request(
            method,
            url,
            headers=self._headers(),
            params=params,
            json=json,
        )
        if resp.status_code == 401:
            logger.debug("Partner Center rejected token for %s %s", method, url)
            raise UnauthorizedError(f"Unauthorized: {method} {url}")
        resp.raise_for_status()

        if not resp.content:
            return None
        # Partner Center prefixes some bodies with a UTF-8 BOM; json.loads on bytes copes
        return resp.json()

    def get(self, path: str, *, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, *, json: Optional[Any] = None, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("POST", path, params=params, json=json)

    def put(self, path: str, *, json: Optional[Any] = None) -> Any:
        return self.request("PUT", path, json=json)

    def patch(self, path: str, *, json: Optional[Any] = None) -> Any:
        return self.request("PATCH", path, json=json)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    # ------------------------------------------------------------------ #
    # profile
    # ------------------------------------------------------------------ #

    def get_organization_profile(self) -> dict[str, Any]:
        return self.get("profiles/organization") or {}
