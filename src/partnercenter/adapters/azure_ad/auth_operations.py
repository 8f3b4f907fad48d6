from __future__ import annotations

import logging
import time
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

import requests
from requests import Session

from ...domain.entities import AccessGrant
from ...domain.exceptions import AuthExchangeFailedError
from ...domain.ports import AuthOperations, Clock
from ...domain.value_objects import ServiceProviderConfig

logger = logging.getLogger(__name__)


class AzureADAuthOperations(AuthOperations):
    """
    Adapter implementing the AuthOperations port against Azure AD (v1
    endpoints, tenant scoped).

    Infrastructure layer:
    - Knows the authorize / token endpoint shapes.
    - Knows how to turn a token response into an AccessGrant.

    Every exchange is a single blocking POST. There is no retry here.
    """

    def __init__(
        self,
        config: ServiceProviderConfig,
        session: Optional[Session] = None,
        clock: Clock = time.time,
    ) -> None:
        self._config = config
        self._session = session or Session()
        self._clock = clock

    @property
    def config(self) -> ServiceProviderConfig:
        return self._config

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    def build_authorize_url(
        self,
        redirect_uri: str,
        state: Optional[str] = None,
        **params: str,
    ) -> str:
        """
        URL the user agent is sent to for the authorization-code flow.
        """
        query: Dict[str, str] = {
            "client_id": self._config.client_id,
            "response_type": "code",
            "redirect_uri": redirect_uri,
            "resource": self._config.resource,
        }
        if state:
            query["state"] = state
        query.update(params)
        return f"{self._config.authorize_url}?{urlencode(query)}"

    def exchange_for_access(
        self,
        authorization_code: str,
        redirect_uri: str,
        additional_parameters: Optional[Mapping[str, str]] = None,
    ) -> AccessGrant:
        data = {
            "grant_type": "authorization_code",
            "code": authorization_code,
            "redirect_uri": redirect_uri,
        }
        return self._post_for_access_grant(data, additional_parameters)

    def authenticate_client(
        self,
        additional_parameters: Optional[Mapping[str, str]] = None,
    ) -> AccessGrant:
        """App-only login (client credentials grant)."""
        data = {"grant_type": "client_credentials"}
        return self._post_for_access_grant(data, additional_parameters)

    def refresh_access(
        self,
        refresh_token: str,
        additional_parameters: Optional[Mapping[str, str]] = None,
    ) -> AccessGrant:
        data = {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        }
        return self._post_for_access_grant(data, additional_parameters)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _post_for_access_grant(
        self,
        data: Dict[str, str],
        additional_parameters: Optional[Mapping[str, str]],
    ) -> AccessGrant:
        form = {
            "client_id": self._config.client_id,
            "client_secret": self._config.client_secret,
            "resource": self._config.resource,
            **data,
        }
        if additional_parameters:
            form.update(additional_parameters)

        grant_type = data["grant_type"]
        try:
            resp = self._session.post(
                self._config.token_url,
                data=form,
                headers={"Accept": "application/json"},
                timeout=self._config.timeout,
                verify=self._config.verify_ssl,
            )
        except requests.RequestException as exc:
            logger.warning("Token request (%s) to %s failed: %s", grant_type, self._config.token_url, exc)
            raise AuthExchangeFailedError(f"Token request failed: {exc}") from exc

        body = self._json_body(resp)

        if not resp.ok:
            error_code = body.get("error")
            description = body.get("error_description") or resp.text
            logger.warning(
                "Token request (%s) rejected: %s %s", grant_type, resp.status_code, error_code
            )
            raise AuthExchangeFailedError(
                f"Failed to obtain access token: {resp.status_code} {error_code or ''} {description}".strip(),
                status_code=resp.status_code,
                error_code=error_code,
            )

        grant = AccessGrant.from_token_response(body, now=self._clock())
        logger.info("Obtained access grant via %s for tenant %s", grant_type, self._config.tenant)
        return grant

    @staticmethod
    def _json_body(resp: requests.Response) -> Dict[str, Any]:
        try:
            body = resp.json()
        except ValueError:
            if resp.ok:
                raise AuthExchangeFailedError(
                    "Token response is not valid JSON",
                    status_code=resp.status_code,
                )
            return {}
        return body if isinstance(body, dict) else {}
