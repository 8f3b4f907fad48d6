from __future__ import annotations

import logging
import threading
import time
from typing import Any, Optional

from ..adapters.partnercenter.client import PartnerCenter
from ..domain.entities import AccessGrant, ConnectionData, UserProfile
from ..domain.exceptions import AuthExchangeFailedError
from ..domain.ports import ApiAdapter, Clock
from ..domain.value_objects import ConnectionKey
from .service_provider import PartnerCenterServiceProvider

logger = logging.getLogger(__name__)


class PartnerCenterConnection:
    """
    An authorized link to Partner Center: one access token, one service
    provider, one API adapter.

    Build one with `from_grant` (right after the OAuth2 exchange) or
    `from_data` (restoring a persisted connection); both behave the same
    afterwards. `provider_user_id` never changes once the connection exists.
    """

    def __init__(
        self,
        provider_id: str,
        provider_user_id: Optional[str],
        access_token: str,
        service_provider: PartnerCenterServiceProvider,
        api_adapter: ApiAdapter[PartnerCenter],
        *,
        refresh_token: Optional[str] = None,
        expires_at: Optional[float] = None,
        display_name: Optional[str] = None,
        profile_url: Optional[str] = None,
        image_url: Optional[str] = None,
        clock: Clock = time.time,
    ) -> None:
        self._provider_id = provider_id
        self._provider_user_id = provider_user_id
        self._access_token = access_token
        self._refresh_token = refresh_token
        self._expires_at = expires_at
        self._service_provider = service_provider
        self._api_adapter = api_adapter
        self._clock = clock

        self._display_name = display_name
        self._profile_url = profile_url
        self._image_url = image_url

        self._api: Optional[PartnerCenter] = None
        self._lock = threading.Lock()

    # ------------------------------------------------------------------ #
    # construction variants
    # ------------------------------------------------------------------ #

    @classmethod
    def from_grant(
        cls,
        provider_id: str,
        provider_user_id: Optional[str],
        grant: AccessGrant,
        service_provider: PartnerCenterServiceProvider,
        api_adapter: ApiAdapter[PartnerCenter],
        clock: Clock = time.time,
    ) -> "PartnerCenterConnection":
        return cls(
            provider_id,
            provider_user_id,
            grant.access_token,
            service_provider,
            api_adapter,
            refresh_token=grant.refresh_token,
            expires_at=grant.expires_at,
            clock=clock,
        )

    @classmethod
    def from_data(
        cls,
        data: ConnectionData,
        service_provider: PartnerCenterServiceProvider,
        api_adapter: ApiAdapter[PartnerCenter],
        clock: Clock = time.time,
    ) -> "PartnerCenterConnection":
        return cls(
            data.provider_id,
            data.provider_user_id,
            data.access_token,
            service_provider,
            api_adapter,
            refresh_token=data.refresh_token,
            expires_at=data.expire_time,
            display_name=data.display_name,
            profile_url=data.profile_url,
            image_url=data.image_url,
            clock=clock,
        )

    # ------------------------------------------------------------------ #
    # read-only state
    # ------------------------------------------------------------------ #

    @property
    def provider_id(self) -> str:
        return self._provider_id

    @property
    def provider_user_id(self) -> Optional[str]:
        return self._provider_user_id

    @property
    def key(self) -> ConnectionKey:
        return ConnectionKey(self._provider_id, self._provider_user_id)

    @property
    def access_token(self) -> str:
        return self._access_token

    @property
    def expires_at(self) -> Optional[float]:
        return self._expires_at

    @property
    def display_name(self) -> Optional[str]:
        return self._display_name

    @property
    def profile_url(self) -> Optional[str]:
        return self._profile_url

    @property
    def image_url(self) -> Optional[str]:
        return self._image_url

    # ConnectionValues, written by the ApiAdapter during sync()

    def set_display_name(self, display_name: Optional[str]) -> None:
        self._display_name = display_name

    def set_profile_url(self, profile_url: Optional[str]) -> None:
        self._profile_url = profile_url

    def set_image_url(self, image_url: Optional[str]) -> None:
        self._image_url = image_url

    # ------------------------------------------------------------------ #
    # core operations
    # ------------------------------------------------------------------ #

    def get_api(self) -> PartnerCenter:
        """
        The API client bound to the current access token.

        The token is not validated here; a rejected token surfaces as
        UnauthorizedError on the first call through the client.
        """
        with self._lock:
            if self._api is None:
                self._api = self._service_provider.get_api(self._access_token)
            return self._api

    def has_expired(self) -> bool:
        """
        True only when an expiry is known and strictly in the past.
        An unknown expiry reports False.
        """
        if self._expires_at is None:
            return False
        return self._expires_at < self._clock()

    def create_data(self) -> ConnectionData:
        return ConnectionData(
            provider_id=self._provider_id,
            provider_user_id=self._provider_user_id,
            display_name=self._display_name,
            profile_url=self._profile_url,
            image_url=self._image_url,
            access_token=self._access_token,
            refresh_token=self._refresh_token,
            expire_time=self._expires_at,
        )

    def refresh(self) -> AccessGrant:
        """
        Exchange the refresh token for a new grant and rebind to it.

        Raises:
            AuthExchangeFailedError if there is no refresh token or Azure AD
            rejects the exchange.
        """
        with self._lock:
            if not self._refresh_token:
                raise AuthExchangeFailedError("Connection has no refresh token")

            operations = self._service_provider.get_auth_operations()
            grant = operations.refresh_access(self._refresh_token)

            self._access_token = grant.access_token
            self._refresh_token = grant.refresh_token or self._refresh_token
            self._expires_at = grant.expires_at
            if self._api is not None:
                self._api.close()
                self._api = None
            logger.info("Refreshed connection %s", self.key)
            return grant

    # ------------------------------------------------------------------ #
    # ApiAdapter pass-throughs
    # ------------------------------------------------------------------ #

    def test(self) -> bool:
        return self._api_adapter.test(self.get_api())

    def sync(self) -> None:
        self._api_adapter.set_connection_values(self.get_api(), self)

    def fetch_user_profile(self) -> UserProfile:
        return self._api_adapter.fetch_user_profile(self.get_api())

    def update_status(self, message: str) -> None:
        self._api_adapter.update_status(self.get_api(), message)

    # ------------------------------------------------------------------ #
    # lifecycle
    # ------------------------------------------------------------------ #

    def close(self) -> None:
        """
        Release the bound API client. A later get_api() builds a new one.
        """
        with self._lock:
            if self._api is not None:
                self._api.close()
                self._api = None

    def __enter__(self) -> "PartnerCenterConnection":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"PartnerCenterConnection(key={self.key!s}, expires_at={self._expires_at!r})"
