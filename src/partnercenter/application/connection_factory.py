from __future__ import annotations

import logging
import time
from typing import Optional, Union

from requests import Session

from ..adapters.azure_ad.auth_operations import AzureADAuthOperations
from ..adapters.partnercenter.api_adapter import PartnerCenterApiAdapter
from ..adapters.partnercenter.client import PartnerCenter
from ..domain.constants import DEFAULT_PROVIDER_ID
from ..domain.entities import AccessGrant, ConnectionData
from ..domain.exceptions import InvalidPersistedStateError
from ..domain.ports import ApiAdapter, Clock, IdentityExtractor
from ..domain.value_objects import ServiceProviderConfig
from .connection import PartnerCenterConnection
from .identity import extract_object_id
from .service_provider import PartnerCenterServiceProvider

logger = logging.getLogger(__name__)


class PartnerCenterConnectionFactory:
    """
    Entry point for obtaining connections.

    Binds a provider id, a service provider and an API adapter, and turns
    either a fresh AccessGrant or persisted ConnectionData into a
    PartnerCenterConnection.

    `extract_identity` derives the provider user id from a grant. The
    default reads the `oid` claim of the (unverified) id_token; pass another
    IdentityExtractor for a different claim or lookup.
    """

    def __init__(
        self,
        provider_id: str,
        service_provider: PartnerCenterServiceProvider,
        api_adapter: ApiAdapter[PartnerCenter],
        *,
        extract_identity: IdentityExtractor = extract_object_id,
        clock: Clock = time.time,
    ) -> None:
        self._provider_id = provider_id
        self._service_provider = service_provider
        self._api_adapter = api_adapter
        self._extract_identity = extract_identity
        self._clock = clock

    @classmethod
    def from_config(
        cls,
        config: ServiceProviderConfig,
        *,
        provider_id: str = DEFAULT_PROVIDER_ID,
        api_adapter: Optional[ApiAdapter[PartnerCenter]] = None,
        extract_identity: IdentityExtractor = extract_object_id,
        session: Optional[Session] = None,
        clock: Clock = time.time,
    ) -> "PartnerCenterConnectionFactory":
        """
        High-level factory: provider config -> connection factory.

        Builds the PartnerCenterServiceProvider and the default
        PartnerCenterApiAdapter.
        """
        service_provider = PartnerCenterServiceProvider(config, session=session, clock=clock)
        return cls(
            provider_id,
            service_provider,
            api_adapter or PartnerCenterApiAdapter(),
            extract_identity=extract_identity,
            clock=clock,
        )

    @classmethod
    def from_credentials(
        cls,
        client_id: str,
        client_secret: str,
        tenant: str,
        **kwargs,
    ) -> "PartnerCenterConnectionFactory":
        return cls.from_config(
            ServiceProviderConfig(client_id=client_id, client_secret=client_secret, tenant=tenant),
            **kwargs,
        )

    # ------------------------------------------------------------------ #
    # accessors
    # ------------------------------------------------------------------ #

    @property
    def provider_id(self) -> str:
        return self._provider_id

    @property
    def service_provider(self) -> PartnerCenterServiceProvider:
        return self._service_provider

    @property
    def api_adapter(self) -> ApiAdapter[PartnerCenter]:
        return self._api_adapter

    def get_auth_operations(self) -> AzureADAuthOperations:
        return self._service_provider.get_auth_operations()

    # ------------------------------------------------------------------ #
    # connection creation
    # ------------------------------------------------------------------ #

    def create_connection(
        self,
        source: Union[AccessGrant, ConnectionData],
    ) -> PartnerCenterConnection:
        """
        Dispatch on the argument: a fresh AccessGrant or persisted
        ConnectionData.
        """
        if isinstance(source, AccessGrant):
            return self.create_connection_from_grant(source)
        if isinstance(source, ConnectionData):
            return self.create_connection_from_data(source)
        raise TypeError(
            f"Expected AccessGrant or ConnectionData, got {type(source).__name__}"
        )

    def create_connection_from_grant(self, grant: AccessGrant) -> PartnerCenterConnection:
        """
        Never fails on identity: an undecodable or claim-less id_token just
        leaves provider_user_id as None.
        """
        try:
            provider_user_id = self._extract_identity(grant)
        except Exception as exc:  # noqa: BLE001
            # an unresolved identity is a valid outcome, not a failed login
            logger.debug("Identity extraction failed for %s: %s", self._provider_id, exc)
            provider_user_id = None

        if provider_user_id is None:
            logger.debug("No provider user id derivable from grant for %s", self._provider_id)

        return PartnerCenterConnection.from_grant(
            self._provider_id,
            provider_user_id,
            grant,
            self._service_provider,
            self._api_adapter,
            clock=self._clock,
        )

    def create_connection_from_data(self, data: ConnectionData) -> PartnerCenterConnection:
        """
        Raises:
            InvalidPersistedStateError if the data belongs to another provider
            or carries no access token.
        """
        if data.provider_id != self._provider_id:
            raise InvalidPersistedStateError(
                f"Connection data is for provider {data.provider_id!r}, expected {self._provider_id!r}"
            )
        if not data.access_token or not str(data.access_token).strip():
            raise InvalidPersistedStateError("Connection data has no access token")

        return PartnerCenterConnection.from_data(
            data,
            self._service_provider,
            self._api_adapter,
            clock=self._clock,
        )

    def create_app_connection(self) -> PartnerCenterConnection:
        """
        App-only login: client credentials exchange against Azure AD, then a
        connection from the resulting grant.

        Raises:
            AuthExchangeFailedError
        """
        grant = self.get_auth_operations().authenticate_client()
        return self.create_connection_from_grant(grant)
