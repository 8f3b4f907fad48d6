from __future__ import annotations

import time
from typing import Optional

from requests import Session

from ..adapters.azure_ad.auth_operations import AzureADAuthOperations
from ..adapters.partnercenter.client import PartnerCenter
from ..domain.ports import Clock
from ..domain.value_objects import ServiceProviderConfig


class PartnerCenterServiceProvider:
    """
    Holds the provider configuration and hands out:

    - the Azure AD auth operations used to run the OAuth2 flow
    - PartnerCenter API clients bound to an access token

    Read-only after construction; safe to share.
    """

    def __init__(
        self,
        config: ServiceProviderConfig,
        *,
        session: Optional[Session] = None,
        clock: Clock = time.time,
    ) -> None:
        self._config = config
        self._auth_operations = AzureADAuthOperations(config, session=session, clock=clock)

    @property
    def config(self) -> ServiceProviderConfig:
        return self._config

    def get_auth_operations(self) -> AzureADAuthOperations:
        return self._auth_operations

    def get_api(self, access_token: str) -> PartnerCenter:
        return PartnerCenter(
            access_token,
            base_url=self._config.api_base_url,
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
        )
