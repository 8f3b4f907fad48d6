"""
partnercenter

Connection and authentication core for the Microsoft Partner Center REST
API: Azure AD token exchange, access grants, identity extraction from the
(unverified) id_token, and connections that resource operations use to
reach the API.
"""

__version__ = "0.1.0"

from .domain.constants import DEFAULT_PROVIDER_ID, IdentityClaim
from .domain.entities import AccessGrant, ConnectionData, UserProfile
from .domain.exceptions import (
    PartnerCenterError,
    MalformedCredentialError,
    InvalidPersistedStateError,
    AuthExchangeFailedError,
    UnauthorizedError,
)
from .domain.value_objects import (
    ServiceProviderConfig,
    DecodedCredential,
    ConnectionKey,
)
from .domain.ports import (
    ApiAdapter,
    AuthOperations,
    CredentialDecoder,
    IdentityExtractor,
)

from .application.identity import claim_identity_extractor, extract_object_id, extract_subject
from .application.service_provider import PartnerCenterServiceProvider
from .application.connection import PartnerCenterConnection
from .application.connection_factory import PartnerCenterConnectionFactory

# Azure AD / Partner Center adapters
from .adapters.jwt.credential_decoder import UnverifiedCredentialDecoder, decode_credential
from .adapters.azure_ad.auth_operations import AzureADAuthOperations
from .adapters.partnercenter.client import PartnerCenter
from .adapters.partnercenter.api_adapter import PartnerCenterApiAdapter

from .env import settings_from_env, connection_factory_from_env

__all__ = [
    "__version__",
    # domain core
    "DEFAULT_PROVIDER_ID",
    "IdentityClaim",
    "AccessGrant",
    "ConnectionData",
    "UserProfile",
    "ServiceProviderConfig",
    "DecodedCredential",
    "ConnectionKey",
    "ApiAdapter",
    "AuthOperations",
    "CredentialDecoder",
    "IdentityExtractor",
    # exceptions
    "PartnerCenterError",
    "MalformedCredentialError",
    "InvalidPersistedStateError",
    "AuthExchangeFailedError",
    "UnauthorizedError",
    # connection lifecycle
    "claim_identity_extractor",
    "extract_object_id",
    "extract_subject",
    "PartnerCenterServiceProvider",
    "PartnerCenterConnection",
    "PartnerCenterConnectionFactory",
    # adapters
    "UnverifiedCredentialDecoder",
    "decode_credential",
    "AzureADAuthOperations",
    "PartnerCenter",
    "PartnerCenterApiAdapter",
    # env
    "settings_from_env",
    "connection_factory_from_env",
]
