# src/partnercenter/domain/value_objects.py

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

from .constants import (
    AZURE_AD_AUTHORITY_HOST,
    PARTNER_CENTER_API_BASE_URL,
    PARTNER_CENTER_RESOURCE,
    IdentityClaim,
)


# --- Provider configuration ----------------------------------------------


@dataclass(frozen=True, slots=True)
class ServiceProviderConfig:
    """
    Azure AD application registration + Partner Center endpoints.

    Host code decides how to construct this (env, config file, etc.);
    see `partnercenter.env.settings_from_env` for the env-driven variant.
    """
    client_id: str
    client_secret: str = field(repr=False)
    tenant: str

    authority_host: str = AZURE_AD_AUTHORITY_HOST
    resource: str = PARTNER_CENTER_RESOURCE
    api_base_url: str = PARTNER_CENTER_API_BASE_URL
    timeout: float = 30.0
    verify_ssl: bool = True

    def __post_init__(self) -> None:
        missing = [
            name
            for name, value in (
                ("client_id", self.client_id),
                ("client_secret", self.client_secret),
                ("tenant", self.tenant),
            )
            if not value or not str(value).strip()
        ]
        if missing:
            raise ValueError(f"Missing provider settings: {', '.join(missing)}")

    @property
    def tenant_authority(self) -> str:
        return f"{self.authority_host.rstrip('/')}/{self.tenant.strip()}"

    @property
    def token_url(self) -> str:
        return f"{self.tenant_authority}/oauth2/token"

    @property
    def authorize_url(self) -> str:
        return f"{self.tenant_authority}/oauth2/authorize"


# --- Identity value objects ----------------------------------------------


@dataclass(frozen=True, slots=True)
class DecodedCredential:
    """
    Claims carried by the payload of a compact JWT.

    The claims are exactly what the issuer asserted. Nothing here has been
    verified against a signing key.
    """
    claims: Mapping[str, Any]

    def __post_init__(self) -> None:
        object.__setattr__(self, "claims", MappingProxyType(dict(self.claims)))

    def __getitem__(self, name: str) -> Any:
        return self.claims[name]

    def __contains__(self, name: object) -> bool:
        return name in self.claims

    def __iter__(self) -> Iterator[str]:
        return iter(self.claims)

    def __len__(self) -> int:
        return len(self.claims)

    def get(self, name: str, default: Any = None) -> Any:
        return self.claims.get(name, default)

    @property
    def object_id(self) -> Optional[str]:
        value = self.claims.get(IdentityClaim.OBJECT_ID.value)
        return str(value) if value is not None else None

    @property
    def subject(self) -> Optional[str]:
        value = self.claims.get(IdentityClaim.SUBJECT.value)
        return str(value) if value is not None else None

    @property
    def tenant_id(self) -> Optional[str]:
        value = self.claims.get(IdentityClaim.TENANT_ID.value)
        return str(value) if value is not None else None


@dataclass(frozen=True, slots=True)
class ConnectionKey:
    """
    Identifies a connection: provider id + the provider-scoped user id.
    """
    provider_id: str
    provider_user_id: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.provider_id}:{self.provider_user_id or ''}"
