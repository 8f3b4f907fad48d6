from __future__ import annotations

import os
from typing import Optional

from .application.connection_factory import PartnerCenterConnectionFactory
from .domain.constants import (
    AZURE_AD_AUTHORITY_HOST,
    DEFAULT_PROVIDER_ID,
    PARTNER_CENTER_API_BASE_URL,
    PARTNER_CENTER_RESOURCE,
)
from .domain.value_objects import ServiceProviderConfig


def settings_from_env() -> ServiceProviderConfig:
    def _bool(key: str, default: bool = True) -> bool:
        raw = os.getenv(key)
        if raw is None:
            return default
        return str(raw).strip().lower() in {"1", "true", "yes", "on"}

    def _float(key: str, default: float) -> float:
        raw = os.getenv(key)
        if not raw:
            return default
        try:
            return float(raw)
        except ValueError as exc:
            raise RuntimeError(f"{key} must be a number, got {raw!r}") from exc

    client_id = os.getenv("PARTNER_CENTER_CLIENT_ID")
    client_secret = os.getenv("PARTNER_CENTER_CLIENT_SECRET")
    tenant = os.getenv("PARTNER_CENTER_TENANT")
    if not all([client_id, client_secret, tenant]):
        missing = [
            n
            for n, v in [
                ("PARTNER_CENTER_CLIENT_ID", client_id),
                ("PARTNER_CENTER_CLIENT_SECRET", client_secret),
                ("PARTNER_CENTER_TENANT", tenant),
            ]
            if not v
        ]
        raise RuntimeError(f"Missing Partner Center settings: {', '.join(missing)}")

    return ServiceProviderConfig(
        client_id=client_id,
        client_secret=client_secret,
        tenant=tenant,
        authority_host=os.getenv("PARTNER_CENTER_AUTHORITY_HOST") or AZURE_AD_AUTHORITY_HOST,
        resource=os.getenv("PARTNER_CENTER_RESOURCE") or PARTNER_CENTER_RESOURCE,
        api_base_url=os.getenv("PARTNER_CENTER_API_BASE_URL") or PARTNER_CENTER_API_BASE_URL,
        timeout=_float("PARTNER_CENTER_TIMEOUT", 30.0),
        verify_ssl=_bool("VERIFY_SSL", True),
    )


def connection_factory_from_env(
    *,
    provider_id: Optional[str] = None,
) -> PartnerCenterConnectionFactory:
    """Convenience wrapper using env-configured settings."""
    return PartnerCenterConnectionFactory.from_config(
        settings_from_env(),
        provider_id=provider_id or DEFAULT_PROVIDER_ID,
    )
