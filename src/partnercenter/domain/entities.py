from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Mapping, Optional

from .exceptions import AuthExchangeFailedError, InvalidPersistedStateError


def _as_float(value: Any) -> Optional[float]:
    # Azure AD v1 endpoints send expires_in / expires_on as strings.
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True, slots=True)
class AccessGrant:
    """
    Result of a successful OAuth2 token exchange.

    `expires_at` is an epoch timestamp in seconds. `None` means the token
    endpoint did not report an expiry; it does not mean the token never
    expires.
    """
    access_token: str
    id_token: Optional[str] = None
    refresh_token: Optional[str] = None
    scope: Optional[str] = None
    expires_at: Optional[float] = None

    @classmethod
    def from_token_response(cls, payload: Mapping[str, Any], now: float) -> "AccessGrant":
        """
        Project an Azure AD token endpoint response onto a grant.

        `expires_in` (relative to `now`) wins over `expires_on` (absolute).

        Raises:
            AuthExchangeFailedError if the response carries no access token.
        """
        access_token = payload.get("access_token")
        if not access_token:
            raise AuthExchangeFailedError("Token response did not contain an access_token")

        expires_at: Optional[float] = None
        expires_in = _as_float(payload.get("expires_in"))
        if expires_in is not None:
            expires_at = now + expires_in
        else:
            expires_at = _as_float(payload.get("expires_on"))

        return cls(
            access_token=access_token,
            id_token=payload.get("id_token") or None,
            refresh_token=payload.get("refresh_token") or None,
            scope=payload.get("scope") or None,
            expires_at=expires_at,
        )


@dataclass(frozen=True, slots=True)
class ConnectionData:
    """
    Persistable snapshot of a connection.

    Enough to rebuild a working connection without running the OAuth2
    flow again.
    """
    provider_id: str
    access_token: str
    provider_user_id: Optional[str] = None
    display_name: Optional[str] = None
    profile_url: Optional[str] = None
    image_url: Optional[str] = None
    secret: Optional[str] = None
    refresh_token: Optional[str] = None
    expire_time: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ConnectionData":
        """
        Rebuild from `to_dict()` output. Unknown keys are ignored.

        Raises:
            InvalidPersistedStateError if provider_id or access_token is absent.
        """
        missing = [k for k in ("provider_id", "access_token") if k not in raw]
        if missing:
            raise InvalidPersistedStateError(
                f"Connection data is missing required fields: {', '.join(missing)}"
            )
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in raw.items() if k in known})


@dataclass(slots=True)
class UserProfile:
    """
    Profile of the connected partner account, as far as the API exposes it.
    """
    id: Optional[str] = None
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    username: Optional[str] = None
