from __future__ import annotations

from typing import Optional


class PartnerCenterError(Exception):
    """Base class for every error raised by this package."""
    pass


class MalformedCredentialError(PartnerCenterError):
    """Raised when an identity token cannot be decoded into claims."""
    pass


class InvalidPersistedStateError(PartnerCenterError):
    """Raised when persisted connection data fails validation on restore."""
    pass


class AuthExchangeFailedError(PartnerCenterError):
    """Raised when the OAuth2 token exchange fails or is rejected."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code


class UnauthorizedError(PartnerCenterError):
    """Raised when the Partner Center API rejects the bound access token."""
    pass
