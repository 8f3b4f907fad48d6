from __future__ import annotations

from typing import Callable, Mapping, Optional, Protocol, TypeVar

from .entities import AccessGrant, UserProfile
from .value_objects import DecodedCredential

A = TypeVar("A")

# Returns the current time as epoch seconds.
Clock = Callable[[], float]

# Derives the provider user id from a fresh grant, or None when unavailable.
IdentityExtractor = Callable[[AccessGrant], Optional[str]]


class CredentialDecoder(Protocol):
    """
    Port for turning an identity token into its claims.
    """

    def decode(self, token: str) -> DecodedCredential:
        """
        Raises:
          - MalformedCredentialError
        """
        ...


class AuthOperations(Protocol):
    """
    Port for the OAuth2 flow against the identity provider.

    Implementations live in the adapters layer (Azure AD).
    """

    def build_authorize_url(
        self,
        redirect_uri: str,
        state: Optional[str] = None,
        **params: str,
    ) -> str:
        ...

    def exchange_for_access(
        self,
        authorization_code: str,
        redirect_uri: str,
        additional_parameters: Optional[Mapping[str, str]] = None,
    ) -> AccessGrant:
        ...

    def authenticate_client(
        self,
        additional_parameters: Optional[Mapping[str, str]] = None,
    ) -> AccessGrant:
        ...

    def refresh_access(
        self,
        refresh_token: str,
        additional_parameters: Optional[Mapping[str, str]] = None,
    ) -> AccessGrant:
        ...


class ConnectionValues(Protocol):
    """
    The writable presentation fields of a connection.
    """

    def set_display_name(self, display_name: Optional[str]) -> None: ...

    def set_profile_url(self, profile_url: Optional[str]) -> None: ...

    def set_image_url(self, image_url: Optional[str]) -> None: ...


class ApiAdapter(Protocol[A]):
    """
    Maps a provider-native API client onto the uniform connection model.
    """

    def test(self, api: A) -> bool:
        ...

    def set_connection_values(self, api: A, values: ConnectionValues) -> None:
        ...

    def fetch_user_profile(self, api: A) -> UserProfile:
        ...

    def update_status(self, api: A, message: str) -> None:
        ...
