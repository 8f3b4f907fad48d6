"""
Unverified decoding of compact JWTs.

WARNING: nothing in this module checks the token signature. The claims are
the ones the issuer *asserted*, and they are trusted only because the token
was received directly from Azure AD over TLS during the OAuth2 exchange.
Code that makes authorization decisions from these claims must verify the
signature itself (e.g. `jwt.decode` with the tenant's JWKS keys).
"""

import binascii
import json
import re
from typing import Any, Dict

from jwt.utils import base64url_decode

from ...domain.exceptions import MalformedCredentialError
from ...domain.ports import CredentialDecoder
from ...domain.value_objects import DecodedCredential

_BASE64URL = re.compile(r"[A-Za-z0-9_-]+={0,2}")


class UnverifiedCredentialDecoder(CredentialDecoder):
    """
    Adapter implementing the CredentialDecoder port with PyJWT's base64url
    helpers.

    Only the payload segment is decoded. The header and signature segments
    must be present but are otherwise ignored.
    """

    def decode(self, token: str) -> DecodedCredential:
        """
        Decode the payload segment of a `header.payload.signature` token.

        Raises:
            MalformedCredentialError
        """
        if not isinstance(token, str):
            raise MalformedCredentialError("Token must be a string")

        segments = token.split(".")
        if len(segments) != 3:
            raise MalformedCredentialError(
                f"Token must have 3 segments, got {len(segments)}"
            )

        return DecodedCredential(claims=self._decode_payload(segments[1]))

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _decode_payload(segment: str) -> Dict[str, Any]:
        # base64url_decode silently drops characters outside the alphabet
        if not _BASE64URL.fullmatch(segment):
            raise MalformedCredentialError("Payload segment is not valid base64url")

        try:
            raw = base64url_decode(segment)
        except (binascii.Error, ValueError) as exc:
            raise MalformedCredentialError(f"Payload segment is not valid base64url: {exc}") from exc

        try:
            claims = json.loads(raw)
        except ValueError as exc:
            raise MalformedCredentialError(f"Payload is not valid JSON: {exc}") from exc

        if not isinstance(claims, dict):
            raise MalformedCredentialError("Payload must be a JSON object")

        return claims


_default_decoder = UnverifiedCredentialDecoder()


def decode_credential(token: str) -> DecodedCredential:
    """Module-level shortcut for `UnverifiedCredentialDecoder().decode`."""
    return _default_decoder.decode(token)
