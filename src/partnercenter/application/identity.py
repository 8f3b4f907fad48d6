from __future__ import annotations

import logging
from typing import Optional

from ..adapters.jwt.credential_decoder import UnverifiedCredentialDecoder
from ..domain.constants import IdentityClaim
from ..domain.entities import AccessGrant
from ..domain.exceptions import MalformedCredentialError
from ..domain.ports import CredentialDecoder, IdentityExtractor

logger = logging.getLogger(__name__)


def claim_identity_extractor(
    claim: str | IdentityClaim,
    decoder: Optional[CredentialDecoder] = None,
) -> IdentityExtractor:
    """
    Build an IdentityExtractor that reads `claim` from the grant's id_token.

    The extractor returns None when the grant has no id_token, the token
    cannot be decoded, or the claim is missing or empty. It never raises
    MalformedCredentialError.
    """
    claim_name = claim.value if isinstance(claim, IdentityClaim) else claim
    token_decoder: CredentialDecoder = decoder or UnverifiedCredentialDecoder()

    def extract(grant: AccessGrant) -> Optional[str]:
        if not grant.id_token:
            return None
        try:
            credential = token_decoder.decode(grant.id_token)
        except MalformedCredentialError as exc:
            # identity stays unresolved; caller may look it up remotely
            logger.debug("Could not decode id_token: %s", exc)
            return None

        value = credential.get(claim_name)
        if value is None or value == "":
            logger.debug("id_token carries no %r claim", claim_name)
            return None
        return str(value)

    return extract


extract_object_id: IdentityExtractor = claim_identity_extractor(IdentityClaim.OBJECT_ID)
extract_subject: IdentityExtractor = claim_identity_extractor(IdentityClaim.SUBJECT)
