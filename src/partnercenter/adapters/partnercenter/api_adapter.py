from __future__ import annotations

import logging

import httpx

from ...domain.entities import UserProfile
from ...domain.exceptions import PartnerCenterError
from ...domain.ports import ApiAdapter, ConnectionValues
from .client import PartnerCenter

logger = logging.getLogger(__name__)


class PartnerCenterApiAdapter(ApiAdapter[PartnerCenter]):
    """
    Maps the Partner Center organization profile onto the uniform
    connection model.
    """

    def test(self, api: PartnerCenter) -> bool:
        try:
            api.get_organization_profile()
        except (PartnerCenterError, httpx.HTTPError) as exc:
            logger.debug("Partner Center connection test failed: %s", exc)
            return False
        return True

    def set_connection_values(self, api: PartnerCenter, values: ConnectionValues) -> None:
        profile = api.get_organization_profile()
        values.set_display_name(profile.get("companyName"))
        values.set_profile_url(profile.get("website") or None)
        values.set_image_url(None)

    def fetch_user_profile(self, api: PartnerCenter) -> UserProfile:
        profile = api.get_organization_profile()
        return UserProfile(
            id=profile.get("id"),
            name=profile.get("companyName"),
            first_name=profile.get("firstName"),
            last_name=profile.get("lastName"),
            email=profile.get("email"),
            username=profile.get("email"),
        )

    def update_status(self, api: PartnerCenter, message: str) -> None:
        # Partner Center has no notion of a status update.
        return None
