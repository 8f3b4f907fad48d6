from __future__ import annotations

import base64
import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import jwt
import pytest
import requests

from partnercenter.adapters.partnercenter.client import PartnerCenter
from partnercenter.application.connection_factory import PartnerCenterConnectionFactory
from partnercenter.application.service_provider import PartnerCenterServiceProvider
from partnercenter.domain.entities import UserProfile
from partnercenter.domain.value_objects import ServiceProviderConfig

NOW = 1_700_000_000.0
OID = "9193d755-e3fe-4510-a954-e1f5046fbab0"
SIGNING_KEY = "not-verified-anyway-but-long-enough-for-hs256"


def make_id_token(claims: Dict[str, Any]) -> str:
    return jwt.encode(claims, SIGNING_KEY, algorithm="HS256")


def b64url(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def token_response(status: int, body: Any) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = body if isinstance(body, bytes) else json.dumps(body).encode()
    resp.headers["Content-Type"] = "application/json"
    return resp


class StubSession:
    """Stands in for requests.Session; records posts, replays responses."""

    def __init__(self, *responses: Any) -> None:
        self._responses: List[Any] = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any) -> requests.Response:
        self.calls.append({"url": url, **kwargs})
        nxt = self._responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt


class MockTransportServiceProvider(PartnerCenterServiceProvider):
    """Service provider whose API clients talk to an httpx.MockTransport."""

    def __init__(
        self,
        config: ServiceProviderConfig,
        handler: Callable[[httpx.Request], httpx.Response],
        **kwargs: Any,
    ) -> None:
        super().__init__(config, **kwargs)
        self._transport = httpx.MockTransport(handler)
        self.apis_built = 0

    def get_api(self, access_token: str) -> PartnerCenter:
        self.apis_built += 1
        return PartnerCenter(
            access_token,
            base_url=self.config.api_base_url,
            client=httpx.Client(transport=self._transport),
        )


class RecordingAdapter:
    def __init__(self, healthy: bool = True) -> None:
        self.healthy = healthy
        self.calls: List[tuple] = []

    def test(self, api: PartnerCenter) -> bool:
        self.calls.append(("test", api))
        return self.healthy

    def set_connection_values(self, api: PartnerCenter, values: Any) -> None:
        self.calls.append(("set_connection_values", api))
        values.set_display_name("Contoso")

    def fetch_user_profile(self, api: PartnerCenter) -> UserProfile:
        self.calls.append(("fetch_user_profile", api))
        return UserProfile(id="p1", name="Contoso")

    def update_status(self, api: PartnerCenter, message: str) -> None:
        self.calls.append(("update_status", message))


@pytest.fixture()
def config() -> ServiceProviderConfig:
    return ServiceProviderConfig(
        client_id="client-123",
        client_secret="s3cr3t",
        tenant="contoso.onmicrosoft.com",
    )


@pytest.fixture()
def clock() -> Callable[[], float]:
    return lambda: NOW


@pytest.fixture()
def adapter() -> RecordingAdapter:
    return RecordingAdapter()


@pytest.fixture()
def make_factory(config, clock, adapter):
    def _make(session: Optional[StubSession] = None, **kwargs: Any) -> PartnerCenterConnectionFactory:
        service_provider = PartnerCenterServiceProvider(config, session=session or StubSession(), clock=clock)
        return PartnerCenterConnectionFactory(
            "partnercenter",
            service_provider,
            adapter,
            clock=clock,
            **kwargs,
        )

    return _make
