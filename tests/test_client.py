import json

import httpx
import pytest

from partnercenter.adapters.partnercenter.api_adapter import PartnerCenterApiAdapter
from partnercenter.adapters.partnercenter.client import PartnerCenter
from partnercenter.domain.exceptions import UnauthorizedError

BASE = "https://api.partnercenter.microsoft.com/v1"

ORG_PROFILE = {
    "id": "org-1",
    "companyName": "Contoso",
    "website": "https://contoso.example",
    "firstName": "Ada",
    "lastName": "Lovelace",
    "email": "ada@contoso.example",
}


def _client(handler, token="at"):
    return PartnerCenter(token, base_url=BASE, client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_request_sends_bearer_and_ms_headers():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"items": []})

    api = _client(handler)
    assert api.get("customers", params={"size": 100}) == {"items": []}
    api.get("/customers")

    first, second = seen
    assert str(first.url) == f"{BASE}/customers?size=100"
    assert str(second.url) == f"{BASE}/customers"
    assert first.headers["Authorization"] == "Bearer at"
    assert first.headers["Accept"] == "application/json"
    assert first.headers["MS-CorrelationId"] == api.correlation_id
    assert second.headers["MS-CorrelationId"] == api.correlation_id
    assert first.headers["MS-RequestId"] != second.headers["MS-RequestId"]


def test_post_sends_json_body():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert json.loads(request.content) == {"lineItems": []}
        return httpx.Response(201, json={"id": "order-1"})

    assert _client(handler).post("customers/c1/orders", json={"lineItems": []}) == {"id": "order-1"}


def test_empty_body_returns_none():
    api = _client(lambda request: httpx.Response(204))
    assert api.delete("customers/c1") is None


def test_bom_prefixed_json():
    body = b"\xef\xbb\xbf" + json.dumps({"ok": True}).encode()
    api = _client(lambda request: httpx.Response(200, content=body))
    assert api.get("x") == {"ok": True}


def test_absolute_url_is_passed_through():
    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url) == "https://other.example/next?page=2"
        return httpx.Response(200, json={})

    _client(handler).get("https://other.example/next?page=2")


def test_401_raises_unauthorized():
    api = _client(lambda request: httpx.Response(401, json={"code": 401}), token="expired")
    with pytest.raises(UnauthorizedError):
        api.get("customers")


def test_other_errors_raise_http_status_error():
    api = _client(lambda request: httpx.Response(404))
    with pytest.raises(httpx.HTTPStatusError):
        api.get("customers/missing")


def test_context_manager_closes_client():
    http_client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
    with PartnerCenter("at", client=http_client) as api:
        assert api.access_token == "at"
    assert http_client.is_closed


# --- api adapter ---------------------------------------------------------


class _Values:
    def __init__(self):
        self.display_name = self.profile_url = self.image_url = "unset"

    def set_display_name(self, v):
        self.display_name = v

    def set_profile_url(self, v):
        self.profile_url = v

    def set_image_url(self, v):
        self.image_url = v


def _profile_handler(request: httpx.Request) -> httpx.Response:
    assert request.url.path == "/v1/profiles/organization"
    return httpx.Response(200, json=ORG_PROFILE)


def test_adapter_test_true_and_false():
    adapter = PartnerCenterApiAdapter()
    assert adapter.test(_client(_profile_handler)) is True
    assert adapter.test(_client(lambda r: httpx.Response(401))) is False
    assert adapter.test(_client(lambda r: httpx.Response(500))) is False


def test_adapter_set_connection_values():
    values = _Values()
    PartnerCenterApiAdapter().set_connection_values(_client(_profile_handler), values)
    assert values.display_name == "Contoso"
    assert values.profile_url == "https://contoso.example"
    assert values.image_url is None


def test_adapter_fetch_user_profile():
    profile = PartnerCenterApiAdapter().fetch_user_profile(_client(_profile_handler))
    assert profile.id == "org-1"
    assert profile.name == "Contoso"
    assert profile.first_name == "Ada"
    assert profile.last_name == "Lovelace"
    assert profile.email == "ada@contoso.example"


def test_adapter_update_status_is_a_no_op():
    def handler(request):
        raise AssertionError("no request expected")

    assert PartnerCenterApiAdapter().update_status(_client(handler), "hello") is None
