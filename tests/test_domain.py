# tests/test_domain.py
import pytest

from conftest import NOW
from partnercenter.domain.entities import AccessGrant, ConnectionData
from partnercenter.domain.exceptions import (
    AuthExchangeFailedError,
    InvalidPersistedStateError,
    PartnerCenterError,
)
from partnercenter.domain.value_objects import ConnectionKey, ServiceProviderConfig


def test_service_provider_config():
    cfg = ServiceProviderConfig(client_id="c", client_secret="s", tenant="contoso.onmicrosoft.com")
    assert cfg.token_url == "https://login.microsoftonline.com/contoso.onmicrosoft.com/oauth2/token"
    assert cfg.authorize_url == "https://login.microsoftonline.com/contoso.onmicrosoft.com/oauth2/authorize"
    assert cfg.resource == "https://api.partnercenter.microsoft.com"
    assert "client_secret" not in repr(cfg)

    with pytest.raises(ValueError):
        ServiceProviderConfig(client_id="c", client_secret="", tenant="t")

    with pytest.raises(ValueError):
        ServiceProviderConfig(client_id=" ", client_secret="s", tenant="t")


def test_service_provider_config_is_immutable():
    cfg = ServiceProviderConfig(client_id="c", client_secret="s", tenant="t")
    with pytest.raises(AttributeError):
        cfg.tenant = "other"  # type: ignore[misc]


def test_custom_authority_host_trailing_slash():
    cfg = ServiceProviderConfig(
        client_id="c",
        client_secret="s",
        tenant="t",
        authority_host="https://login.example/",
    )
    assert cfg.token_url == "https://login.example/t/oauth2/token"


def test_access_grant_from_token_response():
    grant = AccessGrant.from_token_response(
        {
            "token_type": "Bearer",
            "access_token": "at",
            "refresh_token": "rt",
            "id_token": "it",
            "expires_in": "3600",
            "expires_on": "1",
        },
        now=NOW,
    )
    assert grant == AccessGrant(access_token="at", id_token="it", refresh_token="rt", expires_at=NOW + 3600)


def test_access_grant_expiry_falls_back_to_expires_on():
    grant = AccessGrant.from_token_response({"access_token": "at", "expires_on": "1700003600"}, now=NOW)
    assert grant.expires_at == 1700003600.0


def test_access_grant_without_expiry_is_unknown():
    grant = AccessGrant.from_token_response({"access_token": "at"}, now=NOW)
    assert grant.expires_at is None
    assert grant.id_token is None
    assert grant.refresh_token is None


def test_access_grant_requires_access_token():
    with pytest.raises(AuthExchangeFailedError):
        AccessGrant.from_token_response({"token_type": "Bearer"}, now=NOW)


def test_access_grant_is_immutable():
    grant = AccessGrant(access_token="at")
    with pytest.raises(AttributeError):
        grant.access_token = "other"  # type: ignore[misc]


def test_connection_data_dict_round_trip():
    data = ConnectionData(
        provider_id="partnercenter",
        provider_user_id="u1",
        access_token="at",
        refresh_token="rt",
        expire_time=NOW,
    )
    raw = data.to_dict()
    assert raw["provider_user_id"] == "u1"
    assert ConnectionData.from_dict({**raw, "unknown": 1}) == data


def test_connection_data_from_dict_missing_fields():
    with pytest.raises(InvalidPersistedStateError, match="access_token"):
        ConnectionData.from_dict({"provider_id": "partnercenter"})


def test_connection_key():
    assert str(ConnectionKey("partnercenter", "u1")) == "partnercenter:u1"
    assert str(ConnectionKey("partnercenter")) == "partnercenter:"


def test_exception_hierarchy():
    err = AuthExchangeFailedError("nope", status_code=400, error_code="invalid_grant")
    assert isinstance(err, PartnerCenterError)
    assert err.status_code == 400
    assert err.error_code == "invalid_grant"
