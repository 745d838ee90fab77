# tests/test_credentials.py

import json
import os
import stat
from urllib.parse import parse_qs, urlparse

import pytest
import requests

from user_inputs_api.app.core import credentials
from user_inputs_api.app.core.credentials import (
    CachedTokenProvider,
    InteractiveBootstrapProvider,
    OAuthClientConfig,
    load_token,
    save_token,
)
from user_inputs_api.app.core.errors import CredentialError, ExternalMirrorError

SCOPE = "https://www.googleapis.com/auth/spreadsheets"


class FakeTokenResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")

    def json(self):
        return self.payload


@pytest.fixture
def token_endpoint(monkeypatch):
    calls = []

    def fake_post(url, data=None, timeout=None):
        calls.append({"url": url, "data": data, "timeout": timeout})
        return FakeTokenResponse(
            {"access_token": "ya29.fresh", "refresh_token": "1//refresh", "token_type": "Bearer", "expires_in": 3599}
        )

    monkeypatch.setattr(credentials.requests, "post", fake_post)
    return calls


def test_client_config_from_file(client_secrets_file):
    config = OAuthClientConfig.from_file(client_secrets_file, SCOPE)

    assert config.client_id == "client-123.apps.googleusercontent.com"
    assert config.client_secret == "s3cret"
    assert config.redirect_uri == "http://localhost"
    assert config.token_uri == "https://oauth2.googleapis.com/token"


def test_client_config_missing_file(tmp_path):
    with pytest.raises(CredentialError):
        OAuthClientConfig.from_file(str(tmp_path / "missing.json"), SCOPE)


def test_client_config_without_client_section(tmp_path):
    path = tmp_path / "credentials.json"
    path.write_text(json.dumps({"type": "service_account"}))

    with pytest.raises(CredentialError):
        OAuthClientConfig.from_file(str(path), SCOPE)


def test_credential_error_is_mirror_error():
    assert issubclass(CredentialError, ExternalMirrorError)


def test_authorization_url(client_secrets_file):
    config = OAuthClientConfig.from_file(client_secrets_file, SCOPE)

    url = urlparse(config.authorization_url())
    query = parse_qs(url.query)

    assert url.netloc == "accounts.google.com"
    assert query["client_id"] == ["client-123.apps.googleusercontent.com"]
    assert query["scope"] == [SCOPE]
    assert query["access_type"] == ["offline"]
    assert query["state"] == ["state-token"]
    assert query["response_type"] == ["code"]


def test_exchange_code(client_secrets_file, token_endpoint):
    config = OAuthClientConfig.from_file(client_secrets_file, SCOPE)

    token = config.exchange_code("4/abc", timeout=5)

    assert token["access_token"] == "ya29.fresh"
    assert token["refresh_token"] == "1//refresh"
    assert token["expiry"]
    assert token_endpoint[0]["data"]["code"] == "4/abc"
    assert token_endpoint[0]["data"]["grant_type"] == "authorization_code"
    assert token_endpoint[0]["timeout"] == 5


def test_exchange_code_http_error(client_secrets_file, monkeypatch):
    monkeypatch.setattr(
        credentials.requests, "post", lambda url, data=None, timeout=None: FakeTokenResponse({}, status_code=400)
    )
    config = OAuthClientConfig.from_file(client_secrets_file, SCOPE)

    with pytest.raises(CredentialError):
        config.exchange_code("bad-code")


def test_exchange_code_without_access_token(client_secrets_file, monkeypatch):
    monkeypatch.setattr(
        credentials.requests, "post", lambda url, data=None, timeout=None: FakeTokenResponse({"error": "invalid_grant"})
    )
    config = OAuthClientConfig.from_file(client_secrets_file, SCOPE)

    with pytest.raises(CredentialError):
        config.exchange_code("bad-code")


def test_save_and_load_token(tmp_path):
    path = str(tmp_path / "token.json")
    save_token(path, {"access_token": "abc", "refresh_token": "def", "token_type": "Bearer", "expiry": None})

    assert load_token(path)["refresh_token"] == "def"
    assert stat.S_IMODE(os.stat(path).st_mode) == 0o600


def test_load_token_missing(tmp_path):
    with pytest.raises(CredentialError):
        load_token(str(tmp_path / "token.json"))


def test_load_token_corrupt(tmp_path):
    path = tmp_path / "token.json"
    path.write_text("{")

    with pytest.raises(CredentialError):
        load_token(str(path))


def test_cached_provider_builds_credentials(client_secrets_file, tmp_path):
    token_file = str(tmp_path / "token.json")
    save_token(
        token_file,
        {"access_token": "abc", "refresh_token": "def", "token_type": "Bearer", "expiry": "2030-01-01T00:00:00"},
    )
    provider = CachedTokenProvider(client_secrets_file, token_file, SCOPE)

    creds = provider.get_credentials()

    assert creds.token == "abc"
    assert creds.refresh_token == "def"
    assert creds.client_id == "client-123.apps.googleusercontent.com"
    assert creds.expiry.year == 2030
    assert provider.get_credentials() is creds


def test_cached_provider_without_token(client_secrets_file, tmp_path):
    provider = CachedTokenProvider(client_secrets_file, str(tmp_path / "token.json"), SCOPE)

    with pytest.raises(CredentialError):
        provider.get_credentials()


def test_interactive_provider_bootstraps_token(client_secrets_file, tmp_path, token_endpoint):
    token_file = tmp_path / "token.json"
    printed = []
    provider = InteractiveBootstrapProvider(
        client_secrets_file,
        str(token_file),
        SCOPE,
        prompt=lambda message: " 4/code \n",
        output=printed.append,
    )

    creds = provider.get_credentials()

    assert creds.token == "ya29.fresh"
    assert "https://accounts.google.com/o/oauth2/auth?" in printed[0]
    assert token_endpoint[0]["data"]["code"] == "4/code"
    assert json.loads(token_file.read_text())["access_token"] == "ya29.fresh"


def test_interactive_provider_reuses_cached_token(client_secrets_file, tmp_path):
    token_file = str(tmp_path / "token.json")
    save_token(token_file, {"access_token": "cached", "refresh_token": None, "token_type": "Bearer", "expiry": None})

    def fail_prompt(message):
        raise AssertionError("should not prompt")

    provider = InteractiveBootstrapProvider(client_secrets_file, token_file, SCOPE, prompt=fail_prompt)

    assert provider.get_credentials().token == "cached"


def test_interactive_provider_no_input(client_secrets_file, tmp_path):
    def no_input(message):
        raise EOFError

    provider = InteractiveBootstrapProvider(
        client_secrets_file, str(tmp_path / "token.json"), SCOPE, prompt=no_input, output=lambda text: None
    )

    with pytest.raises(CredentialError):
        provider.get_credentials()
    assert not (tmp_path / "token.json").exists()
