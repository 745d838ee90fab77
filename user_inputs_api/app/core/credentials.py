"""
OAuth credential handling for the Google Sheets mirror.

Two local files are involved:

* the client secrets file downloaded from the Google Cloud console
  (read only, never written here);
* the token file, which stores the user's access and refresh tokens
  and is created when the authorization flow completes for the first
  time.

Credentials are obtained through a provider.  ``CachedTokenProvider``
only ever reads the token file and fails when it is missing, which is
what the request path should use.  ``InteractiveBootstrapProvider``
falls back to the console flow: it prints an authorization URL, waits
for the operator to paste the code, exchanges the code for a token and
saves it.  The exchange is a plain form POST to the token endpoint.

Every failure is raised as ``CredentialError`` so that callers can
report it instead of terminating the process.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import requests
from google.oauth2.credentials import Credentials

from user_inputs_api.app.core.errors import CredentialError


logger = logging.getLogger(__name__)

DEFAULT_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"
OOB_REDIRECT_URI = "urn:ietf:wg:oauth:2.0:oob"


@dataclass
class OAuthClientConfig:
    """OAuth client parameters parsed from a client secrets file."""

    client_id: str
    client_secret: str
    scope: str
    auth_uri: str = DEFAULT_AUTH_URI
    token_uri: str = DEFAULT_TOKEN_URI
    redirect_uri: str = OOB_REDIRECT_URI

    @classmethod
    def from_file(cls, path: str, scope: str) -> "OAuthClientConfig":
        """Parse a Google client secrets JSON file.

        Both the ``installed`` and ``web`` client types are accepted.
        The first entry of ``redirect_uris`` is used as the redirect URI.
        """
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            raise CredentialError(f"Unable to read client secret file {path}: {exc}") from exc

        section = data.get("installed") or data.get("web") if isinstance(data, dict) else None
        if not section:
            raise CredentialError(f"Unable to parse client secret file {path}: no 'installed' or 'web' section")
        try:
            client_id = section["client_id"]
            client_secret = section["client_secret"]
        except KeyError as exc:
            raise CredentialError(f"Unable to parse client secret file {path}: missing {exc}") from exc
        redirect_uris = section.get("redirect_uris") or [OOB_REDIRECT_URI]
        return cls(
            client_id=client_id,
            client_secret=client_secret,
            scope=scope,
            auth_uri=section.get("auth_uri", DEFAULT_AUTH_URI),
            token_uri=section.get("token_uri", DEFAULT_TOKEN_URI),
            redirect_uri=redirect_uris[0],
        )

    def authorization_url(self, state: str = "state-token") -> str:
        """Build the consent URL the operator opens in a browser."""
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": self.scope,
            "state": state,
            "access_type": "offline",
        }
        return requests.Request("GET", self.auth_uri, params=params).prepare().url

    def exchange_code(self, code: str, timeout: int = 30) -> Dict[str, Any]:
        """Exchange an authorization code for a token dictionary.

        The returned dictionary has the same layout as the token file.
        """
        payload = {
            "code": code,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "redirect_uri": self.redirect_uri,
            "grant_type": "authorization_code",
        }
        try:
            response = requests.post(self.token_uri, data=payload, timeout=timeout)
            response.raise_for_status()
            token_data = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise CredentialError(f"Unable to retrieve token from web: {exc}") from exc

        if not token_data.get("access_token"):
            raise CredentialError("Unable to retrieve token from web: response has no access_token")

        token = {
            "access_token": token_data["access_token"],
            "token_type": token_data.get("token_type", "Bearer"),
            "refresh_token": token_data.get("refresh_token"),
            "expiry": None,
        }
        expires_in = token_data.get("expires_in")
        if expires_in:
            expiry = datetime.now(timezone.utc) + timedelta(seconds=int(expires_in))
            token["expiry"] = expiry.replace(tzinfo=None).isoformat()
        return token

    def build_credentials(self, token: Dict[str, Any]) -> Credentials:
        """Turn a token dictionary into ``google.oauth2`` credentials.

        The refresh token and client details let ``google-auth`` renew an
        expired access token on its own.
        """
        expiry = None
        if token.get("expiry"):
            try:
                expiry = datetime.fromisoformat(token["expiry"])
            except (TypeError, ValueError):
                expiry = None
            if expiry is not None and expiry.tzinfo is not None:
                # google-auth compares against naive UTC timestamps
                expiry = expiry.astimezone(timezone.utc).replace(tzinfo=None)
        return Credentials(
            token=token.get("access_token"),
            refresh_token=token.get("refresh_token"),
            token_uri=self.token_uri,
            client_id=self.client_id,
            client_secret=self.client_secret,
            scopes=[self.scope],
            expiry=expiry,
        )


def load_token(path: str) -> Dict[str, Any]:
    """Read a cached token from ``path``.

    Raises ``CredentialError`` when the file is missing or unreadable.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            token = json.load(fh)
    except (OSError, ValueError) as exc:
        raise CredentialError(f"No usable cached token at {path}: {exc}") from exc
    if not isinstance(token, dict) or not token.get("access_token"):
        raise CredentialError(f"No usable cached token at {path}: missing access_token")
    return token


def save_token(path: str, token: Dict[str, Any]) -> None:
    """Write ``token`` to ``path`` readable by the owner only."""
    logger.info("Saving credential file to: %s", path)
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(token, fh)
    except OSError as exc:
        raise CredentialError(f"Unable to cache oauth token: {exc}") from exc


class CachedTokenProvider:
    """Provide credentials from the token file only.

    The parsed credentials are kept in memory after the first load so
    that a token refreshed by ``google-auth`` is reused by later calls.
    """

    def __init__(self, client_secrets_file: str, token_file: str, scope: str) -> None:
        self.client_secrets_file = client_secrets_file
        self.token_file = token_file
        self.scope = scope
        self._credentials: Optional[Credentials] = None
        self._lock = threading.Lock()

    def client_config(self) -> OAuthClientConfig:
        return OAuthClientConfig.from_file(self.client_secrets_file, self.scope)

    def get_credentials(self) -> Credentials:
        with self._lock:
            if self._credentials is None:
                config = self.client_config()
                self._credentials = config.build_credentials(self._obtain_token(config))
            return self._credentials

    def _obtain_token(self, config: OAuthClientConfig) -> Dict[str, Any]:
        return load_token(self.token_file)


class InteractiveBootstrapProvider(CachedTokenProvider):
    """Fall back to the console authorization flow when no token is cached.

    This blocks the calling thread until the operator enters a code.
    There is no timeout.
    """

    def __init__(
        self,
        client_secrets_file: str,
        token_file: str,
        scope: str,
        prompt: Optional[Callable[[str], str]] = None,
        output: Optional[Callable[[str], None]] = None,
        timeout: int = 30,
    ) -> None:
        super().__init__(client_secrets_file, token_file, scope)
        self.prompt = prompt or input
        self.output = output or print
        self.timeout = timeout

    def _obtain_token(self, config: OAuthClientConfig) -> Dict[str, Any]:
        if Path(self.token_file).exists():
            try:
                return load_token(self.token_file)
            except CredentialError:
                logger.warning("Cached token at %s is unreadable, re-authorizing", self.token_file)
        token = self.authorize(config)
        save_token(self.token_file, token)
        return token

    def authorize(self, config: OAuthClientConfig) -> Dict[str, Any]:
        """Run the console flow and return the new token."""
        self.output(
            "Go to the following link in your browser then type the "
            f"authorization code: \n{config.authorization_url()}\n"
        )
        try:
            code = self.prompt("Authorization code: ").strip()
        except EOFError as exc:
            raise CredentialError("Unable to read authorization code: no input") from exc
        if not code:
            raise CredentialError("Unable to read authorization code: empty input")
        return config.exchange_code(code, timeout=self.timeout)
