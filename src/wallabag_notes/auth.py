from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import requests

from .config import HTTP_TIMEOUT, TOKEN_ENDPOINT
from .datamodels import Settings, TokenState
from .errors import AuthenticationError, ConfigurationError
from .tokens import TokenStore

logger = logging.getLogger("wallabag_notes")


def _no_notify(message: str) -> None:
    pass


class Authenticator:
    """OAuth2 password-grant exchange against the wallabag token endpoint."""

    def __init__(
        self,
        settings: Settings,
        token_store: TokenStore,
        session: requests.Session,
        notify: Optional[Callable[[str], None]] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings
        self.token_store = token_store
        self.session = session
        self.notify = notify or _no_notify
        self.clock = clock

    def ensure_valid(self) -> None:
        if self.token_store.is_usable():
            logger.debug("Access token still valid")
            return
        self.authenticate()

    def authenticate(self) -> None:
        creds = self.settings.credentials()
        missing = creds.missing()
        if missing:
            self.notify("Please fill in all wallabag credentials in the settings.")
            raise ConfigurationError(f"Missing credentials: {', '.join(missing)}")

        self.notify("Authenticating with wallabag...")
        url = f"{creds.instance_url}{TOKEN_ENDPOINT}"
        logger.info("Requesting access token from %s for %s", url, creds.username)
        try:
            resp = self.session.post(
                url,
                data={
                    "grant_type": "password",
                    "client_id": creds.client_id,
                    "client_secret": creds.client_secret,
                    "username": creds.username,
                    "password": creds.password,
                },
                timeout=HTTP_TIMEOUT,
            )
        except requests.RequestException as e:
            self.notify("Failed to authenticate with wallabag.")
            raise AuthenticationError(f"Token request to {url} failed: {e}") from e

        if not resp.ok:
            self.notify("Failed to authenticate with wallabag.")
            raise AuthenticationError(
                "Token request rejected", status_code=resp.status_code, body=resp.text
            )

        try:
            data = resp.json()
            state = TokenState(
                access_token=data["access_token"],
                refresh_token=data["refresh_token"],
                expires_at=self.clock() + float(data["expires_in"]),
            )
        except (ValueError, KeyError, TypeError) as e:
            self.notify("Failed to authenticate with wallabag.")
            raise AuthenticationError(
                f"Malformed token response: {e}", status_code=resp.status_code, body=resp.text
            ) from e

        self.token_store.replace(state)
        logger.info("Authenticated with %s, token valid until %s", creds.instance_url, state.expires_at)
        self.notify("Authenticated with wallabag.")
