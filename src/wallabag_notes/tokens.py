from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from .config import TOKEN_EXPIRY_MARGIN
from .datamodels import Settings, TokenState

logger = logging.getLogger("wallabag_notes")


class TokenStore:
    """Holds the OAuth tokens inside the settings object.

    The three token fields are only ever written together, followed by a
    single save.
    """

    def __init__(
        self,
        settings: Settings,
        save: Callable[[Settings], None],
        clock: Callable[[], float] = time.time,
        margin: int = TOKEN_EXPIRY_MARGIN,
    ):
        self.settings = settings
        self.save = save
        self.clock = clock
        self.margin = margin

    @property
    def state(self) -> Optional[TokenState]:
        if not self.settings.access_token:
            return None
        return TokenState(
            access_token=self.settings.access_token,
            refresh_token=self.settings.refresh_token,
            expires_at=self.settings.token_expiry,
        )

    @property
    def access_token(self) -> str:
        return self.settings.access_token

    def is_usable(self) -> bool:
        state = self.state
        if state is None:
            return False
        return state.expires_at - self.clock() > self.margin

    def replace(self, state: TokenState) -> None:
        self.settings.access_token = state.access_token
        self.settings.refresh_token = state.refresh_token
        self.settings.token_expiry = state.expires_at
        self.save(self.settings)
        logger.debug("Stored new access token expiring at %s", state.expires_at)

    def clear(self) -> None:
        self.settings.access_token = ""
        self.settings.refresh_token = ""
        self.settings.token_expiry = 0.0
        self.save(self.settings)
