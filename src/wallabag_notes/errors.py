from __future__ import annotations

from typing import Optional


class SyncError(Exception):
    """Base class for failures that abort a sync."""


class ConfigurationError(SyncError):
    """Settings are incomplete or invalid; the user has to fix them."""


class _HttpError(SyncError):
    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        text = super().__str__()
        if self.status_code is not None:
            text = f"{text} (HTTP {self.status_code})"
        if self.body:
            text = f"{text}: {self.body}"
        return text


class AuthenticationError(_HttpError):
    """The token endpoint rejected the password grant."""


class FetchError(_HttpError):
    """An entries page could not be retrieved."""


class ConversionError(SyncError):
    """Article HTML could not be turned into Markdown."""


class NoteWriteError(SyncError):
    """The note store refused a create or overwrite."""
