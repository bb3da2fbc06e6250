from __future__ import annotations

import logging
import threading
import time
from dataclasses import fields
from typing import Any, Callable, Optional

import requests

from .auth import Authenticator
from .config import CREDENTIAL_FIELDS, DEFAULT_NOTE_FOLDER
from .converter import HtmlToMarkdownConverter
from .datamodels import Settings, SyncResult
from .errors import ConfigurationError
from .fetcher import ArticleFetcher
from .notes import NoteReconciler
from .session import create_session
from .tokens import TokenStore
from .vault import NoteStore

logger = logging.getLogger("wallabag_notes")

_HIDDEN_FIELDS = {"access_token", "refresh_token", "token_expiry"}


class SyncEngine:
    """Runs one incremental wallabag -> notes sync at a time.

    The settings object is owned by the engine and persisted through `save`
    whenever it changes. The watermark only moves after every fetched article
    has been written.
    """

    def __init__(
        self,
        settings: Settings,
        save: Callable[[Settings], None],
        store: NoteStore,
        session: Optional[requests.Session] = None,
        converter: Optional[HtmlToMarkdownConverter] = None,
        notify: Optional[Callable[[str], None]] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings
        self.save = save
        self.store = store
        self.session = session or create_session()
        self.notify = notify or (lambda message: logger.info("%s", message))
        self.clock = clock
        self.tokens = TokenStore(settings, save, clock=clock)
        self.reconciler = NoteReconciler(store, converter)
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._lock.locked()

    def sync(self) -> SyncResult:
        if not self._lock.acquire(blocking=False):
            logger.warning("Sync requested while another sync is running; skipping")
            self.notify("A wallabag sync is already running.")
            return SyncResult(status="skipped")
        try:
            return self._run()
        finally:
            self._lock.release()

    def _run(self) -> SyncResult:
        start_since = self.settings.since
        try:
            authenticator = Authenticator(
                self.settings, self.tokens, self.session, notify=self.notify, clock=self.clock
            )
            authenticator.ensure_valid()

            fetcher = ArticleFetcher(
                self.settings.instance_url,
                self.tokens,
                self.session,
                notify=self.notify,
                clock=self.clock,
            )
            batch = fetcher.fetch_since(start_since, self.settings.only_starred)

            folder = self.settings.note_folder or DEFAULT_NOTE_FOLDER
            self.store.ensure_folder(folder)

            created = updated = 0
            for article in batch.articles:
                _, action = self.reconciler.reconcile(article, folder)
                if action == "created":
                    created += 1
                else:
                    updated += 1

            self.settings.since = max(start_since, batch.watermark)
            try:
                self.save(self.settings)
            except Exception:
                self.settings.since = start_since
                raise
        except Exception as e:
            logger.error("Sync failed: %s", e, exc_info=True)
            self.notify("Sync failed. See log for details.")
            return SyncResult(status="failed", watermark=self.settings.since, error=str(e))

        logger.info(
            "Synced %d articles (%d created, %d updated); watermark %s -> %s",
            len(batch.articles), created, updated, start_since, self.settings.since,
        )
        self.notify(f"Synced {len(batch.articles)} wallabag articles.")
        return SyncResult(
            status="completed",
            articles=len(batch.articles),
            created=created,
            updated=updated,
            watermark=self.settings.since,
        )

    def reset_sync_memory(self) -> None:
        """Forget the watermark so the next sync fetches everything again."""
        self.settings.since = 0
        self.save(self.settings)
        logger.info("Sync watermark reset")
        self.notify("Sync memory reset.")

    def update_settings(self, **changes: Any) -> None:
        """Apply user-visible setting changes and persist them.

        Changing any credential drops the held tokens.
        """
        editable = {f.name for f in fields(Settings)} - _HIDDEN_FIELDS - {"since"}
        unknown = set(changes) - editable
        if unknown:
            raise ConfigurationError(f"Unknown setting(s): {', '.join(sorted(unknown))}")
        wrong_type = sorted(
            key for key, value in changes.items()
            if key != "only_starred" and not isinstance(value, str)
        )
        if wrong_type:
            raise ConfigurationError(f"Setting(s) must be text: {', '.join(wrong_type)}")

        credentials_changed = False
        for key, value in changes.items():
            if key == "only_starred":
                value = bool(value)
            elif isinstance(value, str):
                value = value.strip()
            if key == "note_folder":
                value = value.strip("/") or DEFAULT_NOTE_FOLDER
            if key == "instance_url":
                value = value.rstrip("/")
            if key in CREDENTIAL_FIELDS and getattr(self.settings, key) != value:
                credentials_changed = True
            setattr(self.settings, key, value)

        if credentials_changed:
            self.settings.access_token = ""
            self.settings.refresh_token = ""
            self.settings.token_expiry = 0.0
        self.save(self.settings)
