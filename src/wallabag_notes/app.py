from __future__ import annotations

from datetime import datetime
from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.worker import Worker, WorkerState
from textual.widgets import Header, ListItem, ListView, Static

from .config import logger
from .datamodels import SyncResult
from .messages import StatusUpdate
from .screens import SettingsScreen
from .sync import SyncEngine
from .widgets import ErrorMessage, StatusBar, SyncResultItem

KEYBINDINGS_HINT = "[b $accent]s[/] sync now, [b $accent]c[/] settings, [b $accent]q[/] quit"


class WallabagNotesApp(App):
    TITLE = "wallabag notes"
    SUB_TITLE = "Mirror wallabag articles into Markdown notes"

    DEFAULT_CSS = """
    #history-list { height: 1fr; }
    .pane-title { text-style: bold; padding: 0 1; }
    .result-time { width: 21; }
    .result-status { width: 11; }
    .result-status.failed { color: $error; }
    .result-status.skipped { color: $warning; }
    .settings-label { margin-top: 1; }
    .settings-hint { color: $text-muted; margin: 1 0; }
    .settings-buttons { height: auto; }
    StatusBar { dock: bottom; height: 1; background: $panel; }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("s", "sync", "Sync now"),
        Binding("c", "show_settings", "Settings"),
    ]

    def __init__(self, engine: SyncEngine, **kwargs: Any):
        super().__init__(**kwargs)
        self.engine = engine
        # status lines from the engine may arrive from the worker thread
        self.engine.notify = lambda text: self.post_message(StatusUpdate(text))

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="main"):
            yield Static("Sync history", classes="pane-title")
            yield ListView(id="history-list")
        yield StatusBar()

    def on_mount(self) -> None:
        self.apply_status_hint(self.screen)
        self.query_one("#history-list").focus()

    def apply_status_hint(self, screen) -> None:
        try:
            screen.query_one(StatusBar).set_keybindings(KEYBINDINGS_HINT)
        except Exception:
            pass  # Not all screens have a status bar

    def action_sync(self) -> None:
        if self.engine.running:
            self.notify("A wallabag sync is already running.", severity="warning")
            return
        self.query_one(StatusBar).loading_status = "Syncing..."
        self.run_worker(self.engine.sync, name="sync_worker", thread=True)

    def action_show_settings(self) -> None:
        self.push_screen(SettingsScreen())

    def on_status_update(self, message: StatusUpdate) -> None:
        try:
            self.query_one(StatusBar).loading_status = message.text
        except Exception:
            pass  # main screen not mounted yet
        self.notify(message.text)

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if getattr(event.worker, "name", None) != "sync_worker":
            return
        history = self.query_one("#history-list", ListView)
        if event.state is WorkerState.SUCCESS:
            result: SyncResult = event.worker.result
            history.append(SyncResultItem(result, datetime.now()))
        elif event.state is WorkerState.ERROR:
            error = getattr(event.worker, "error", None)
            logger.error("Sync worker failed: %s", error)
            history.append(ListItem(ErrorMessage(f"Sync worker failed: {error}")))
