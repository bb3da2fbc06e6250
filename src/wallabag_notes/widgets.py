from __future__ import annotations

from datetime import datetime

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.reactive import reactive
from textual.widgets import ListItem, Static
from rich.text import Text

from .datamodels import SyncResult


# --- UI Widgets ---
class SyncResultItem(ListItem):
    def __init__(self, result: SyncResult, finished_at: datetime):
        super().__init__()
        self.result = result
        self.finished_at = finished_at

    def compose(self) -> ComposeResult:
        with Horizontal(classes="result-container"):
            yield Static(self.finished_at.strftime("%Y-%m-%d %H:%M:%S"), classes="result-time")
            yield Static(self.result.status, classes=f"result-status {self.result.status}")
            yield Static(self.describe(), classes="result-detail")

    def describe(self) -> str:
        if self.result.status == "completed":
            return (
                f"{self.result.articles} articles "
                f"({self.result.created} new, {self.result.updated} updated)"
            )
        if self.result.status == "failed":
            return self.result.error or "Sync failed."
        return "Another sync was still running."


class StatusBar(Static):
    loading_status = reactive("")
    keybinding_hint = reactive("")

    def on_mount(self) -> None:
        self.update_display()

    def set_keybindings(self, hint: str) -> None:
        """Set the keybinding hint text."""
        self.keybinding_hint = hint

    def update_display(self) -> None:
        status_items = []
        if self.loading_status:
            status_items.append(self.loading_status)

        if self.keybinding_hint:
            status_items.append(self.keybinding_hint)

        self.update(" | ".join(status_items))

    def watch_loading_status(self, loading_status: str) -> None:
        self.update_display()

    def watch_keybinding_hint(self, keybinding_hint: str) -> None:
        self.update_display()


class ErrorMessage(Static):
    def __init__(self, message: str):
        super().__init__(Text(message, style="bold red"))
