from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.screen import Screen
from textual.widgets import Button, Checkbox, Footer, Header, Input, Label

from .config import logger
from .errors import ConfigurationError

# (setting name, label, password input)
TEXT_FIELDS = [
    ("note_folder", "Folder for wallabag notes", False),
    ("instance_url", "wallabag server URL", False),
    ("client_id", "OAuth client ID", False),
    ("client_secret", "OAuth client secret", True),
    ("username", "wallabag username", False),
    ("password", "wallabag password (stored locally)", True),
]


class SettingsScreen(Screen):
    """Credentials, the starred-only toggle and the sync reset."""

    BINDINGS = [
        Binding("escape", "app.pop_screen", "Back"),
    ]

    def compose(self) -> ComposeResult:
        settings = self.app.engine.settings
        yield Header()
        yield Footer()
        with VerticalScroll(id="settings-form"):
            for name, label, secret in TEXT_FIELDS:
                yield Label(label, classes="settings-label")
                yield Input(
                    value=str(getattr(settings, name) or ""),
                    password=secret,
                    id=f"setting-{name}",
                )
            yield Checkbox(
                "Only sync starred articles",
                settings.only_starred,
                id="setting-only_starred",
            )
            yield Label(
                "Create a client in your wallabag account under Developer.",
                classes="settings-hint",
            )
            with Horizontal(classes="settings-buttons"):
                yield Button("Save", id="save-settings", variant="primary")
                yield Button("Reset sync", id="reset-sync", variant="error")

    def on_mount(self) -> None:
        self.title = "Settings"

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save-settings":
            self.save_settings()
        elif event.button.id == "reset-sync":
            if self.app.engine.running:
                self.app.notify("Wait for the running sync to finish.", severity="warning")
                return
            self.app.engine.reset_sync_memory()

    def save_settings(self) -> None:
        if self.app.engine.running:
            self.app.notify("Wait for the running sync to finish.", severity="warning")
            return
        changes = {
            name: self.query_one(f"#setting-{name}", Input).value
            for name, _, _ in TEXT_FIELDS
        }
        changes["only_starred"] = self.query_one("#setting-only_starred", Checkbox).value
        try:
            self.app.engine.update_settings(**changes)
        except (ConfigurationError, OSError) as e:
            logger.error("Failed to save settings: %s", e)
            self.app.notify(f"Could not save settings: {e}", severity="error")
            return
        self.app.notify("Settings saved!")
        self.app.pop_screen()
