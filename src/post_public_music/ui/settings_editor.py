"""Terminal editor for the endpoint settings file."""

from __future__ import annotations

import logging

from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Input, Label

from post_public_music.errors import SettingsError, SettingsInvalidError
from post_public_music.settings_store import (
    PluginSettings,
    SettingsStore,
    parse_settings,
)

logger = logging.getLogger(__name__)


class SettingsEditorApp(App[PluginSettings | None]):
    """Edit server URL and API key; exits with the saved settings or None."""

    CSS = """
    #editor-body {
        padding: 1 2;
        width: 80;
        height: auto;
    }
    #editor-error {
        color: $error;
        height: auto;
    }
    """

    BINDINGS = [
        ("escape", "cancel", "Cancel"),
        ("ctrl+s", "save", "Save"),
    ]

    def __init__(self, store: SettingsStore) -> None:
        super().__init__()
        self._store = store
        self._initial = _load_existing(store)
        self.error_text = ""

    def compose(self) -> ComposeResult:
        yield Vertical(
            Label(f"Settings file: {self._store.path}"),
            Label("Server URL"),
            Input(
                value=self._initial.server_url if self._initial else "",
                placeholder="https://example.com/api/now-playing",
                id="server-url",
            ),
            Label("API key (sent as 'Authorization: Basic <key>')"),
            Input(
                value=self._initial.api_key if self._initial else "",
                password=True,
                id="api-key",
            ),
            Label("", id="editor-error"),
            Horizontal(
                Button("Save", id="save", variant="primary"),
                Button("Cancel", id="cancel"),
            ),
            id="editor-body",
        )

    def on_mount(self) -> None:
        self.query_one("#server-url", Input).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save":
            self.action_save()
        elif event.button.id == "cancel":
            self.action_cancel()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        del event
        self.action_save()

    def action_save(self) -> None:
        data = {
            "serverUrl": self.query_one("#server-url", Input).value,
            "apiKey": self.query_one("#api-key", Input).value,
        }
        try:
            settings = parse_settings(data)
        except SettingsInvalidError as exc:
            self._show_error(str(exc))
            return
        try:
            self._store.save(settings)
        except OSError as exc:
            logger.error("Failed to save settings: %s", exc)
            self._show_error(f"Save failed: {exc}")
            return
        self.exit(settings)

    def action_cancel(self) -> None:
        self.exit(None)

    def _show_error(self, message: str) -> None:
        self.error_text = message
        self.query_one("#editor-error", Label).update(message)


def _load_existing(store: SettingsStore) -> PluginSettings | None:
    try:
        return store.load()
    except SettingsError as exc:
        logger.debug("Starting editor without existing settings: %s", exc)
        return None
