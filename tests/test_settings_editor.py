"""Tests for the Textual settings editor."""

from __future__ import annotations

import asyncio

from textual.widgets import Input

from post_public_music.settings_store import PluginSettings, SettingsStore
from post_public_music.ui.settings_editor import SettingsEditorApp


def _run(coro):
    return asyncio.run(coro)


def test_editor_prefills_and_saves(store, settings) -> None:
    app = SettingsEditorApp(store)

    async def run_app() -> None:
        async with app.run_test() as pilot:
            assert app.query_one("#server-url", Input).value == settings.server_url
            assert app.query_one("#api-key", Input).value == settings.api_key
            app.query_one("#api-key", Input).value = "bmV3LWtleQ=="
            app.action_save()
            await pilot.pause()

    _run(run_app())

    assert app.return_value == PluginSettings(
        server_url=settings.server_url, api_key="bmV3LWtleQ=="
    )
    assert store.load().api_key == "bmV3LWtleQ=="


def test_editor_rejects_invalid_url(tmp_path) -> None:
    store = SettingsStore(tmp_path)
    app = SettingsEditorApp(store)

    async def run_app() -> None:
        async with app.run_test() as pilot:
            app.query_one("#server-url", Input).value = "not a url"
            app.action_save()
            await pilot.pause()
            assert "absolute http(s) URL" in app.error_text
            app.exit()

    _run(run_app())

    assert not store.exists()


def test_editor_cancel_leaves_file_untouched(store, settings) -> None:
    app = SettingsEditorApp(store)

    async def run_app() -> None:
        async with app.run_test() as pilot:
            app.query_one("#server-url", Input).value = "https://changed.test/"
            app.action_cancel()
            await pilot.pause()

    _run(run_app())

    assert app.return_value is None
    assert store.load() == settings
