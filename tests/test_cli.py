"""Tests for the command line entrypoint."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

import post_public_music.cli as cli_module
from conftest import RecordingSession
from post_public_music.file_host import AudioFileHost, FileTrack
from post_public_music.publisher import Publisher
from post_public_music.settings_store import PluginSettings, SettingsStore
from post_public_music.version import __version__


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch, tmp_path):
    monkeypatch.setattr(cli_module, "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr(cli_module, "log_dir", lambda: tmp_path / "logs")


def test_parser_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        cli_module.build_parser().parse_args([])


def test_help_includes_version_epilog() -> None:
    help_text = cli_module.build_parser().format_help()
    assert f"Version: {__version__}" in help_text
    assert "Platform: " in help_text


def test_settings_set_then_show_masks_key(tmp_path, capsys) -> None:
    rc = cli_module.main(
        [
            "--storage-dir",
            str(tmp_path),
            "settings",
            "set",
            "--server-url",
            "https://example.test/np",
            "--api-key",
            "supersecretkey",
        ]
    )
    assert rc == 0
    assert SettingsStore(tmp_path).load() == PluginSettings(
        server_url="https://example.test/np", api_key="supersecretkey"
    )

    rc = cli_module.main(["--storage-dir", str(tmp_path), "settings", "show"])
    out = capsys.readouterr().out
    assert rc == 0
    assert "supersecretkey" not in out
    assert "**********tkey" in out


def test_settings_set_rejects_relative_url(tmp_path, capsys) -> None:
    rc = cli_module.main(
        [
            "--storage-dir",
            str(tmp_path),
            "settings",
            "set",
            "--server-url",
            "example.test",
            "--api-key",
            "k",
        ]
    )
    assert rc == 2
    assert "absolute http(s) URL" in capsys.readouterr().err
    assert not SettingsStore(tmp_path).exists()


def test_settings_show_without_file_fails(tmp_path, capsys) -> None:
    rc = cli_module.main(["--storage-dir", str(tmp_path), "settings", "show"])
    assert rc == 2
    assert "not found" in capsys.readouterr().err


def test_settings_delete(store, capsys) -> None:
    storage = str(store.path.parent)
    assert cli_module.main(["--storage-dir", storage, "settings", "delete"]) == 0
    assert cli_module.main(["--storage-dir", storage, "settings", "delete"]) == 0
    out = capsys.readouterr().out
    assert "Settings deleted." in out
    assert "No settings file to delete." in out


def test_doctor_exit_code(tmp_path, capsys) -> None:
    rc = cli_module.main(["--storage-dir", str(tmp_path), "doctor"])
    assert rc == 2
    assert "Result: FAIL" in capsys.readouterr().out


def test_publish_offline_from_file(store, monkeypatch, tmp_path) -> None:
    session = RecordingSession()
    captured: dict[str, object] = {}

    def fake_from_path(path: Path, **kwargs) -> AudioFileHost:
        captured.update(kwargs)
        track = FileTrack(path=path, artist="A", title="T", album="Al", duration_ms=1)
        return AudioFileHost(track, **kwargs)

    def fake_publisher(*, timeout_s: float) -> Publisher:
        captured["timeout_s"] = timeout_s
        return Publisher(timeout_s=timeout_s, session=session)

    monkeypatch.setattr(cli_module.AudioFileHost, "from_path", fake_from_path)
    monkeypatch.setattr(cli_module, "Publisher", fake_publisher)

    rc = cli_module.main(
        [
            "--storage-dir",
            str(store.path.parent),
            "publish",
            str(tmp_path / "song.mp3"),
            "--state",
            "paused",
            "--offline",
            "--timeout",
            "500",
        ]
    )

    assert rc == 0
    assert captured["timeout_s"] == 60.0
    assert captured["storage_dir"] == store.path.parent
    body = json.loads(session.calls[0]["data"])
    assert body == {
        "artist": "A",
        "title": "T",
        "album": "Al",
        "durationMs": 1,
        "positionMs": 0,
        "playState": "Offline",
    }


def test_publish_unreadable_file_fails(tmp_path, capsys) -> None:
    rc = cli_module.main(
        ["--storage-dir", str(tmp_path), "publish", str(tmp_path / "missing.mp3")]
    )
    assert rc == 1
    assert "Could not read audio file" in capsys.readouterr().err


def test_main_returns_nonzero_when_logging_setup_fails(monkeypatch, capsys) -> None:
    def fail_setup_logging(**kwargs):
        del kwargs
        raise OSError("cannot open log")

    monkeypatch.setattr(cli_module, "setup_logging", fail_setup_logging)

    rc = cli_module.main(["doctor"])

    assert rc == 1
    assert "Unexpected error" in capsys.readouterr().err
