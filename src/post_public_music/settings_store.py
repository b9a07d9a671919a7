"""JSON persistence for the plugin's endpoint settings.

Unlike runtime state, settings are never defaulted: a missing or malformed file
makes `load` raise so the caller skips the publish instead of posting somewhere
unintended.
"""

from __future__ import annotations

import json
import logging
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit
from uuid import uuid4

from .errors import SettingsInvalidError, SettingsMissingError

logger = logging.getLogger(__name__)

SETTINGS_FILE_NAME = "post-public-music-settings.json"


@dataclass(frozen=True)
class PluginSettings:
    """Endpoint URL and pre-encoded credential used for every publish."""

    server_url: str
    api_key: str

    def to_json_dict(self) -> dict[str, str]:
        return {"serverUrl": self.server_url, "apiKey": self.api_key}


def is_absolute_http_url(value: str) -> bool:
    parts = urlsplit(value)
    return parts.scheme in {"http", "https"} and bool(parts.netloc)


def _lookup(data: dict[str, Any], key: str) -> Any:
    # Case-insensitive so `ServerUrl`/`ApiKey` files written by older builds load.
    if key in data:
        return data[key]
    lowered = key.lower()
    for candidate, value in data.items():
        if isinstance(candidate, str) and candidate.lower() == lowered:
            return value
    return None


def parse_settings(data: object, *, path: Path | None = None) -> PluginSettings:
    """Validate a decoded JSON document into `PluginSettings`."""
    if not isinstance(data, dict):
        raise SettingsInvalidError("Settings file is not a JSON object.", path=path)
    server_url = _lookup(data, "serverUrl")
    api_key = _lookup(data, "apiKey")
    if not isinstance(server_url, str) or not server_url.strip():
        raise SettingsInvalidError("Settings are missing 'serverUrl'.", path=path)
    if not isinstance(api_key, str):
        raise SettingsInvalidError("Settings are missing 'apiKey'.", path=path)
    server_url = server_url.strip()
    if not is_absolute_http_url(server_url):
        raise SettingsInvalidError(
            f"'serverUrl' must be an absolute http(s) URL, got {server_url!r}.",
            path=path,
        )
    return PluginSettings(server_url=server_url, api_key=api_key)


class SettingsStore:
    """Load, save and delete the settings file inside a storage directory."""

    def __init__(self, directory: Path, *, file_name: str = SETTINGS_FILE_NAME) -> None:
        self._directory = Path(directory)
        self._file_name = file_name

    @property
    def path(self) -> Path:
        return self._directory / self._file_name

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> PluginSettings:
        path = self.path
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise SettingsMissingError(
                f"Settings file not found at {path}.", path=path
            ) from None
        except OSError as exc:
            raise SettingsInvalidError(
                f"Failed to read settings file {path}: {exc}", path=path
            ) from exc
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise SettingsInvalidError(
                f"Settings file {path} is invalid JSON: {exc.msg}", path=path
            ) from exc
        settings = parse_settings(data, path=path)
        logger.debug("Loaded settings from %s", path)
        return settings

    def save(self, settings: PluginSettings) -> None:
        """Write settings as indented JSON via write-then-replace."""
        path = self.path
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(f"{path.name}.{uuid4().hex}.tmp")
        payload = json.dumps(settings.to_json_dict(), indent=2)
        try:
            tmp_path.write_text(payload, encoding="utf-8")
            tmp_path.replace(path)
        finally:
            with suppress(OSError):
                tmp_path.unlink()
        logger.info("Saved settings to %s", path)

    def delete(self) -> bool:
        """Remove the settings file; returns False when it was already absent."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        logger.info("Deleted settings file %s", self.path)
        return True
