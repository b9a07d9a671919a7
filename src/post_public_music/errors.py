"""Exception hierarchy for settings, host queries and publishing."""

from __future__ import annotations

from pathlib import Path


class PluginError(Exception):
    """Base class for every error raised by the plugin."""


class SettingsError(PluginError):
    """Settings could not be retrieved; no publish can occur."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class SettingsMissingError(SettingsError):
    """Settings file does not exist."""


class SettingsInvalidError(SettingsError):
    """Settings file exists but is unreadable or malformed."""


class HostQueryError(PluginError):
    """A host accessor raised while building a snapshot."""


class PublishError(PluginError):
    """The POST to the configured endpoint failed or was rejected."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class PluginNotInitialisedError(PluginError):
    """A callback arrived before the host called `initialise`."""
