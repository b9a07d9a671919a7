"""Host player contract consumed by the plugin.

The plugin never talks to a concrete player directly. Hosts (or test fakes)
implement `PlayerHost` and hand an instance to `PostPublicMusicPlugin.initialise`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol


class NotificationType(Enum):
    """Notification kinds a host may deliver to plugin callbacks."""

    STARTUP = "startup"
    TRACK_CHANGING = "track_changing"
    TRACK_CHANGED = "track_changed"
    PLAY_STATE_CHANGED = "play_state_changed"
    VOLUME_LEVEL_CHANGED = "volume_level_changed"
    VOLUME_MUTE_CHANGED = "volume_mute_changed"
    NOW_PLAYING_LIST_CHANGED = "now_playing_list_changed"
    NOW_PLAYING_ARTWORK_READY = "now_playing_artwork_ready"
    PLAYING_TRACKS_CHANGED = "playing_tracks_changed"


class HostPlayState(Enum):
    """Native host playback states before normalization."""

    UNDEFINED = "undefined"
    LOADING = "loading"
    PLAYING = "playing"
    PAUSED = "paused"
    STOPPED = "stopped"


class PluginCloseReason(Enum):
    """Why the host is closing the plugin."""

    HOST_CLOSING = "host_closing"
    USER_DISABLED = "user_disabled"
    STOP_NO_UNLOAD = "stop_no_unload"


class TagField(Enum):
    """Now-playing tag fields the plugin reads."""

    ARTIST = "artist"
    TRACK_TITLE = "track_title"
    ALBUM = "album"


@dataclass(frozen=True)
class PluginInfo:
    """Metadata returned to the host from `initialise`."""

    name: str
    description: str
    author: str
    plugin_type: str = "general"
    version_major: int = 1
    version_minor: int = 0
    revision: int = 1
    configuration_panel_height: int = 0
    receive_player_events: bool = True

    @property
    def version(self) -> str:
        return f"{self.version_major}.{self.version_minor}.{self.revision}"


class PlayerHost(Protocol):
    """Now-playing accessors and storage location provided by the host."""

    def now_playing_tag(self, field: TagField) -> str: ...

    def now_playing_duration_ms(self) -> int: ...

    def player_position_ms(self) -> int: ...

    def player_play_state(self) -> HostPlayState: ...

    def now_playing_artwork(self) -> str | None:
        """Return base64-encoded artwork bytes, or `None`/empty when absent."""
        ...

    def persistent_storage_path(self) -> Path: ...
