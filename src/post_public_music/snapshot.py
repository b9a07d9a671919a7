"""Now-playing snapshot model and builder.

A snapshot is read fresh from the host for every publish. Payload keys are
camelCase and fields without a value are dropped rather than sent as null.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any

from .artwork import DEFAULT_MAX_WIDTH, resize_album_art
from .errors import HostQueryError
from .host import HostPlayState, PlayerHost, TagField

logger = logging.getLogger(__name__)


class PlayState(Enum):
    """Normalized play state; serialized on the wire by name."""

    PLAYING = "Playing"
    PAUSED = "Paused"
    OTHER = "Other"
    OFFLINE = "Offline"


@dataclass(frozen=True)
class PlayingSnapshot:
    """Point-in-time now-playing payload."""

    artist: str
    title: str
    album: str
    duration_ms: int
    position_ms: int
    play_state: PlayState
    album_art: str | None = None

    def with_play_state(self, play_state: PlayState) -> PlayingSnapshot:
        return replace(self, play_state=play_state)

    def to_payload(self) -> dict[str, Any]:
        """Return the wire mapping with camelCase keys and no null values."""
        payload: dict[str, Any] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if value is None:
                continue
            if isinstance(value, PlayState):
                value = value.value
            payload[_camel_case(item.name)] = value
        return payload


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def map_play_state(state: HostPlayState) -> PlayState:
    """Collapse host states to Playing/Paused/Other. Never returns Offline."""
    if state is HostPlayState.PLAYING:
        return PlayState.PLAYING
    if state is HostPlayState.PAUSED:
        return PlayState.PAUSED
    return PlayState.OTHER


def build_snapshot(
    host: PlayerHost, *, max_art_width: int = DEFAULT_MAX_WIDTH
) -> PlayingSnapshot:
    """Query the host and compose a snapshot with resized album art.

    Host accessor failures are raised as `HostQueryError`. Album art that cannot
    be decoded is logged and left out so the rest of the snapshot still goes out.
    """
    try:
        artist = host.now_playing_tag(TagField.ARTIST)
        title = host.now_playing_tag(TagField.TRACK_TITLE)
        album = host.now_playing_tag(TagField.ALBUM)
        duration_ms = int(host.now_playing_duration_ms())
        position_ms = int(host.player_position_ms())
        raw_state = host.player_play_state()
        raw_art = host.now_playing_artwork()
    except Exception as exc:
        raise HostQueryError(f"Host query failed: {exc}") from exc

    art = resize_album_art(raw_art, max_width=max_art_width)
    album_art: str | None = None
    if art.ok:
        album_art = art.data
    elif art.status == "undecodable":
        logger.warning(
            "Album art could not be decoded; publishing without it.",
            extra={"artist": artist, "title": title, "error": art.error},
        )

    return PlayingSnapshot(
        artist=artist or "",
        title=title or "",
        album=album or "",
        duration_ms=duration_ms,
        position_ms=position_ms,
        play_state=map_play_state(raw_state),
        album_art=album_art,
    )
