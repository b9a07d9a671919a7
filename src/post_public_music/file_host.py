"""`PlayerHost` backed by a single audio file, for publishing from the CLI.

Tags and embedded artwork come from mutagen; a nearby `cover.jpg`-style
sidecar is used when the file carries no picture. Position and play state are
supplied by the caller since there is no live player behind this host.
"""

from __future__ import annotations

import base64
import logging
import math
from dataclasses import dataclass
from pathlib import Path

from mutagen import File as MutagenFile
from mutagen import MutagenError
from mutagen.flac import Picture

from .host import HostPlayState, TagField

logger = logging.getLogger(__name__)

_SIDECAR_BASENAMES = ("cover", "folder", "front", "album", "artwork")
_SIDECAR_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp", ".bmp", ".gif")
_MAX_SIDECAR_BYTES = 20 * 1024 * 1024

_EASY_KEYS = {
    TagField.ARTIST: "artist",
    TagField.TRACK_TITLE: "title",
    TagField.ALBUM: "album",
}


@dataclass(frozen=True)
class FileTrack:
    """Tags and artwork read once from an audio file."""

    path: Path
    artist: str = ""
    title: str = ""
    album: str = ""
    duration_ms: int = 0
    artwork: bytes | None = None


def read_file_track(path: Path) -> FileTrack:
    """Read tags, duration and artwork; raises `MutagenError`/`OSError` on failure."""
    easy = MutagenFile(path, easy=True)
    if easy is None:
        raise MutagenError(f"Unsupported audio format: {path}")
    tags: dict[TagField, str] = {}
    for field, key in _EASY_KEYS.items():
        tags[field] = _first_text(easy.tags.get(key) if easy.tags else None)
    if not tags[TagField.TRACK_TITLE]:
        tags[TagField.TRACK_TITLE] = path.stem
    artwork = _embedded_artwork(path) or _sidecar_artwork(path)
    return FileTrack(
        path=path,
        artist=tags[TagField.ARTIST],
        title=tags[TagField.TRACK_TITLE],
        album=tags[TagField.ALBUM],
        duration_ms=_duration_ms(getattr(easy.info, "length", None)),
        artwork=artwork,
    )


def _first_text(value: object) -> str:
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return ""
    return str(value).strip()


def _duration_ms(value: object) -> int:
    if not isinstance(value, (int, float)):
        return 0
    seconds = float(value)
    if not math.isfinite(seconds) or seconds <= 0:
        return 0
    return int(seconds * 1000)


def _embedded_artwork(path: Path) -> bytes | None:
    audio = MutagenFile(path)
    if audio is None:
        return None
    pictures = getattr(audio, "pictures", None)
    if pictures:
        return bytes(pictures[0].data) or None
    tags = audio.tags
    if tags is None:
        return None
    getall = getattr(tags, "getall", None)
    if callable(getall):
        frames = getall("APIC")
        if frames:
            return bytes(frames[0].data) or None
    covers = tags.get("covr") if hasattr(tags, "get") else None
    if covers:
        return bytes(covers[0]) or None
    blocks = tags.get("metadata_block_picture") if hasattr(tags, "get") else None
    if blocks:
        try:
            return Picture(base64.b64decode(blocks[0])).data or None
        except (ValueError, MutagenError) as exc:
            logger.debug("Bad Vorbis picture block in %s: %s", path, exc)
    return None


def _sidecar_artwork(track_path: Path) -> bytes | None:
    directory = track_path.parent
    try:
        file_map = {
            item.name.lower(): item for item in directory.iterdir() if item.is_file()
        }
    except OSError:
        return None
    names = [f"{base}{ext}" for base in _SIDECAR_BASENAMES for ext in _SIDECAR_EXTENSIONS]
    names.extend(f"{track_path.stem.lower()}{ext}" for ext in _SIDECAR_EXTENSIONS)
    for name in names:
        sidecar = file_map.get(name)
        if sidecar is None:
            continue
        try:
            size = sidecar.stat().st_size
            if 0 < size <= _MAX_SIDECAR_BYTES:
                return sidecar.read_bytes()
        except OSError:
            continue
    return None


class AudioFileHost:
    """Static host reporting one file as the now-playing track."""

    def __init__(
        self,
        track: FileTrack,
        *,
        storage_dir: Path,
        play_state: HostPlayState = HostPlayState.PLAYING,
        position_ms: int = 0,
    ) -> None:
        self._track = track
        self._storage_dir = storage_dir
        self._play_state = play_state
        self._position_ms = max(0, min(position_ms, track.duration_ms or position_ms))

    @classmethod
    def from_path(
        cls,
        path: Path,
        *,
        storage_dir: Path,
        play_state: HostPlayState = HostPlayState.PLAYING,
        position_ms: int = 0,
    ) -> AudioFileHost:
        return cls(
            read_file_track(path),
            storage_dir=storage_dir,
            play_state=play_state,
            position_ms=position_ms,
        )

    def now_playing_tag(self, field: TagField) -> str:
        if field is TagField.ARTIST:
            return self._track.artist
        if field is TagField.TRACK_TITLE:
            return self._track.title
        return self._track.album

    def now_playing_duration_ms(self) -> int:
        return self._track.duration_ms

    def player_position_ms(self) -> int:
        return self._position_ms

    def player_play_state(self) -> HostPlayState:
        return self._play_state

    def now_playing_artwork(self) -> str | None:
        if not self._track.artwork:
            return None
        return base64.b64encode(self._track.artwork).decode("ascii")

    def persistent_storage_path(self) -> Path:
        return self._storage_dir
