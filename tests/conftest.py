"""Test configuration and shared fakes."""

from __future__ import annotations

import base64
import random
import sys
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from post_public_music.host import HostPlayState, TagField  # noqa: E402
from post_public_music.settings_store import (  # noqa: E402
    PluginSettings,
    SettingsStore,
)


@dataclass
class FakeHost:
    """In-memory `PlayerHost` with mutable now-playing state."""

    storage_dir: Path
    artist: str = "Radiohead"
    title: str = "Idioteque"
    album: str = "Kid A"
    duration_ms: int = 345_000
    position_ms: int = 12_000
    play_state: HostPlayState = HostPlayState.PLAYING
    artwork: str | None = None
    fail_with: Exception | None = None
    tag_reads: list[TagField] = field(default_factory=list)

    def now_playing_tag(self, field: TagField) -> str:
        if self.fail_with is not None:
            raise self.fail_with
        self.tag_reads.append(field)
        return {
            TagField.ARTIST: self.artist,
            TagField.TRACK_TITLE: self.title,
            TagField.ALBUM: self.album,
        }[field]

    def now_playing_duration_ms(self) -> int:
        return self.duration_ms

    def player_position_ms(self) -> int:
        return self.position_ms

    def player_play_state(self) -> HostPlayState:
        return self.play_state

    def now_playing_artwork(self) -> str | None:
        return self.artwork

    def persistent_storage_path(self) -> Path:
        return self.storage_dir


class FakeResponse:
    def __init__(self, status_code: int = 200) -> None:
        self.status_code = status_code


class RecordingSession:
    """Stand-in for `requests.Session` that records POST calls."""

    def __init__(
        self, status_code: int = 200, error: Exception | None = None
    ) -> None:
        self.status_code = status_code
        self.error = error
        self.calls: list[dict[str, object]] = []

    def post(self, url: str, **kwargs: object) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return FakeResponse(self.status_code)


def make_png_b64(width: int, height: int, mode: str = "RGB") -> str:
    color: object = (200, 30, 30) if mode == "RGB" else 0
    image = Image.new(mode, (width, height), color)  # type: ignore[arg-type]
    buffer = BytesIO()
    image.save(buffer, format="PNG" if mode != "CMYK" else "JPEG")
    return base64.b64encode(buffer.getvalue()).decode("ascii")


def noise_image_bytes(width: int, height: int, fmt: str) -> bytes:
    rng = random.Random(width * 1000 + height)
    pixels = bytes(rng.getrandbits(8) for _ in range(width * height * 3))
    buffer = BytesIO()
    Image.frombytes("RGB", (width, height), pixels).save(buffer, format=fmt)
    return buffer.getvalue()


def corrupt_image_b64(kind: str) -> str:
    """Art that passes `Image.open` but fails while pixels are loaded."""
    if kind == "png-bad-chunk":
        data = noise_image_bytes(350, 120, "PNG").replace(b"IEND", b"IEN\xb6")
    elif kind == "png-truncated":
        data = noise_image_bytes(350, 120, "PNG")
        data = data[: len(data) // 2]
    elif kind == "jpeg-truncated":
        data = noise_image_bytes(400, 300, "JPEG")
        data = data[: len(data) // 2]
    else:
        raise ValueError(kind)
    return base64.b64encode(data).decode("ascii")


CORRUPT_ART_KINDS = ("png-bad-chunk", "png-truncated", "jpeg-truncated")


def decode_size(data: str) -> tuple[int, int]:
    with Image.open(BytesIO(base64.b64decode(data))) as image:
        return image.size


@pytest.fixture
def settings() -> PluginSettings:
    return PluginSettings(server_url="https://example.test/now", api_key="c2VjcmV0")


@pytest.fixture
def store(tmp_path, settings) -> SettingsStore:
    store = SettingsStore(tmp_path)
    store.save(settings)
    return store


@pytest.fixture
def host(tmp_path) -> FakeHost:
    return FakeHost(storage_dir=tmp_path)
