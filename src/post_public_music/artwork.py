"""Album art downscaling for publish payloads."""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Literal

from PIL import Image

logger = logging.getLogger(__name__)

DEFAULT_MAX_WIDTH = 300

ArtworkStatus = Literal["ok", "absent", "undecodable"]

# Modes Pillow's PNG encoder writes directly.
_PNG_MODES = frozenset({"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"})


@dataclass(frozen=True)
class ArtworkResult:
    """Outcome of resizing: encoded art, no art supplied, or undecodable art."""

    status: ArtworkStatus
    data: str | None = None
    width: int | None = None
    height: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


def scaled_dimensions(width: int, height: int, max_width: int) -> tuple[int, int]:
    """Return proportional size capped at `max_width`; never upscales."""
    if width <= 0 or height <= 0:
        raise ValueError(f"invalid image size {width}x{height}")
    new_width = min(width, max_width)
    if new_width == width:
        return width, height
    new_height = max(1, round(height * new_width / width))
    return new_width, new_height


def resize_album_art(
    album_art: str | None, max_width: int = DEFAULT_MAX_WIDTH
) -> ArtworkResult:
    """Decode base64 art, cap its width, and re-encode it as base64 PNG."""
    if not album_art:
        return ArtworkResult(status="absent")
    try:
        raw = base64.b64decode(album_art, validate=False)
    except (binascii.Error, ValueError) as exc:
        return ArtworkResult(status="undecodable", error=f"invalid base64: {exc}")
    try:
        with Image.open(BytesIO(raw)) as image:
            image.load()
            width, height = scaled_dimensions(image.width, image.height, max_width)
            if (width, height) != image.size:
                output = image.resize((width, height), resample=Image.Resampling.LANCZOS)
            else:
                output = image.copy()
        if output.mode not in _PNG_MODES:
            output = output.convert("RGBA" if "A" in output.getbands() else "RGB")
        buffer = BytesIO()
        output.save(buffer, format="PNG")
    except Exception as exc:
        # Pillow signals corrupt data with OSError, SyntaxError, EOFError and others.
        return ArtworkResult(status="undecodable", error=str(exc) or type(exc).__name__)

    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    logger.debug("Album art encoded at %dx%d", width, height)
    return ArtworkResult(status="ok", data=encoded, width=width, height=height)
