"""Serialize snapshots and POST them to the configured endpoint."""

from __future__ import annotations

import json
import logging

import requests

from .errors import PublishError
from .settings_store import PluginSettings
from .snapshot import PlayingSnapshot

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 5.0


def encode_snapshot(snapshot: PlayingSnapshot) -> bytes:
    """Return the compact UTF-8 JSON body for a snapshot."""
    return json.dumps(
        snapshot.to_payload(), separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")


def build_headers(settings: PluginSettings) -> dict[str, str]:
    # The API key is stored pre-encoded; it is sent as-is.
    return {
        "Content-Type": "application/json",
        "Authorization": f"Basic {settings.api_key}",
    }


class Publisher:
    """Blocking single-shot publisher; failures raise `PublishError`, no retries."""

    def __init__(
        self,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        session: requests.Session | None = None,
    ) -> None:
        self._timeout_s = timeout_s
        self._session = session

    @property
    def timeout_s(self) -> float:
        return self._timeout_s

    def publish(self, snapshot: PlayingSnapshot, settings: PluginSettings) -> int:
        """POST the snapshot and return the response status code."""
        url = settings.server_url
        body = encode_snapshot(snapshot)
        post = self._session.post if self._session is not None else requests.post
        try:
            response = post(
                url,
                data=body,
                headers=build_headers(settings),
                timeout=self._timeout_s,
            )
        except requests.Timeout as exc:
            raise PublishError(
                f"POST {url} timed out after {self._timeout_s:g}s", url=url
            ) from exc
        except requests.RequestException as exc:
            raise PublishError(f"POST {url} failed: {exc}", url=url) from exc

        status = response.status_code
        if not 200 <= status < 300:
            raise PublishError(
                f"POST {url} returned HTTP {status}", url=url, status_code=status
            )
        logger.debug(
            "Published snapshot",
            extra={
                "url": url,
                "status_code": status,
                "play_state": snapshot.play_state.value,
                "bytes": len(body),
            },
        )
        return status
