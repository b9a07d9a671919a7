"""Host-facing plugin entry points and notification routing.

Hosts call these methods on their own dispatch thread and block until they
return. Publishing is fire-and-forget: each callback logs its failure and
returns instead of letting it reach the host.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .artwork import DEFAULT_MAX_WIDTH
from .errors import HostQueryError, PluginError, PluginNotInitialisedError
from .host import NotificationType, PlayerHost, PluginCloseReason, PluginInfo
from .logging_utils import setup_logging
from .publisher import Publisher
from .settings_store import SettingsStore
from .snapshot import PlayingSnapshot, PlayState, build_snapshot

logger = logging.getLogger(__name__)

PUBLISH_TRIGGERS = frozenset(
    {NotificationType.TRACK_CHANGED, NotificationType.PLAY_STATE_CHANGED}
)


# Reported to the host; bumped with each release.
PLUGIN_VERSION = (1, 0, 1)


class PostPublicMusicPlugin:
    """Publishes the host's now-playing state on track and play-state changes."""

    def __init__(
        self,
        *,
        publisher: Publisher | None = None,
        max_art_width: int = DEFAULT_MAX_WIDTH,
        log_level: str | None = None,
    ) -> None:
        self._publisher = publisher or Publisher()
        self._max_art_width = max_art_width
        self._log_level = log_level
        self._host: PlayerHost | None = None

    @property
    def host(self) -> PlayerHost:
        if self._host is None:
            raise PluginNotInitialisedError("initialise() has not been called.")
        return self._host

    def storage_dir(self) -> Path:
        """Return the host storage directory; host failures raise `HostQueryError`."""
        host = self.host
        try:
            return Path(host.persistent_storage_path())
        except Exception as exc:
            raise HostQueryError(f"Host storage path query failed: {exc}") from exc

    @property
    def settings_store(self) -> SettingsStore:
        # Resolved per call; the host owns the storage location.
        return SettingsStore(self.storage_dir())

    def initialise(self, host: PlayerHost) -> PluginInfo:
        self._host = host
        if self._log_level is not None:
            try:
                setup_logging(log_dir=self.storage_dir() / "logs", level=self._log_level)
            except (HostQueryError, OSError) as exc:
                logger.warning("Plugin log file unavailable: %s", exc)
        major, minor, revision = PLUGIN_VERSION
        info = PluginInfo(
            name="PostPublicMusic",
            description="Publishes what is currently playing to a web endpoint",
            author="PostPublicMusic contributors",
            version_major=major,
            version_minor=minor,
            revision=revision,
        )
        logger.info("Plugin initialised (version %s)", info.version)
        return info

    def receive_notification(
        self, source_file: str | None, notification_type: NotificationType
    ) -> bool:
        """Publish on track/play-state changes; return whether a publish succeeded."""
        del source_file
        if notification_type not in PUBLISH_TRIGGERS:
            return False
        logger.debug("Handling %s", notification_type.value)
        return self.publish_current()

    def close(self, reason: PluginCloseReason) -> bool:
        """Publish one final snapshot marked Offline."""
        logger.info("Plugin closing (%s)", reason.value)
        return self.publish_current(play_state=PlayState.OFFLINE)

    def uninstall(self) -> None:
        try:
            removed = self.settings_store.delete()
        except (PluginError, OSError) as exc:
            logger.error("Failed to remove settings on uninstall: %s", exc)
            return
        if not removed:
            logger.info("No settings file to remove on uninstall")

    def configure(self, panel_handle: object | None = None) -> bool:
        """No embedded configuration panel; settings are edited out-of-band."""
        del panel_handle
        return False

    def save_settings(self) -> None:
        """Host Apply/Save hook; settings are persisted by the settings editor."""

    def capture(self, play_state: PlayState | None = None) -> PlayingSnapshot:
        snapshot = build_snapshot(self.host, max_art_width=self._max_art_width)
        if play_state is not None:
            snapshot = snapshot.with_play_state(play_state)
        return snapshot

    def publish_current(self, play_state: PlayState | None = None) -> bool:
        """Build, resize and POST the current snapshot; failures are logged."""
        try:
            settings = self.settings_store.load()
            snapshot = self.capture(play_state)
            self._publisher.publish(snapshot, settings)
        except PluginError as exc:
            logger.warning(
                "Publish skipped: %s",
                exc,
                extra={
                    "error_type": type(exc).__name__,
                    "play_state_override": play_state.value if play_state else None,
                },
            )
            return False
        logger.info(
            "Published %s: %s - %s",
            snapshot.play_state.value,
            snapshot.artist,
            snapshot.title,
        )
        return True
