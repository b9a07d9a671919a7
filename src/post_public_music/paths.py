"""Per-user directories used when running outside a host."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from platformdirs import AppDirs

from .settings_store import SETTINGS_FILE_NAME

DEFAULT_APP_NAME = "post-public-music"


@lru_cache(maxsize=4)
def get_app_dirs(app_name: str = DEFAULT_APP_NAME) -> AppDirs:
    """Return platform-specific app directories."""
    return AppDirs(app_name, appauthor=False)


def _ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def config_dir(app_name: str = DEFAULT_APP_NAME) -> Path:
    """Default storage directory for the settings file, created if needed."""
    return _ensure_dir(Path(get_app_dirs(app_name).user_config_dir))


def data_dir(app_name: str = DEFAULT_APP_NAME) -> Path:
    """Return the per-user data directory, creating it if needed."""
    return _ensure_dir(Path(get_app_dirs(app_name).user_data_dir))


def log_dir(app_name: str = DEFAULT_APP_NAME) -> Path:
    """Return the per-user log directory, creating it if needed."""
    return _ensure_dir(data_dir(app_name) / "logs")


def settings_path(app_name: str = DEFAULT_APP_NAME) -> Path:
    """Return the default settings file path; the file itself may not exist."""
    return config_dir(app_name) / SETTINGS_FILE_NAME
