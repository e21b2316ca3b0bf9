"""Preferences persistence for remotecache.

Preferences live in a small JSON file in the per-user application folder
(as chosen by typer.get_app_dir), or in REMOTE_MEDIA_CACHE_HOME when set:

    {
      "CacheDirectory": "/home/me/.config/RemoteMediaCache/cache",
      "MaxCacheSizeMB": 1024
    }
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import typer

from remotecache.core.exceptions import PreferencesError
from remotecache.core.models import CachePreferences
from remotecache.logging import get_logger


logger = get_logger(__name__)

APP_NAME = "RemoteMediaCache"
SETTINGS_FILE_NAME = "settings.json"
HOME_ENV_VAR = "REMOTE_MEDIA_CACHE_HOME"
DEFAULT_MAX_CACHE_SIZE_MB = 1024


def settings_folder() -> Path:
    """Folder holding settings.json and, by default, the cache directory."""
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path(typer.get_app_dir(APP_NAME))


def settings_path() -> Path:
    """Path of the settings file."""
    return settings_folder() / SETTINGS_FILE_NAME


def default_preferences() -> CachePreferences:
    """Preferences used when no settings file exists yet."""
    return CachePreferences(
        cache_directory=settings_folder() / "cache",
        max_cache_size_mb=DEFAULT_MAX_CACHE_SIZE_MB,
    )


def _to_dict(preferences: CachePreferences) -> dict[str, Any]:
    return {
        "CacheDirectory": str(preferences.cache_directory),
        "MaxCacheSizeMB": preferences.max_cache_size_mb,
    }


def _from_dict(data: dict[str, Any]) -> CachePreferences:
    defaults = default_preferences()
    cache_directory = data.get("CacheDirectory") or defaults.cache_directory
    max_size = data.get("MaxCacheSizeMB")
    if max_size is None:
        max_size = defaults.max_cache_size_mb
    if isinstance(max_size, bool) or not isinstance(max_size, int | float):
        raise ValueError(f"MaxCacheSizeMB must be a number, got {max_size!r}")
    return CachePreferences(
        cache_directory=Path(cache_directory).expanduser(),
        max_cache_size_mb=int(max_size),
    )


def save_preferences(preferences: CachePreferences) -> Path:
    """Write preferences to the settings file.

    Returns:
        Path of the written file.

    Raises:
        PreferencesError: If the file cannot be written.
    """
    path = settings_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(_to_dict(preferences), indent=2), encoding="utf-8")
    except OSError as e:
        raise PreferencesError(
            f"Failed to save preferences: {e}", settings_path=path, cause=e
        ) from e
    return path


def load_preferences() -> CachePreferences:
    """Load preferences, creating the settings file with defaults if absent.

    Failure to write the default file is logged, not raised.

    Raises:
        PreferencesError: If an existing settings file cannot be read or parsed.
    """
    path = settings_path()

    if not path.exists():
        preferences = default_preferences()
        try:
            save_preferences(preferences)
        except PreferencesError as e:
            logger.warning("Could not write default settings: %s", e)
        return preferences

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("settings root must be a JSON object")
        return _from_dict(data)
    except (OSError, ValueError) as e:
        raise PreferencesError(
            f"Failed to load preferences: {e}", settings_path=path, cause=e
        ) from e


def try_get_preferences() -> CachePreferences | None:
    """Load preferences, returning None instead of raising.

    Returns:
        The preferences, or None when the settings file is unreadable.
    """
    try:
        return load_preferences()
    except PreferencesError as e:
        logger.error("%s", e)
        return None


def update_preferences(
    cache_directory: Path | None = None,
    max_cache_size_mb: int | None = None,
) -> CachePreferences:
    """Merge the given values into the stored preferences and save.

    Nothing is written when no value is given.

    Raises:
        PreferencesError: If the current preferences cannot be loaded or
            the result cannot be saved.
    """
    current = load_preferences()
    if cache_directory is None and max_cache_size_mb is None:
        return current

    try:
        updated = CachePreferences(
            cache_directory=cache_directory or current.cache_directory,
            max_cache_size_mb=(
                current.max_cache_size_mb
                if max_cache_size_mb is None
                else max_cache_size_mb
            ),
        )
    except ValueError as e:
        raise PreferencesError(str(e), settings_path=settings_path(), cause=e) from e

    save_preferences(updated)
    return updated
