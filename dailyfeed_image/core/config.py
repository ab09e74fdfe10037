"""
Image module configuration.

Reads an optional YAML/JSON settings file and overlays environment variables.
Only the ``images:`` section of the file is used:

    images:
      upload-root: ./tmp/dailyfeed/store/images
      max-file-size: 10485760
      max-width: 500
      max-height: 500
      thumbnail-size: 150
      quality: 0.85

Environment variables (override the file):
    DAILYFEED_CONFIG_FILE            path to the settings file (optional)
    DAILYFEED_IMAGES_UPLOAD_ROOT
    DAILYFEED_IMAGES_MAX_FILE_SIZE
    DAILYFEED_IMAGES_MAX_WIDTH
    DAILYFEED_IMAGES_MAX_HEIGHT
    DAILYFEED_IMAGES_THUMBNAIL_SIZE
    DAILYFEED_IMAGES_QUALITY
    DAILYFEED_IMAGES_MAX_PIXELS
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

_log = logging.getLogger("dailyfeed.config")

DEFAULT_UPLOAD_ROOT = "./tmp/dailyfeed/store/images"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ImageSettings:
    upload_root: str = DEFAULT_UPLOAD_ROOT
    max_file_size: int = 10 * 1024 * 1024
    max_width: int = 500
    max_height: int = 500
    thumbnail_size: int = 150
    quality: float = 0.85
    max_pixels: int = 50_000_000


# file key -> (attribute, env var, caster)
_FIELDS = {
    "upload-root": ("upload_root", "DAILYFEED_IMAGES_UPLOAD_ROOT", str),
    "max-file-size": ("max_file_size", "DAILYFEED_IMAGES_MAX_FILE_SIZE", int),
    "max-width": ("max_width", "DAILYFEED_IMAGES_MAX_WIDTH", int),
    "max-height": ("max_height", "DAILYFEED_IMAGES_MAX_HEIGHT", int),
    "thumbnail-size": ("thumbnail_size", "DAILYFEED_IMAGES_THUMBNAIL_SIZE", int),
    "quality": ("quality", "DAILYFEED_IMAGES_QUALITY", float),
    "max-pixels": ("max_pixels", "DAILYFEED_IMAGES_MAX_PIXELS", int),
}


def _resolve_path(path: Optional[Path]) -> Path:
    if path is not None:
        return Path(path)
    env_path = os.getenv("DAILYFEED_CONFIG_FILE", "").strip()
    if env_path:
        return Path(env_path)
    project_root = Path(__file__).resolve().parents[2]
    return project_root / "application.yaml"


def load_config_file(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Return the ``images`` section of the settings file.

    Returns an empty dict if the file is absent, unreadable, or malformed.
    """
    resolved = _resolve_path(path)
    if not resolved.exists():
        return {}

    try:
        raw_text = resolved.read_text(encoding="utf-8")
    except OSError as exc:
        _log.warning("Cannot read settings file %s: %s", resolved, exc)
        return {}

    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            _log.warning("Failed to parse settings file %s as JSON or YAML: %s", resolved, exc)
            return {}

    if not isinstance(data, dict):
        _log.warning("Settings file %s must be a mapping, got %s", resolved, type(data).__name__)
        return {}

    section = data.get("images") or {}
    if not isinstance(section, dict):
        _log.warning("Settings file %s: 'images' must be a mapping", resolved)
        return {}
    return section


def _cast(key: str, caster, value: Any) -> Any:
    try:
        return caster(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid value for images.{key}: {value!r}") from exc


def _validate(settings: ImageSettings) -> None:
    if not settings.upload_root.strip():
        raise ConfigError("images.upload-root must not be empty")
    for key in ("max_file_size", "max_width", "max_height", "thumbnail_size", "max_pixels"):
        if getattr(settings, key) <= 0:
            raise ConfigError(f"images.{key.replace('_', '-')} must be positive")
    if not 0.0 < settings.quality <= 1.0:
        raise ConfigError("images.quality must be in (0, 1]")


def load_settings(path: Optional[Path] = None) -> ImageSettings:
    values: Dict[str, Any] = {}
    file_section = load_config_file(path)

    for key, (attr, env_key, caster) in _FIELDS.items():
        if key in file_section and file_section[key] is not None:
            values[attr] = _cast(key, caster, file_section[key])
        env_val = os.getenv(env_key, "").strip()
        if env_val:
            values[attr] = _cast(key, caster, env_val)

    settings = ImageSettings(**values)
    _validate(settings)
    return settings
