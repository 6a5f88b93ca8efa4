"""Review settings persistence.

Stores tuning values (window size, thresholds, transform parameters) as a
small versioned JSON document. Queue state itself is never written.

- Pure logic, no Qt import.
- Missing, corrupt, version-mismatched or invalid files produce defaults
  instead of raising.
- Writes go through a temp file and an atomic replace.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from reviewstack.config.settings import CONFIG_DIR
from reviewstack.services.settings_service import ReviewSettings

__all__ = ["load_settings", "save_settings", "CONFIG_VERSION", "DEFAULT_FILENAME"]

CONFIG_VERSION = 1  # Increment when structure changes

DEFAULT_FILENAME = "review_settings.json"

_logger = logging.getLogger(__name__)


def _resolve_path(base_dir: str | Path | None) -> Path:
    return Path(base_dir if base_dir is not None else CONFIG_DIR) / DEFAULT_FILENAME


def load_settings(base_dir: str | Path | None = None) -> ReviewSettings:
    path = _resolve_path(base_dir)
    if not path.exists():
        return ReviewSettings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict) or data.get("version") != CONFIG_VERSION:
            _logger.warning("Ignoring %s: unsupported settings version", path)
            return ReviewSettings()
        return ReviewSettings.from_dict(data.get("settings", {})).validate()
    except (OSError, ValueError, TypeError) as exc:
        # InvalidConfiguration and JSONDecodeError are both ValueErrors.
        _logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return ReviewSettings()


def save_settings(settings: ReviewSettings, base_dir: str | Path | None = None) -> Path:
    """Validate and persist ``settings``; returns the written path."""
    settings.validate()
    path = _resolve_path(base_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    payload = {"version": CONFIG_VERSION, "settings": settings.to_dict()}
    tmp.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
    tmp.replace(path)
    return path
