"""Configuration and persisted drill preferences."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

from .ingest import DEFAULT_CSV_URLS

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "dataset_path": "data/jehle_verb_database.csv",
    "dataset_urls": list(DEFAULT_CSV_URLS),
    "timeout": 60,
    "preferences_path": "out/preferences.json",
    "ignore_accents": True,
}


def load_config(path: str | Path) -> dict:
    """Load config JSON, filling unset keys from DEFAULT_CONFIG.

    Raises:
        ValueError: If the file exists but isn't a JSON object.
    """
    path = Path(path)
    cfg = dict(DEFAULT_CONFIG)
    if not path.exists():
        return cfg
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {path}: {e}")
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")
    cfg.update(data)
    return cfg


@dataclass
class Preferences:
    # None: not chosen yet, fall back to the config value.
    ignore_accents: Optional[bool] = None
    last_verb: Optional[str] = None
    last_mood: Optional[str] = None
    last_tense: Optional[str] = None


def load_preferences(path: str | Path | None) -> Preferences:
    """Read saved preferences; defaults if the file is missing or unreadable."""
    if not path:
        return Preferences()
    path = Path(path)
    if not path.exists():
        return Preferences()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Ignoring unreadable preferences %s: %s", path, e)
        return Preferences()
    if not isinstance(data, dict):
        return Preferences()
    known = {f.name for f in fields(Preferences)}
    return Preferences(**{k: v for k, v in data.items() if k in known})


def save_preferences(path: str | Path | None, prefs: Preferences) -> None:
    if not path:
        return
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(asdict(prefs), ensure_ascii=False, indent=2), encoding="utf-8")
    except OSError as e:
        logger.warning("Could not save preferences to %s: %s", path, e)
