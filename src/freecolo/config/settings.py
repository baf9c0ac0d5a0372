"""Settings loaded from config/config.local.json and the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import orjson

DEFAULT_CONFIG_PATH = Path("config/config.local.json")
DEFAULT_SESSION_DIR = Path("runs")
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_MIN_PLAYERS = 2

ENV_CATALOG_PATH = "FREECOLO_CATALOG_PATH"
ENV_SESSION_DIR = "FREECOLO_SESSION_DIR"
ENV_LOG_LEVEL = "FREECOLO_LOG_LEVEL"
ENV_MIN_PLAYERS = "FREECOLO_MIN_PLAYERS"


@dataclass(slots=True)
class Settings:
    """Front-end settings. ``catalog_path`` of None means the bundled catalog."""

    catalog_path: Optional[Path] = None
    session_dir: Path = field(default_factory=lambda: DEFAULT_SESSION_DIR)
    log_level: str = DEFAULT_LOG_LEVEL
    min_players_to_start: int = DEFAULT_MIN_PLAYERS


def _as_int(value: Any, default: int) -> int:
    try:
        return max(1, int(value))
    except (TypeError, ValueError):
        return default


def load_settings(
    path: Path = DEFAULT_CONFIG_PATH,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Load settings from disk, falling back to defaults, then apply env overrides."""

    env = os.environ if environ is None else environ
    data: Dict[str, Any] = {}
    if path.exists():
        data = orjson.loads(path.read_bytes()) or {}

    catalog_path = env.get(ENV_CATALOG_PATH) or data.get("catalog_path")
    session_dir = env.get(ENV_SESSION_DIR) or data.get("session_dir")
    log_level = env.get(ENV_LOG_LEVEL) or data.get("log_level") or DEFAULT_LOG_LEVEL
    min_players = env.get(ENV_MIN_PLAYERS) or data.get("min_players_to_start")

    return Settings(
        catalog_path=Path(catalog_path) if catalog_path else None,
        session_dir=Path(session_dir) if session_dir else DEFAULT_SESSION_DIR,
        log_level=str(log_level).upper(),
        min_players_to_start=_as_int(min_players, DEFAULT_MIN_PLAYERS),
    )
