"""File-backed persistence for the roster and the current game."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import orjson
import structlog

from ..core.errors import ValidationError
from ..core.game import Game
from ..core.player import Player

LOGGER = structlog.get_logger(__name__)

SESSION_FILENAME = "freecolo-session.json"


@dataclass(slots=True)
class SavedSession:
    """What the store hands back: the roster being edited and the live game."""

    players: List[Player] = field(default_factory=list)
    game: Optional[Game] = None


class SessionStore:
    """Stores one session document in ``directory``."""

    def __init__(self, directory: Path, *, filename: str = SESSION_FILENAME) -> None:
        self.directory = Path(directory)
        self.path = self.directory / filename

    def save(self, players: Sequence[Player], game: Optional[Game] = None) -> Path:
        document: Dict[str, Any] = {
            "players": [player.to_dict() for player in players],
            "game": game.serialize() if game is not None else None,
        }
        self.directory.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_bytes(orjson.dumps(document, option=orjson.OPT_INDENT_2))
        os.replace(tmp_path, self.path)
        LOGGER.debug("session_store.saved", path=str(self.path), has_game=game is not None)
        return self.path

    def load(self) -> SavedSession:
        """Return the stored session; corrupt data counts as no saved session."""

        if not self.path.exists():
            return SavedSession()
        try:
            document = orjson.loads(self.path.read_bytes())
            players = [Player.from_dict(item) for item in document.get("players") or []]
            raw_game = document.get("game")
            game = Game.deserialize(raw_game) if raw_game else None
        except (orjson.JSONDecodeError, ValidationError, AttributeError, TypeError) as exc:
            LOGGER.error("session_store.load_failed", path=str(self.path), error=str(exc))
            return SavedSession()
        return SavedSession(players=players, game=game)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
            LOGGER.info("session_store.cleared", path=str(self.path))
