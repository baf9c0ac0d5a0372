"""Core package for the FreeColo party game engine."""

from . import config, services
from .core import catalog, errors, game, player, schemas, selector

# Direct re-exports of the public API
from .core.catalog import build_catalog, load_question_catalog
from .core.errors import GameError, InvalidStateError, ValidationError
from .core.game import Game, GameStats, GameStatus, GameTurn
from .core.player import Player
from .core.schemas import Question, QuestionCatalog, QuestionType
from .core.selector import PlayerSelector, PlayerStats, SelectionStats

__all__ = [
    "catalog",
    "config",
    "errors",
    "game",
    "player",
    "schemas",
    "selector",
    "services",
    "Game",
    "GameError",
    "GameStats",
    "GameStatus",
    "GameTurn",
    "InvalidStateError",
    "Player",
    "PlayerSelector",
    "PlayerStats",
    "Question",
    "QuestionCatalog",
    "QuestionType",
    "SelectionStats",
    "ValidationError",
    "build_catalog",
    "load_question_catalog",
]
