"""Core game logic and data structures."""

from . import catalog, errors, game, player, schemas, selector

__all__ = ["catalog", "errors", "game", "player", "schemas", "selector"]
