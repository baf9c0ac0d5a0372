"""Fair, deterministic player rotation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Dict, Iterable, List, Optional

import structlog

from .errors import ValidationError
from .player import Player

LOGGER = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class SelectionStats:
    """Distribution of selection counts across the roster."""

    min_selections: int
    max_selections: int
    average_selections: float
    fairness_score: float


@dataclass(frozen=True, slots=True)
class PlayerStats:
    """Per-player selection summary."""

    player_id: str
    player_name: str
    times_selected: int
    selection_percentage: int
    last_selected_at: Optional[datetime] = None


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class PlayerSelector:
    """Picks the next player to act, always one of the least-selected.

    Ties are broken by roster order, so with equal counts the selector walks
    the roster round-robin and no two counts ever drift more than one apart
    while the roster is unchanged.
    """

    def __init__(self, players: Iterable[Player]):
        roster = list(players)
        if not roster:
            raise ValidationError("At least one player is required")
        if len({player.id for player in roster}) != len(roster):
            raise ValidationError("Duplicate players are not allowed")
        self._players: List[Player] = roster
        self._last_selected: Dict[str, datetime] = {}

    def __len__(self) -> int:
        return len(self._players)

    def select_next(self) -> Player:
        min_selections = min(player.times_selected for player in self._players)
        selected = next(p for p in self._players if p.times_selected == min_selections)
        selected.increment_selection()
        self._last_selected[selected.id] = datetime.now(UTC)
        LOGGER.debug(
            "selector.selected",
            player_id=selected.id,
            player=selected.name,
            times_selected=selected.times_selected,
        )
        return selected

    def get_players(self) -> List[Player]:
        return list(self._players)

    def get_selection_stats(self) -> SelectionStats:
        selections = [player.times_selected for player in self._players]
        min_selections = min(selections)
        max_selections = max(selections)
        average = sum(selections) / len(selections)

        fairness = 1.0
        if max_selections > 0:
            variance = sum((count - average) ** 2 for count in selections) / len(selections)
            deviation = math.sqrt(variance)
            if deviation > 0:
                fairness = max(0.0, 1.0 - deviation / max_selections)

        return SelectionStats(
            min_selections=min_selections,
            max_selections=max_selections,
            average_selections=average,
            fairness_score=fairness,
        )

    def add_player(self, player: Player) -> None:
        if any(existing.equals(player) for existing in self._players):
            raise ValidationError(f"Player {player.name!r} already exists")
        self._players.append(player)
        LOGGER.info("selector.player_added", player_id=player.id, roster_size=len(self._players))

    def remove_player(self, player: Player) -> None:
        if len(self._players) == 1:
            raise ValidationError("Cannot remove the last player")
        for index, existing in enumerate(self._players):
            if existing.equals(player):
                break
        else:
            raise ValidationError(f"Player {player.name!r} not found")
        del self._players[index]
        self._last_selected.pop(player.id, None)
        LOGGER.info("selector.player_removed", player_id=player.id, roster_size=len(self._players))

    def reset_all_selections(self) -> None:
        for player in self._players:
            player.reset_selection_count()
        self._last_selected.clear()

    def mark_selected_at(self, player_id: str, when: datetime) -> None:
        """Record ``when`` as the last selection time of ``player_id``."""

        if any(player.id == player_id for player in self._players):
            self._last_selected[player_id] = when

    def get_player_stats(self) -> List[PlayerStats]:
        total = sum(player.times_selected for player in self._players)
        return [
            PlayerStats(
                player_id=player.id,
                player_name=player.name,
                times_selected=player.times_selected,
                selection_percentage=(
                    _round_half_up(player.times_selected / total * 100) if total > 0 else 0
                ),
                last_selected_at=self._last_selected.get(player.id),
            )
            for player in self._players
        ]

    def clone(self) -> "PlayerSelector":
        copy = PlayerSelector(player.clone() for player in self._players)
        copy._last_selected = dict(self._last_selected)
        return copy
