"""Game session state machine.

A game moves ``SETUP -> PLAYING -> FINISHED``. Pausing drops back to
``SETUP`` while keeping the cursor and history; ``reset`` returns to a fresh
``SETUP`` from any state.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from .errors import InvalidStateError, ValidationError
from .player import Player
from .schemas import GameSnapshot, Question, QuestionCatalog, TurnSnapshot
from .selector import PlayerSelector, PlayerStats, SelectionStats

LOGGER = structlog.get_logger(__name__)

PLAYER_PLACEHOLDER = "{player}"


class GameStatus(str, Enum):
    """Game states."""

    SETUP = "setup"
    PLAYING = "playing"
    FINISHED = "finished"


@dataclass(frozen=True, slots=True)
class GameTurn:
    """One question paired with the player who got it."""

    question: Question
    selected_player: Player
    processed_text: str
    turn_number: int
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def copy(self) -> "GameTurn":
        return replace(self, selected_player=self.selected_player.clone())

    def to_snapshot(self) -> TurnSnapshot:
        return TurnSnapshot(
            question=self.question,
            selected_player=self.selected_player.to_snapshot(),
            processed_text=self.processed_text,
            turn_number=self.turn_number,
            timestamp=self.timestamp,
        )

    @classmethod
    def from_snapshot(cls, snapshot: TurnSnapshot) -> "GameTurn":
        return cls(
            question=snapshot.question,
            selected_player=Player.from_snapshot(snapshot.selected_player),
            processed_text=snapshot.processed_text,
            turn_number=snapshot.turn_number,
            timestamp=snapshot.timestamp,
        )


@dataclass(frozen=True, slots=True)
class GameStats:
    """Progress summary of a game."""

    total_turns: int
    questions_remaining: int
    completion_percentage: float
    player_stats: List[PlayerStats]
    game_start_time: datetime
    game_duration: timedelta


def process_question_text(text: str, player: Player) -> str:
    """Substitute every placeholder in ``text`` with the player's name."""

    return text.replace(PLAYER_PLACEHOLDER, player.name)


class Game:
    """A single party-game session over a roster and a question catalog."""

    def __init__(self, players: Iterable[Player], catalog: QuestionCatalog):
        roster = [player.clone() for player in players]
        if not roster:
            raise ValidationError("At least one player is required")
        if not catalog.questions:
            raise ValidationError("Question catalog cannot be empty")
        if len(roster) < catalog.metadata.min_players:
            raise ValidationError(
                f"Not enough players for this question catalog "
                f"({len(roster)} < {catalog.metadata.min_players})"
            )
        if len(roster) > catalog.metadata.max_players:
            raise ValidationError(
                f"Too many players for this question catalog "
                f"({len(roster)} > {catalog.metadata.max_players})"
            )

        self._selector = PlayerSelector(roster)
        self._catalog = catalog.model_copy(deep=True)
        self._current_question_index = 0
        self._game_start_time = datetime.now(UTC)
        self._history: List[GameTurn] = []
        self._status = GameStatus.SETUP

    # State machine ------------------------------------------------------------

    def start(self) -> None:
        if self._status == GameStatus.PLAYING:
            raise InvalidStateError("Game is already active")
        if self._status == GameStatus.FINISHED:
            raise InvalidStateError("Game is already finished")
        self._status = GameStatus.PLAYING
        self._game_start_time = datetime.now(UTC)
        LOGGER.info(
            "game.started",
            players=len(self._selector),
            questions=len(self._catalog.questions),
            catalog=self._catalog.id,
        )

    def advance(self) -> GameTurn:
        """Serve the question under the cursor to the next fair player."""

        if self._current_question_index >= len(self._catalog.questions):
            raise InvalidStateError("Game is already finished")
        if self._status != GameStatus.PLAYING:
            raise InvalidStateError("Game is not active")

        question = self._catalog.questions[self._current_question_index]
        selected = self._selector.select_next()
        turn = GameTurn(
            question=question,
            selected_player=selected.clone(),
            processed_text=process_question_text(question.text, selected),
            turn_number=len(self._history) + 1,
        )
        self._history.append(turn)
        self._current_question_index += 1

        LOGGER.info(
            "game.turn_advanced",
            turn=turn.turn_number,
            question_id=question.id,
            player_id=selected.id,
        )

        if self._current_question_index >= len(self._catalog.questions):
            self._status = GameStatus.FINISHED
            LOGGER.info("game.finished", turns=len(self._history))

        return turn

    def pause(self) -> None:
        if self._status != GameStatus.PLAYING:
            raise InvalidStateError("Game is not active")
        self._status = GameStatus.SETUP
        LOGGER.info("game.paused", turn=len(self._history))

    def resume(self) -> None:
        if self._status in (GameStatus.PLAYING, GameStatus.FINISHED):
            raise InvalidStateError("Game is already active or finished")
        self._status = GameStatus.PLAYING
        LOGGER.info("game.resumed", turn=len(self._history))

    def reset(self) -> None:
        self._status = GameStatus.SETUP
        self._current_question_index = 0
        self._history = []
        self._game_start_time = datetime.now(UTC)
        self._selector.reset_all_selections()
        LOGGER.info("game.reset")

    # Roster -------------------------------------------------------------------

    def add_player(self, player: Player) -> None:
        if self._status == GameStatus.PLAYING:
            raise InvalidStateError("Cannot modify players while game is active")
        if len(self._selector) + 1 > self._catalog.metadata.max_players:
            raise ValidationError("Too many players for this question catalog")
        self._selector.add_player(player.clone())

    def remove_player(self, player: Player) -> None:
        if self._status == GameStatus.PLAYING:
            raise InvalidStateError("Cannot modify players while game is active")
        if len(self._selector) - 1 < self._catalog.metadata.min_players:
            raise ValidationError("Not enough players for this question catalog")
        self._selector.remove_player(player)

    # Queries ------------------------------------------------------------------

    @property
    def current_question_index(self) -> int:
        return self._current_question_index

    @property
    def catalog(self) -> QuestionCatalog:
        return self._catalog

    def get_current_question(self) -> Optional[Question]:
        if self._status != GameStatus.PLAYING:
            return None
        if self._current_question_index >= len(self._catalog.questions):
            return None
        return self._catalog.questions[self._current_question_index]

    def get_stats(self) -> GameStats:
        total_questions = len(self._catalog.questions)
        completed = len(self._history)
        completion = completed / total_questions * 100 if total_questions > 0 else 0.0
        return GameStats(
            total_turns=completed,
            questions_remaining=total_questions - completed,
            completion_percentage=completion,
            player_stats=self._selector.get_player_stats(),
            game_start_time=self._game_start_time,
            game_duration=datetime.now(UTC) - self._game_start_time,
        )

    def get_selection_stats(self) -> SelectionStats:
        return self._selector.get_selection_stats()

    def get_game_history(self) -> List[GameTurn]:
        return [turn.copy() for turn in self._history]

    def get_players(self) -> List[Player]:
        return [player.clone() for player in self._selector.get_players()]

    def get_status(self) -> GameStatus:
        return self._status

    def is_game_active(self) -> bool:
        return self._status == GameStatus.PLAYING

    def is_game_finished(self) -> bool:
        return self._status == GameStatus.FINISHED

    # Snapshots ----------------------------------------------------------------

    def to_snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            players=[player.to_snapshot() for player in self._selector.get_players()],
            question_catalog=self._catalog,
            current_question_index=self._current_question_index,
            game_start_time=self._game_start_time,
            is_game_active=self.is_game_active(),
            is_game_finished=self.is_game_finished(),
            game_history=[turn.to_snapshot() for turn in self._history],
        )

    def serialize(self) -> Dict[str, Any]:
        """Return a plain JSON-ready snapshot of the whole session."""

        return self.to_snapshot().model_dump(by_alias=True, mode="json")

    @classmethod
    def from_snapshot(cls, snapshot: GameSnapshot) -> "Game":
        game = cls(
            [Player.from_snapshot(player) for player in snapshot.players],
            snapshot.question_catalog,
        )
        game._current_question_index = snapshot.current_question_index
        if snapshot.game_start_time is not None:
            game._game_start_time = snapshot.game_start_time
        game._history = [GameTurn.from_snapshot(turn) for turn in snapshot.game_history]
        for turn in game._history:
            game._selector.mark_selected_at(turn.selected_player.id, turn.timestamp)

        exhausted = game._current_question_index >= len(game._catalog.questions)
        if snapshot.is_game_finished or exhausted:
            game._status = GameStatus.FINISHED
        elif snapshot.is_game_active:
            game._status = GameStatus.PLAYING
        else:
            game._status = GameStatus.SETUP
        return game

    @classmethod
    def deserialize(cls, data: Mapping[str, Any]) -> "Game":
        """Rebuild a game from :meth:`serialize` output.

        Raises:
            ValidationError: if players, catalog or cursor is missing, or the
                snapshot is otherwise inconsistent.
        """

        try:
            snapshot = GameSnapshot.model_validate(data)
        except PydanticValidationError as exc:
            raise ValidationError("Invalid game snapshot", exc.errors()) from exc
        return cls.from_snapshot(snapshot)

    def clone(self) -> "Game":
        return Game.deserialize(self.serialize())
