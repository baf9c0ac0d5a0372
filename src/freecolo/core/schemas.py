"""Pydantic contracts for question catalogs and game snapshots."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class QuestionType(str, Enum):
    """Kinds of prompt a catalog can contain."""

    ACTION = "action"
    DARE = "dare"
    QUESTION = "question"
    RULE = "rule"


class Difficulty(str, Enum):
    """Difficulty levels."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Question(BaseModel):
    """A single prompt. ``text`` carries a ``{player}`` placeholder."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)
    type: QuestionType
    difficulty: Optional[Difficulty] = None
    tags: Tuple[str, ...] = ()
    min_players: Optional[int] = Field(None, alias="minPlayers", ge=1)
    max_players: Optional[int] = Field(None, alias="maxPlayers", ge=1)


class CatalogMetadata(BaseModel):
    """Aggregate catalog information and the player-count bounds."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total_questions: int = Field(..., alias="totalQuestions", ge=0)
    tags: Tuple[str, ...] = ()
    difficulty: Tuple[str, ...] = ()
    min_players: int = Field(..., alias="minPlayers", ge=1)
    max_players: int = Field(..., alias="maxPlayers", ge=1)

    @model_validator(mode="after")
    def _check_bounds(self) -> "CatalogMetadata":
        if self.min_players > self.max_players:
            raise ValueError(
                f"minPlayers ({self.min_players}) cannot exceed maxPlayers ({self.max_players})"
            )
        return self


class QuestionCatalog(BaseModel):
    """Ordered, immutable list of questions plus metadata."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    version: str = ""
    description: str = ""
    questions: Tuple[Question, ...]
    metadata: CatalogMetadata


class PlayerSnapshot(BaseModel):
    """Serialized form of a :class:`~freecolo.core.player.Player`."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    avatar: Optional[str] = None
    times_selected: int = Field(..., alias="timesSelected", ge=0)
    created_at: datetime = Field(..., alias="createdAt")


class TurnSnapshot(BaseModel):
    """Serialized form of a history entry."""

    model_config = ConfigDict(populate_by_name=True)

    question: Question
    selected_player: PlayerSnapshot = Field(..., alias="selectedPlayer")
    processed_text: str = Field(..., alias="processedText")
    turn_number: int = Field(..., alias="turnNumber", ge=1)
    timestamp: datetime


class GameSnapshot(BaseModel):
    """Self-contained, JSON-representable state of a whole game."""

    model_config = ConfigDict(populate_by_name=True)

    players: List[PlayerSnapshot]
    question_catalog: QuestionCatalog = Field(..., alias="questionCatalog")
    current_question_index: int = Field(..., alias="currentQuestionIndex", ge=0)
    game_start_time: Optional[datetime] = Field(None, alias="gameStartTime")
    is_game_active: bool = Field(False, alias="isGameActive")
    is_game_finished: bool = Field(False, alias="isGameFinished")
    game_history: List[TurnSnapshot] = Field(default_factory=list, alias="gameHistory")

    @model_validator(mode="after")
    def _check_cursor(self) -> "GameSnapshot":
        total = len(self.question_catalog.questions)
        if self.current_question_index > total:
            raise ValueError(
                f"currentQuestionIndex {self.current_question_index} is past the end of the catalog ({total})"
            )
        if self.current_question_index != len(self.game_history):
            raise ValueError(
                f"currentQuestionIndex {self.current_question_index} does not match "
                f"history length {len(self.game_history)}"
            )
        return self
