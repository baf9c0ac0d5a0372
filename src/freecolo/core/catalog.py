"""Question catalog provider."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

import orjson
import structlog
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .schemas import CatalogMetadata, Difficulty, Question, QuestionCatalog

LOGGER = structlog.get_logger(__name__)

BUNDLED_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "questions.json"
DIFFICULTY_ORDER = [level.value for level in Difficulty]


def parse_question_catalog(data: Mapping[str, Any]) -> QuestionCatalog:
    """Validate a decoded catalog document."""

    try:
        return QuestionCatalog.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError("Invalid question catalog", exc.errors()) from exc


def load_question_catalog(path: Optional[Union[str, Path]] = None) -> QuestionCatalog:
    """Load a catalog from ``path``, or the bundled one when omitted."""

    source = Path(path) if path is not None else BUNDLED_CATALOG_PATH
    try:
        raw = source.read_bytes()
    except OSError as exc:
        raise ValidationError(f"Cannot read catalog file {source}: {exc}") from exc
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ValidationError(f"Catalog file {source} is not valid JSON: {exc}") from exc

    catalog = parse_question_catalog(data)
    LOGGER.info(
        "catalog.loaded",
        path=str(source),
        catalog=catalog.id,
        questions=len(catalog.questions),
    )
    return catalog


def build_catalog(
    questions: Iterable[Question],
    *,
    catalog_id: str,
    name: str,
    version: str = "1.0.0",
    description: str = "",
    min_players: Optional[int] = None,
    max_players: Optional[int] = None,
) -> QuestionCatalog:
    """Assemble a catalog, deriving its metadata from ``questions``.

    Player bounds default to the tightest range every question accepts:
    the largest per-question minimum and the smallest per-question maximum.
    """

    items = tuple(questions)
    tags = sorted({tag for question in items for tag in question.tags})
    levels = {question.difficulty.value for question in items if question.difficulty is not None}

    if min_players is None:
        min_players = max((q.min_players for q in items if q.min_players is not None), default=1)
    if max_players is None:
        max_players = min((q.max_players for q in items if q.max_players is not None), default=max(min_players, 10))

    try:
        metadata = CatalogMetadata(
            total_questions=len(items),
            tags=tuple(tags),
            difficulty=tuple(level for level in DIFFICULTY_ORDER if level in levels),
            min_players=min_players,
            max_players=max_players,
        )
    except PydanticValidationError as exc:
        raise ValidationError("Invalid catalog metadata", exc.errors()) from exc

    return QuestionCatalog(
        id=catalog_id,
        name=name,
        version=version,
        description=description,
        questions=items,
        metadata=metadata,
    )
