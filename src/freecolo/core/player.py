"""Player entity: identity plus a mutable selection counter."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .schemas import PlayerSnapshot


def _clean_name(name: str) -> str:
    trimmed = (name or "").strip()
    if not trimmed:
        raise ValidationError("Player name cannot be empty")
    return trimmed


class Player:
    """A participant in a game. Equality and hashing go by ``id`` only."""

    __slots__ = ("_id", "_name", "avatar", "_times_selected", "_created_at")

    def __init__(
        self,
        name: str,
        avatar: Optional[str] = None,
        *,
        player_id: Optional[str] = None,
        times_selected: int = 0,
        created_at: Optional[datetime] = None,
    ) -> None:
        self._name = _clean_name(name)
        self.avatar = avatar
        self._id = player_id or uuid.uuid4().hex
        self.times_selected = times_selected
        self._created_at = created_at or datetime.now(UTC)

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def times_selected(self) -> int:
        return self._times_selected

    @times_selected.setter
    def times_selected(self, value: int) -> None:
        if value < 0:
            raise ValidationError("timesSelected cannot be negative")
        self._times_selected = value

    @property
    def created_at(self) -> datetime:
        return self._created_at

    def increment_selection(self) -> None:
        self.times_selected += 1

    def reset_selection_count(self) -> None:
        self.times_selected = 0

    def rename(self, new_name: str) -> None:
        self._name = _clean_name(new_name)

    def update_avatar(self, avatar: Optional[str] = None) -> None:
        self.avatar = avatar

    def to_snapshot(self) -> PlayerSnapshot:
        return PlayerSnapshot(
            id=self._id,
            name=self.name,
            avatar=self.avatar,
            times_selected=self.times_selected,
            created_at=self._created_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-ready dict with camelCase keys."""

        return self.to_snapshot().model_dump(by_alias=True, mode="json")

    @classmethod
    def from_snapshot(cls, snapshot: PlayerSnapshot) -> "Player":
        return cls(
            snapshot.name,
            snapshot.avatar,
            player_id=snapshot.id,
            times_selected=snapshot.times_selected,
            created_at=snapshot.created_at,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Player":
        """Rebuild a player from :meth:`to_dict` output.

        Raises:
            ValidationError: if ``id``, ``name``, ``timesSelected`` or
                ``createdAt`` is missing or malformed.
        """

        try:
            snapshot = PlayerSnapshot.model_validate(data)
        except PydanticValidationError as exc:
            raise ValidationError("Invalid player data", exc.errors()) from exc
        return cls.from_snapshot(snapshot)

    def clone(self) -> "Player":
        return Player(
            self.name,
            self.avatar,
            player_id=self._id,
            times_selected=self.times_selected,
            created_at=self._created_at,
        )

    def equals(self, other: object) -> bool:
        return isinstance(other, Player) and other._id == self._id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Player):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"Player(id={self._id!r}, name={self.name!r}, times_selected={self.times_selected})"
