"""
Frozen state models for a scorekeeping session.

Every model is immutable; transitions build new snapshots with
``model_copy(update=...)`` so earlier snapshots stay valid. The serialized
shape uses camelCase keys (``totalScore``, ``ignoredScores``, ...) and
snake_case field names are accepted on input as well.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from types import MappingProxyType

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from scorekeeper.logic.enums import GamePhase
from scorekeeper.logic.settings import DEFAULT_WINNING_SCORE


class SnapshotModel(BaseModel):
    """Base for all persisted models: frozen, camelCase on the wire."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Player(SnapshotModel):
    """
    A player in the session.

    ``total_score`` is always the value the score accumulator derives from the
    session history; it is never set independently.
    """

    id: str
    name: str
    total_score: int = 0


class Round(SnapshotModel):
    """
    One recorded round of score deltas.

    ``ignored_scores`` holds the bust decision made when the round was
    appended and is never recomputed. Only busted players appear in it.
    Both mappings are read-only views; they dump back to plain objects.
    """

    id: str
    round_number: int = Field(ge=1)
    scores: Mapping[str, int] = Field(default_factory=dict, validate_default=True)  # player_id -> delta
    timestamp: AwareDatetime
    ignored_scores: Mapping[str, bool] = Field(default_factory=dict, validate_default=True)  # player_id -> busted

    @field_validator("scores", "ignored_scores")
    @classmethod
    def _freeze_mapping(cls, value: Mapping[str, object]) -> Mapping[str, object]:
        return MappingProxyType(dict(value))

    @field_serializer("scores", "ignored_scores")
    def _dump_mapping(self, value: Mapping[str, object]) -> dict[str, object]:
        return dict(value)

    def score_for(self, player_id: str) -> int:
        return self.scores.get(player_id, 0)

    def is_ignored(self, player_id: str) -> bool:
        return self.ignored_scores.get(player_id, False)


class PlayerAddedEvent(SnapshotModel):
    """A player joining mid-game with a baseline score."""

    id: str
    player_id: str
    player_name: str
    initial_score: int
    timestamp: AwareDatetime


class GameSession(SnapshotModel):
    """
    The single active session.

    ``GameSession()`` is the empty session (no id, no players). ``finished_at``
    is set exactly when ``winner`` is.
    """

    id: str = ""
    players: tuple[Player, ...] = ()
    rounds: tuple[Round, ...] = ()
    player_added_events: tuple[PlayerAddedEvent, ...] = ()
    winner: Player | None = None
    started_at: AwareDatetime | None = None
    finished_at: AwareDatetime | None = None
    winning_score: int = Field(default=DEFAULT_WINNING_SCORE, gt=0)

    @property
    def phase(self) -> GamePhase:
        if not self.players:
            return GamePhase.EMPTY
        if self.winner is not None:
            return GamePhase.FINISHED
        return GamePhase.ACTIVE

    def get_player(self, player_id: str) -> Player | None:
        return next((p for p in self.players if p.id == player_id), None)

    def event_timestamps(self) -> list[datetime]:
        """Timestamps of all rounds and player additions, in no particular order."""
        return [r.timestamp for r in self.rounds] + [e.timestamp for e in self.player_added_events]


class CompletedGame(SnapshotModel):
    """History record written once per finished game."""

    id: str
    players: tuple[Player, ...]
    winner: Player
    rounds: int  # number of rounds played
    started_at: AwareDatetime
    finished_at: AwareDatetime


class GameStats(SnapshotModel):
    """Completed-game log, newest first."""

    games_played: int = 0
    games_history: tuple[CompletedGame, ...] = ()
