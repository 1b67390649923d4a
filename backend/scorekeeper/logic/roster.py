"""
Player roster: name validation, the starting roster, and mid-game additions.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import structlog

from scorekeeper.logic.exceptions import (
    DuplicateNameError,
    EmptyNameError,
    InvalidScoreError,
    InvalidWinningScoreError,
    NotEnoughPlayersError,
)
from scorekeeper.logic.ids import next_timestamp
from scorekeeper.logic.state import GameSession, Player, PlayerAddedEvent

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from scorekeeper.logic.ids import Clock, IdSource

logger = structlog.get_logger()


def normalize_name(name: str) -> str:
    """Return the trimmed name, raising EmptyNameError when nothing is left."""
    trimmed = name.strip()
    if not trimmed:
        raise EmptyNameError("player name is required")
    return trimmed


def ensure_unique_name(name: str, existing_names: Iterable[str]) -> None:
    """Raise DuplicateNameError if ``name`` matches an existing name, ignoring case."""
    lowered = name.lower()
    if any(existing.lower() == lowered for existing in existing_names):
        raise DuplicateNameError(name)


def parse_winning_score(value: int | str) -> int:
    """
    Validate a winning score given as an int or a numeric string.

    Raises:
        InvalidWinningScoreError: If the value is not an integer or is not positive.

    """
    if isinstance(value, bool):
        raise InvalidWinningScoreError(f"winning score must be a number, got {value!r}")
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise InvalidWinningScoreError(f"winning score must be a number, got {value!r}") from None
    if not isinstance(value, int):
        raise InvalidWinningScoreError(f"winning score must be a number, got {value!r}")
    if value <= 0:
        raise InvalidWinningScoreError(f"winning score must be greater than 0, got {value}")
    return value


def build_start_roster(names: Sequence[str], *, ids: IdSource, min_players: int) -> tuple[Player, ...]:
    """
    Build the starting roster from the names entered at setup.

    Blank entries are dropped before counting. The remaining names must number
    at least ``min_players`` and be unique ignoring case.
    """
    cleaned = [n.strip() for n in names if n.strip()]
    if len(cleaned) < min_players:
        raise NotEnoughPlayersError(required=min_players, given=len(cleaned))

    seen: list[str] = []
    for name in cleaned:
        ensure_unique_name(name, seen)
        seen.append(name)

    return tuple(Player(id=ids(), name=name) for name in cleaned)


def add_player(
    session: GameSession,
    name: str,
    initial_score: int,
    *,
    ids: IdSource,
    clock: Clock,
) -> GameSession:
    """
    Return a new session with a player joined mid-game.

    Records a PlayerAddedEvent so the score accumulator starts the player at
    ``initial_score`` (which may be negative) and skips earlier rounds.
    Totals are not recomputed here.
    """
    trimmed = normalize_name(name)
    ensure_unique_name(trimmed, (p.name for p in session.players))
    if isinstance(initial_score, bool) or not isinstance(initial_score, int):
        raise InvalidScoreError(f"initial score must be an integer, got {initial_score!r}")

    player = Player(id=ids(), name=trimmed, total_score=initial_score)
    event = PlayerAddedEvent(
        id=ids(),
        player_id=player.id,
        player_name=trimmed,
        initial_score=initial_score,
        timestamp=next_timestamp(clock, session.event_timestamps()),
    )
    logger.info("player joined mid-game", player_id=player.id, initial_score=initial_score)
    return session.model_copy(
        update={
            "players": (*session.players, player),
            "player_added_events": (*session.player_added_events, event),
        }
    )


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def suggest_initial_score(players: Sequence[Player], step: int = 5) -> int:
    """
    Suggest a starting score for a late joiner.

    The average of current totals, rounded to the nearest multiple of ``step``
    (halves round up). An empty roster suggests 0.
    """
    if not players:
        return 0
    average = _round_half_up(sum(p.total_score for p in players) / len(players))
    return _round_half_up(average / step) * step
