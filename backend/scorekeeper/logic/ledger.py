"""
Round ledger: append and LIFO undo over the session's rounds.

Neither operation recomputes player totals; the state machine does that
after every ledger change.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from scorekeeper.logic.exceptions import InvalidScoreError
from scorekeeper.logic.ids import next_timestamp
from scorekeeper.logic.scoring import evaluate_ignored_scores
from scorekeeper.logic.state import GameSession, Round

if TYPE_CHECKING:
    from collections.abc import Mapping

    from scorekeeper.logic.ids import Clock, IdSource

logger = structlog.get_logger()


def validate_round_scores(session: GameSession, scores: Mapping[str, int]) -> dict[str, int]:
    """
    Check a round's score map against the roster.

    Keys must be ids of current players and values plain integers. Players
    missing from the map score 0 for the round.

    Raises:
        InvalidScoreError: On an unknown player id or a non-integer value.

    """
    roster_ids = {p.id for p in session.players}
    validated: dict[str, int] = {}
    for player_id, delta in scores.items():
        if player_id not in roster_ids:
            raise InvalidScoreError(f"unknown player id in round scores: {player_id!r}")
        if isinstance(delta, bool) or not isinstance(delta, int):
            raise InvalidScoreError(f"score for player {player_id!r} must be an integer, got {delta!r}")
        validated[player_id] = delta
    return validated


def append_round(
    session: GameSession,
    scores: Mapping[str, int],
    *,
    ids: IdSource,
    clock: Clock,
) -> GameSession:
    """
    Return a new session with one round appended.

    The round's ``ignored_scores`` is evaluated against the session as it was
    before the append and frozen into the round.
    """
    validated = validate_round_scores(session, scores)
    ignored = evaluate_ignored_scores(
        session.players,
        session.rounds,
        session.player_added_events,
        session.winning_score,
        validated,
    )
    new_round = Round(
        id=ids(),
        round_number=len(session.rounds) + 1,
        scores=validated,
        timestamp=next_timestamp(clock, session.event_timestamps()),
        ignored_scores=ignored,
    )
    if ignored:
        logger.debug("round contributions busted", round_number=new_round.round_number, player_ids=sorted(ignored))
    return session.model_copy(update={"rounds": (*session.rounds, new_round)})


def undo_last_round(session: GameSession) -> GameSession:
    """
    Return a new session without its most recent round.

    A session with no rounds is returned unchanged. Otherwise the winner and
    finish time are always cleared, even when removing the round would not
    change any total.
    """
    if not session.rounds:
        return session
    return session.model_copy(
        update={
            "rounds": session.rounds[:-1],
            "winner": None,
            "finished_at": None,
        }
    )
