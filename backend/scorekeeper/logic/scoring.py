"""
Score accumulation with the bust rule.

Totals are always derived from the full history (rounds plus player-added
events); nothing here reads or trusts a stored ``total_score``.

Bust rule: a round's delta is discarded for a player when applying it would
push that player's running total above the winning score. Negative deltas
and negative totals never bust.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from scorekeeper.logic.state import Player, PlayerAddedEvent, Round


def compute_player_total(
    player_id: str,
    rounds: Sequence[Round],
    player_added_events: Sequence[PlayerAddedEvent],
    winning_score: int,
) -> int:
    """
    Return one player's total from the session history.

    A player with a player-added event starts at that event's initial score
    and only takes part in rounds recorded after the event. Every other player
    starts at 0 and takes part in every round.
    """
    join_event = next((e for e in player_added_events if e.player_id == player_id), None)
    running = join_event.initial_score if join_event is not None else 0
    joined_at = join_event.timestamp if join_event is not None else None

    for round_ in rounds:
        if joined_at is not None and round_.timestamp < joined_at:
            continue
        candidate = running + round_.score_for(player_id)
        if candidate > winning_score:
            continue
        running = candidate

    return running


def compute_totals(
    players: Sequence[Player],
    rounds: Sequence[Round],
    player_added_events: Sequence[PlayerAddedEvent],
    winning_score: int,
) -> dict[str, int]:
    """Return ``{player_id: total}`` for every player, in roster order."""
    return {p.id: compute_player_total(p.id, rounds, player_added_events, winning_score) for p in players}


def recompute_players(
    players: Sequence[Player],
    rounds: Sequence[Round],
    player_added_events: Sequence[PlayerAddedEvent],
    winning_score: int,
) -> tuple[Player, ...]:
    """
    Return the roster with every ``total_score`` re-derived from history.

    Players whose total did not change are returned as-is.
    """
    totals = compute_totals(players, rounds, player_added_events, winning_score)
    return tuple(
        p if p.total_score == totals[p.id] else p.model_copy(update={"total_score": totals[p.id]}) for p in players
    )


def evaluate_ignored_scores(
    players: Sequence[Player],
    rounds: Sequence[Round],
    player_added_events: Sequence[PlayerAddedEvent],
    winning_score: int,
    new_scores: Mapping[str, int],
) -> dict[str, bool]:
    """
    Decide which contributions of a proposed round would bust.

    ``rounds`` and ``player_added_events`` describe the state *before* the new
    round. Only busted players are included in the result.
    """
    current = compute_totals(players, rounds, player_added_events, winning_score)
    return {
        player_id: True
        for player_id, total in current.items()
        if total + new_scores.get(player_id, 0) > winning_score
    }
