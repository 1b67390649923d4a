"""
Winner selection.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scorekeeper.logic.state import Player


def find_winner(players: Sequence[Player], winning_score: int) -> Player | None:
    """
    Return the first player (roster order) whose total equals the winning score.

    Only an exact match wins. Totals above the target cannot come from rounds
    because busted contributions are never applied.
    """
    return next((p for p in players if p.total_score == winning_score), None)


def find_leader(players: Sequence[Player]) -> Player | None:
    """
    Return the player with the highest total, used when a game is finished by hand.

    Ties go to the player who joined the roster first. Returns None for an
    empty roster.
    """
    leader: Player | None = None
    for player in players:
        if leader is None or player.total_score > leader.total_score:
            leader = player
    return leader
