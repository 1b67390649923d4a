"""
Completed-game history: record construction and pure updates to GameStats.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from scorekeeper.logic.settings import DEFAULT_HISTORY_LIMIT
from scorekeeper.logic.state import CompletedGame, GameSession, GameStats

if TYPE_CHECKING:
    from scorekeeper.logic.state import Player


def build_completed_game(session: GameSession) -> CompletedGame | None:
    """
    Return the history record for a finished session.

    Returns None when the session has no winner or no finish time.
    """
    if session.winner is None or session.finished_at is None or session.started_at is None:
        return None
    return CompletedGame(
        id=session.id,
        players=session.players,
        winner=session.winner,
        rounds=len(session.rounds),
        started_at=session.started_at,
        finished_at=session.finished_at,
    )


def add_completed_game(
    stats: GameStats,
    game: CompletedGame,
    history_limit: int = DEFAULT_HISTORY_LIMIT,
) -> GameStats | None:
    """
    Return stats with ``game`` prepended, or None if its id is already recorded.

    ``games_played`` keeps counting past the history cap; only the most recent
    ``history_limit`` records are kept.
    """
    if any(g.id == game.id for g in stats.games_history):
        return None
    history = (game, *stats.games_history)[:history_limit]
    return stats.model_copy(update={"games_played": stats.games_played + 1, "games_history": history})


def remove_completed_game(stats: GameStats, game_id: str) -> GameStats | None:
    """Return stats without the given game, or None if no record has that id."""
    history = tuple(g for g in stats.games_history if g.id != game_id)
    if len(history) == len(stats.games_history):
        return None
    return stats.model_copy(update={"games_played": max(0, stats.games_played - 1), "games_history": history})


def standings(game: CompletedGame) -> list[Player]:
    """Players of a completed game ordered by final total, highest first (stable on ties)."""
    return sorted(game.players, key=lambda p: p.total_score, reverse=True)
