"""Snapshot persistence for the current session and completed-game stats.

Reads are forgiving: a missing, unreadable, or malformed payload is treated
as absence and logged, never raised. Writes propagate store errors to the
caller.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from scorekeeper.logic.settings import DEFAULT_HISTORY_LIMIT, DEFAULT_WINNING_SCORE
from scorekeeper.logic.state import GameSession, GameStats
from scorekeeper.logic.stats import add_completed_game, remove_completed_game

if TYPE_CHECKING:
    from scorekeeper.logic.state import CompletedGame
    from shared.storage import KeyValueStore

logger = structlog.get_logger()

CURRENT_GAME_KEY = "ron500_current_game"
STATS_KEY = "ron500_stats"


def _round_defaults(data: dict[str, Any]) -> dict[str, Any]:
    ignored = data.get("ignoredScores", data.get("ignored_scores")) or {}
    fields = {k: v for k, v in data.items() if k != "ignored_scores"}
    return {**fields, "ignoredScores": ignored}


def _apply_session_defaults(data: dict[str, Any]) -> dict[str, Any]:
    """Fill fields that older snapshots did not store.

    A non-numeric ``winningScore`` becomes the default target and rounds
    without ignored scores (under either key spelling) get an empty mapping.
    """
    winning_score = data.get("winningScore", data.get("winning_score"))
    if isinstance(winning_score, bool) or not isinstance(winning_score, int):
        data["winningScore"] = DEFAULT_WINNING_SCORE
        data.pop("winning_score", None)

    rounds = data.get("rounds")
    if isinstance(rounds, list):
        data["rounds"] = [_round_defaults(r) if isinstance(r, dict) else r for r in rounds]
    return data


class GameRepository:
    """Reads and writes snapshots through an opaque key-value store."""

    def __init__(self, store: KeyValueStore, *, history_limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self._store = store
        self._history_limit = history_limit

    def _read_json(self, key: str) -> Any | None:  # noqa: ANN401
        """Return the decoded payload for a key, or None if absent or undecodable."""
        try:
            raw = self._store.get(key)
        except OSError:
            logger.warning("failed to read stored snapshot", key=key, exc_info=True)
            return None
        except UnicodeDecodeError:
            logger.warning("discarding malformed snapshot", key=key, reason="not utf-8")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("discarding malformed snapshot", key=key)
            return None

    # --- current session ---

    def load_current_session(self) -> GameSession | None:
        """Return the persisted in-progress session, or None if absent or corrupt."""
        data = self._read_json(CURRENT_GAME_KEY)
        if data is None:
            return None
        if not isinstance(data, dict):
            logger.warning("discarding malformed snapshot", key=CURRENT_GAME_KEY)
            return None
        try:
            return GameSession.model_validate(_apply_session_defaults(data))
        except ValidationError as exc:
            logger.warning("discarding invalid session snapshot", key=CURRENT_GAME_KEY, errors=exc.error_count())
            return None

    def has_saved_session(self) -> bool:
        return self.load_current_session() is not None

    def save_current_session(self, session: GameSession) -> None:
        self._store.set(CURRENT_GAME_KEY, session.model_dump_json(by_alias=True))

    def clear_current_session(self) -> None:
        self._store.delete(CURRENT_GAME_KEY)

    # --- stats ---

    def load_stats(self) -> GameStats:
        """Return stored stats, falling back to empty stats if absent or corrupt."""
        data = self._read_json(STATS_KEY)
        if data is None:
            return GameStats()
        try:
            return GameStats.model_validate(data)
        except ValidationError as exc:
            logger.warning("discarding invalid stats snapshot", key=STATS_KEY, errors=exc.error_count())
            return GameStats()

    def _save_stats(self, stats: GameStats) -> None:
        self._store.set(STATS_KEY, stats.model_dump_json(by_alias=True))

    def append_completed_game(self, game: CompletedGame) -> bool:
        """Prepend a completed game to history.

        Idempotent by game id: returns False and writes nothing when the id
        is already recorded.
        """
        updated = add_completed_game(self.load_stats(), game, self._history_limit)
        if updated is None:
            logger.debug("completed game already recorded", game_id=game.id)
            return False
        self._save_stats(updated)
        logger.info("recorded completed game", game_id=game.id, games_played=updated.games_played)
        return True

    def clear_stats(self) -> None:
        self._store.delete(STATS_KEY)

    def delete_game(self, game_id: str) -> bool:
        """Remove a game from history. Returns whether a record was removed."""
        updated = remove_completed_game(self.load_stats(), game_id)
        if updated is None:
            return False
        self._save_stats(updated)
        logger.info("deleted completed game", game_id=game_id, games_played=updated.games_played)
        return True
