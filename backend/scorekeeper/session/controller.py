"""Single owner of the active game session.

GameController runs every command through the pure state machine, keeps the
resulting snapshot, and then mirrors it to persistence. The in-memory
snapshot is authoritative: a failed write is logged and never rolls the
session back.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from scorekeeper.logic.commands import (
    AddPlayerCommand,
    AddRoundCommand,
    FinishGameCommand,
    LoadGameCommand,
    ResetGameCommand,
    StartGameCommand,
    UndoRoundCommand,
)
from scorekeeper.logic.enums import GamePhase
from scorekeeper.logic.game import apply_command
from scorekeeper.logic.ids import new_id, utc_now
from scorekeeper.logic.roster import suggest_initial_score
from scorekeeper.logic.settings import GameRules
from scorekeeper.logic.state import GameSession
from shared.logging import bind_game_context

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from scorekeeper.logic.commands import GameCommand
    from scorekeeper.logic.game import TransitionResult
    from scorekeeper.logic.ids import Clock, IdSource
    from scorekeeper.logic.state import GameStats
    from scorekeeper.persistence.repository import GameRepository

logger = structlog.get_logger()


class GameController:
    """Dispatch commands against the one active session and persist the outcome.

    After each transition:
    - a newly finished game is appended to history and its snapshot cleared
      (the snapshot is cleared even when the history write fails);
    - a reset clears the snapshot;
    - an active session is saved as the current snapshot.
    """

    def __init__(
        self,
        repository: GameRepository,
        *,
        rules: GameRules | None = None,
        ids: IdSource = new_id,
        clock: Clock = utc_now,
    ) -> None:
        self._repository = repository
        self._rules = rules or GameRules()
        self._ids = ids
        self._clock = clock
        self._session = GameSession()

    @property
    def session(self) -> GameSession:
        return self._session

    @property
    def rules(self) -> GameRules:
        return self._rules

    def dispatch(self, command: GameCommand) -> GameSession:
        """Apply a command and return the new session.

        GameRuleError from validation propagates with the session unchanged.
        """
        result = apply_command(self._session, command, rules=self._rules, ids=self._ids, clock=self._clock)
        if result.session.id != self._session.id:
            bind_game_context(result.session.id)
        self._session = result.session
        self._persist(result)
        return self._session

    def _persist(self, result: TransitionResult) -> None:
        session = result.session
        if result.completed_game is not None:
            try:
                self._repository.append_completed_game(result.completed_game)
            except OSError:
                logger.exception("failed to record completed game", game_id=session.id)
        try:
            if result.clear_snapshot:
                self._repository.clear_current_session()
            elif session.phase is GamePhase.ACTIVE:
                self._repository.save_current_session(session)
        except OSError:
            logger.exception("failed to persist game state", game_id=session.id, phase=session.phase)

    # --- commands ---

    def start_new_game(self, player_names: Sequence[str], winning_score: int | str | None = None) -> GameSession:
        return self.dispatch(StartGameCommand(player_names=tuple(player_names), winning_score=winning_score))

    def add_round(self, scores: Mapping[str, int]) -> GameSession:
        return self.dispatch(AddRoundCommand(scores=dict(scores)))

    def add_player(self, name: str, initial_score: int | None = None) -> GameSession:
        return self.dispatch(AddPlayerCommand(name=name, initial_score=initial_score))

    def undo_last_round(self) -> GameSession:
        return self.dispatch(UndoRoundCommand())

    def reset_game(self) -> GameSession:
        return self.dispatch(ResetGameCommand())

    def finish_game(self) -> GameSession:
        return self.dispatch(FinishGameCommand())

    # --- saved session ---

    def has_saved_game(self) -> bool:
        return self._repository.has_saved_session()

    def load_saved_game(self) -> bool:
        """Replace the empty session with the persisted one. Returns False if none is saved."""
        saved = self._repository.load_current_session()
        if saved is None:
            return False
        self.dispatch(LoadGameCommand(session=saved))
        return True

    # --- queries ---

    def suggested_initial_score(self) -> int:
        return suggest_initial_score(self._session.players, self._rules.score_rounding_step)

    def stats(self) -> GameStats:
        return self._repository.load_stats()

    def clear_stats(self) -> None:
        self._repository.clear_stats()

    def delete_game(self, game_id: str) -> bool:
        return self._repository.delete_game(game_id)
