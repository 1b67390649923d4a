"""
Session state machine.

``apply_command`` is a pure function from (session, command) to a new
session. Every handler validates first and builds the new snapshot last,
so a raised GameRuleError leaves the caller's session untouched.

Phases: EMPTY (no players) -> ACTIVE (no winner) -> FINISHED (winner).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

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
from scorekeeper.logic.enums import CommandType, FinishReason, GamePhase
from scorekeeper.logic.exceptions import InvalidActionError
from scorekeeper.logic.ids import new_id, next_timestamp, utc_now
from scorekeeper.logic.ledger import append_round, undo_last_round
from scorekeeper.logic.roster import (
    add_player,
    build_start_roster,
    parse_winning_score,
    suggest_initial_score,
)
from scorekeeper.logic.scoring import recompute_players
from scorekeeper.logic.settings import GameRules
from scorekeeper.logic.state import GameSession
from scorekeeper.logic.stats import build_completed_game
from scorekeeper.logic.win import find_leader, find_winner

if TYPE_CHECKING:
    from scorekeeper.logic.commands import GameCommand
    from scorekeeper.logic.ids import Clock, IdSource
    from scorekeeper.logic.state import CompletedGame

logger = structlog.get_logger()


class TransitionResult(NamedTuple):
    """
    Outcome of one command.

    ``completed_game`` is set only by the transition that moved the session
    into FINISHED; the caller records it in history. ``clear_snapshot`` asks
    the caller to drop the persisted in-progress snapshot.
    """

    session: GameSession
    completed_game: CompletedGame | None = None
    finish_reason: FinishReason | None = None
    clear_snapshot: bool = False


def _require_phase(session: GameSession, command: CommandType, allowed: set[GamePhase], reason: str) -> None:
    if session.phase not in allowed:
        raise InvalidActionError(command=command.value, phase=session.phase.value, reason=reason)


def settle(session: GameSession, clock: Clock, *, detect_winner: bool = True) -> GameSession:
    """
    Recompute every total and, unless disabled, run win detection.

    A session that already has a winner keeps it along with its finish time:
    earlier players' totals cannot change without a ledger change, and the
    ledger's undo clears the winner itself. Undo settles without detection so
    the session stays ACTIVE until the next round.
    """
    players = recompute_players(
        session.players,
        session.rounds,
        session.player_added_events,
        session.winning_score,
    )
    updates: dict[str, object] = {"players": players}
    if detect_winner and session.winner is None:
        winner = find_winner(players, session.winning_score)
        if winner is not None:
            updates["winner"] = winner
            updates["finished_at"] = next_timestamp(clock, session.event_timestamps())
    return session.model_copy(update=updates)


def _finished_result(before: GameSession, after: GameSession, reason: FinishReason) -> TransitionResult:
    if before.phase is GamePhase.FINISHED:
        return TransitionResult(session=after)
    completed = build_completed_game(after)
    if completed is None:
        return TransitionResult(session=after)
    logger.info(
        "game finished",
        game_id=after.id,
        winner=completed.winner.name,
        total=completed.winner.total_score,
        reason=reason,
        rounds=completed.rounds,
    )
    return TransitionResult(
        session=after,
        completed_game=completed,
        finish_reason=reason,
        clear_snapshot=True,
    )


def start_game(
    command: StartGameCommand,
    *,
    rules: GameRules,
    ids: IdSource,
    clock: Clock,
) -> GameSession:
    """Validate setup input and return a fresh ACTIVE session."""
    raw_score = command.winning_score if command.winning_score is not None else rules.default_winning_score
    winning_score = parse_winning_score(raw_score)
    players = build_start_roster(command.player_names, ids=ids, min_players=rules.min_players)
    session = GameSession(
        id=ids(),
        players=players,
        started_at=clock(),
        winning_score=winning_score,
    )
    logger.info("game started", game_id=session.id, players=len(players), winning_score=winning_score)
    return session


def apply_command(
    session: GameSession,
    command: GameCommand,
    *,
    rules: GameRules | None = None,
    ids: IdSource = new_id,
    clock: Clock = utc_now,
) -> TransitionResult:
    """
    Apply one command to the session and return the resulting snapshot.

    Raises:
        InvalidActionError: The command is not allowed in the current phase.
        GameRuleError: Input validation failed (names, scores, winning score).

    """
    rules = rules or GameRules()

    if isinstance(command, StartGameCommand):
        return TransitionResult(session=start_game(command, rules=rules, ids=ids, clock=clock))

    if isinstance(command, AddRoundCommand):
        _require_phase(session, command.type, {GamePhase.ACTIVE}, "rounds can only be added to an active game")
        appended = append_round(session, command.scores, ids=ids, clock=clock)
        settled = settle(appended, clock)
        logger.debug("round added", game_id=session.id, round_number=len(settled.rounds))
        return _finished_result(session, settled, FinishReason.EXACT_MATCH)

    if isinstance(command, AddPlayerCommand):
        _require_phase(
            session,
            command.type,
            {GamePhase.ACTIVE, GamePhase.FINISHED},
            "players can only join a started game",
        )
        initial_score = command.initial_score
        if initial_score is None:
            initial_score = suggest_initial_score(session.players, rules.score_rounding_step)
        joined = add_player(session, command.name, initial_score, ids=ids, clock=clock)
        return _finished_result(session, settle(joined, clock), FinishReason.EXACT_MATCH)

    if isinstance(command, UndoRoundCommand):
        _require_phase(
            session,
            command.type,
            {GamePhase.ACTIVE, GamePhase.FINISHED},
            "there is no game to undo",
        )
        if not session.rounds:
            return TransitionResult(session=session)
        undone = settle(undo_last_round(session), clock, detect_winner=False)
        logger.info("round undone", game_id=session.id, rounds=len(undone.rounds), phase=undone.phase)
        return TransitionResult(session=undone)

    if isinstance(command, ResetGameCommand):
        logger.info("game reset", game_id=session.id)
        return TransitionResult(session=GameSession(), clear_snapshot=True)

    if isinstance(command, FinishGameCommand):
        leader = find_leader(session.players)
        if leader is None:
            return TransitionResult(session=session)
        _require_phase(session, command.type, {GamePhase.ACTIVE}, "the game already has a winner")
        finished = session.model_copy(
            update={"winner": leader, "finished_at": next_timestamp(clock, session.event_timestamps())}
        )
        return _finished_result(session, finished, FinishReason.MANUAL)

    if isinstance(command, LoadGameCommand):
        _require_phase(session, command.type, {GamePhase.EMPTY}, "reset the current game before loading another")
        logger.info("game loaded", game_id=command.session.id, phase=command.session.phase)
        return TransitionResult(session=command.session)

    raise TypeError(f"unknown command: {command!r}")
