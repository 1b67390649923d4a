"""Shared builders for scorekeeper tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from scorekeeper.logic.commands import AddPlayerCommand, AddRoundCommand, StartGameCommand
from scorekeeper.logic.game import apply_command
from scorekeeper.logic.ids import CounterIds
from scorekeeper.logic.settings import GameRules
from scorekeeper.logic.state import CompletedGame, GameSession, Player

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scorekeeper.logic.commands import GameCommand
    from scorekeeper.logic.game import TransitionResult

START = datetime(2025, 3, 15, 20, 0, 0, tzinfo=UTC)


class SteppingClock:
    """Clock that advances a fixed step on every call."""

    def __init__(self, start: datetime = START, step: timedelta = timedelta(seconds=1)) -> None:
        self._now = start
        self._step = step

    def __call__(self) -> datetime:
        current = self._now
        self._now += self._step
        return current


class Table:
    """Drives the pure state machine with deterministic ids and timestamps.

    Round scores are given by player name: ``table.round(Alice=50, Bob=-10)``.
    """

    def __init__(
        self,
        names: Sequence[str] = ("Alice", "Bob"),
        winning_score: int | str | None = 500,
        rules: GameRules | None = None,
    ) -> None:
        self.ids = CounterIds("id")
        self.clock = SteppingClock()
        self.rules = rules or GameRules()
        self.session = GameSession()
        self.apply(StartGameCommand(player_names=tuple(names), winning_score=winning_score))

    def apply(self, command: GameCommand) -> TransitionResult:
        result = apply_command(self.session, command, rules=self.rules, ids=self.ids, clock=self.clock)
        self.session = result.session
        return result

    def pid(self, name: str) -> str:
        return next(p.id for p in self.session.players if p.name == name)

    def total(self, name: str) -> int:
        return next(p.total_score for p in self.session.players if p.name == name)

    def totals(self) -> dict[str, int]:
        return {p.name: p.total_score for p in self.session.players}

    def round(self, **scores: int) -> TransitionResult:
        return self.apply(AddRoundCommand(scores={self.pid(name): delta for name, delta in scores.items()}))

    def join(self, name: str, initial_score: int | None = None) -> TransitionResult:
        return self.apply(AddPlayerCommand(name=name, initial_score=initial_score))


def make_completed_game(game_id: str, *, winner_total: int = 500, rounds: int = 3) -> CompletedGame:
    winner = Player(id=f"{game_id}-a", name="Alice", total_score=winner_total)
    other = Player(id=f"{game_id}-b", name="Bob", total_score=120)
    return CompletedGame(
        id=game_id,
        players=(winner, other),
        winner=winner,
        rounds=rounds,
        started_at=START,
        finished_at=START + timedelta(minutes=30),
    )
