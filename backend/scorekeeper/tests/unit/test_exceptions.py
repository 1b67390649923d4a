"""Tests for the domain exception hierarchy."""

import pytest

from scorekeeper.logic.exceptions import (
    DuplicateNameError,
    EmptyNameError,
    GameRuleError,
    InvalidActionError,
    InvalidScoreError,
    InvalidWinningScoreError,
    NotEnoughPlayersError,
)


class TestGameRuleErrorHierarchy:
    def test_catch_base_catches_all_subclasses(self) -> None:
        for exc in (
            EmptyNameError("x"),
            DuplicateNameError("Alice"),
            NotEnoughPlayersError(required=2, given=1),
            InvalidWinningScoreError("x"),
            InvalidScoreError("x"),
            InvalidActionError(command="add_round", phase="finished", reason="x"),
        ):
            with pytest.raises(GameRuleError):
                raise exc


class TestErrorContext:
    def test_duplicate_name_keeps_name(self) -> None:
        err = DuplicateNameError("Alice")
        assert err.name == "Alice"
        assert str(err) == "player name already in use: 'Alice'"

    def test_not_enough_players_message(self) -> None:
        err = NotEnoughPlayersError(required=2, given=1)
        assert str(err) == "at least 2 players required, got 1"

    def test_invalid_action_stores_command_and_phase(self) -> None:
        err = InvalidActionError(command="add_round", phase="finished", reason="game over")
        assert err.command == "add_round"
        assert err.phase == "finished"
        assert err.reason == "game over"
        assert str(err) == "cannot add_round while finished: game over"
