"""
String enum definitions for scorekeeper concepts.
"""

from enum import StrEnum


class GamePhase(StrEnum):
    """Lifecycle phase of the active game session."""

    EMPTY = "empty"  # no players
    ACTIVE = "active"  # players present, no winner
    FINISHED = "finished"  # winner declared


class CommandType(StrEnum):
    """Commands accepted by the session state machine."""

    START_GAME = "start_game"
    ADD_ROUND = "add_round"
    ADD_PLAYER = "add_player"
    UNDO_ROUND = "undo_round"
    RESET_GAME = "reset_game"
    FINISH_GAME = "finish_game"
    LOAD_GAME = "load_game"


class FinishReason(StrEnum):
    """How a game reached the finished phase."""

    EXACT_MATCH = "exact_match"  # a player hit the winning score
    MANUAL = "manual"  # finished on request, leader declared winner
