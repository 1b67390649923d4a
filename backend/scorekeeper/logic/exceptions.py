"""Typed domain exceptions for rejected game input.

Every validation failure raised by the logic layer is a GameRuleError
subclass. Transitions raise before building any new state, so a caught
GameRuleError always means the session is unchanged.
"""


class GameRuleError(Exception):
    """Base exception for rejected input or actions."""


class EmptyNameError(GameRuleError):
    """Player name is blank after trimming."""


class DuplicateNameError(GameRuleError):
    """Player name clashes (case-insensitively) with another player."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"player name already in use: {name!r}")


class NotEnoughPlayersError(GameRuleError):
    """Fewer named players than a game needs to start."""

    def __init__(self, *, required: int, given: int) -> None:
        self.required = required
        self.given = given
        super().__init__(f"at least {required} players required, got {given}")


class InvalidWinningScoreError(GameRuleError):
    """Winning score is not a positive integer."""


class InvalidScoreError(GameRuleError):
    """Round or initial score is malformed (unknown player, non-integer value)."""


class InvalidActionError(GameRuleError):
    """Command is not valid in the session's current phase.

    Attributes:
        command: The command type that was attempted.
        phase: The session phase at the time.

    """

    def __init__(self, *, command: str, phase: str, reason: str) -> None:
        self.command = command
        self.phase = phase
        self.reason = reason
        super().__init__(f"cannot {command} while {phase}: {reason}")
