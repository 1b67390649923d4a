"""Tagged command models accepted by the session state machine."""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from scorekeeper.logic.enums import CommandType
from scorekeeper.logic.state import GameSession


class _Command(BaseModel):
    model_config = ConfigDict(frozen=True)


class StartGameCommand(_Command):
    type: Literal[CommandType.START_GAME] = CommandType.START_GAME
    player_names: tuple[str, ...] = ()
    winning_score: int | str | None = None  # None: use the rules' default


class AddRoundCommand(_Command):
    type: Literal[CommandType.ADD_ROUND] = CommandType.ADD_ROUND
    scores: dict[str, int] = Field(default_factory=dict)


class AddPlayerCommand(_Command):
    type: Literal[CommandType.ADD_PLAYER] = CommandType.ADD_PLAYER
    name: str
    initial_score: int | None = None  # None: use the suggested score


class UndoRoundCommand(_Command):
    type: Literal[CommandType.UNDO_ROUND] = CommandType.UNDO_ROUND


class ResetGameCommand(_Command):
    type: Literal[CommandType.RESET_GAME] = CommandType.RESET_GAME


class FinishGameCommand(_Command):
    type: Literal[CommandType.FINISH_GAME] = CommandType.FINISH_GAME


class LoadGameCommand(_Command):
    type: Literal[CommandType.LOAD_GAME] = CommandType.LOAD_GAME
    session: GameSession


GameCommand = Annotated[
    StartGameCommand
    | AddRoundCommand
    | AddPlayerCommand
    | UndoRoundCommand
    | ResetGameCommand
    | FinishGameCommand
    | LoadGameCommand,
    Field(discriminator="type"),
]

_command_adapter = TypeAdapter(GameCommand)


def parse_command(data: dict[str, Any]) -> GameCommand:
    """Parse a raw dict (e.g. decoded JSON) into a typed command."""
    return _command_adapter.validate_python(data)
