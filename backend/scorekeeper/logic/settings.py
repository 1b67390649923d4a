"""Game rules shared by every session: target default, roster minimum, history cap."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_WINNING_SCORE = 500
DEFAULT_HISTORY_LIMIT = 50


class GameRules(BaseModel):
    """
    Configuration for session rules.

    All fields default to the standard table rules: race to exactly 500,
    at least two players, the last 50 games kept in history.
    """

    model_config = ConfigDict(frozen=True)

    default_winning_score: int = Field(default=DEFAULT_WINNING_SCORE, gt=0)
    min_players: int = Field(default=2, ge=1)
    history_limit: int = Field(default=DEFAULT_HISTORY_LIMIT, ge=1)

    # suggested late-join score is rounded to a multiple of this
    score_rounding_step: int = Field(default=5, ge=1)
