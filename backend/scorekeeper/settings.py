"""Scorekeeper configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings

from scorekeeper.logic.settings import DEFAULT_HISTORY_LIMIT, DEFAULT_WINNING_SCORE, GameRules


class ScorekeeperSettings(BaseSettings):
    model_config = {"env_prefix": "SCOREKEEPER_"}

    data_dir: str = Field(default="backend/data/scorekeeper", min_length=1)
    log_dir: str | None = None
    default_winning_score: int = Field(default=DEFAULT_WINNING_SCORE, gt=0)
    min_players: int = Field(default=2, ge=1)
    history_limit: int = Field(default=DEFAULT_HISTORY_LIMIT, ge=1)

    def game_rules(self) -> GameRules:
        return GameRules(
            default_winning_score=self.default_winning_score,
            min_players=self.min_players,
            history_limit=self.history_limit,
        )
