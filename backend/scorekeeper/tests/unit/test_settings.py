import pytest
from pydantic import ValidationError

from scorekeeper.logic.settings import GameRules
from scorekeeper.settings import ScorekeeperSettings


class TestScorekeeperSettings:
    def test_defaults(self):
        settings = ScorekeeperSettings()
        assert settings.data_dir == "backend/data/scorekeeper"
        assert settings.log_dir is None
        assert settings.default_winning_score == 500
        assert settings.min_players == 2
        assert settings.history_limit == 50

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("SCOREKEEPER_DATA_DIR", "custom/data")
        monkeypatch.setenv("SCOREKEEPER_DEFAULT_WINNING_SCORE", "1000")
        monkeypatch.setenv("SCOREKEEPER_HISTORY_LIMIT", "10")
        settings = ScorekeeperSettings()
        assert settings.data_dir == "custom/data"
        assert settings.default_winning_score == 1000
        assert settings.history_limit == 10

    def test_non_positive_winning_score_rejected(self, monkeypatch):
        monkeypatch.setenv("SCOREKEEPER_DEFAULT_WINNING_SCORE", "0")
        with pytest.raises(ValidationError, match="default_winning_score"):
            ScorekeeperSettings()

    def test_game_rules_follow_settings(self):
        rules = ScorekeeperSettings(default_winning_score=250, min_players=3, history_limit=5).game_rules()
        assert rules == GameRules(default_winning_score=250, min_players=3, history_limit=5)


class TestGameRules:
    def test_defaults(self):
        rules = GameRules()
        assert rules.default_winning_score == 500
        assert rules.min_players == 2
        assert rules.history_limit == 50
        assert rules.score_rounding_step == 5

    def test_frozen(self):
        with pytest.raises(ValidationError):
            GameRules().min_players = 3
