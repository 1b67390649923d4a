"""Wiring: settings -> storage -> repository -> controller."""

from scorekeeper.persistence.repository import GameRepository
from scorekeeper.session.controller import GameController
from scorekeeper.settings import ScorekeeperSettings
from shared.logging import setup_logging
from shared.storage import FileKeyValueStore


def create_controller(settings: ScorekeeperSettings | None = None) -> GameController:
    """Build a controller backed by JSON files under ``settings.data_dir``."""
    settings = settings or ScorekeeperSettings()
    repository = GameRepository(FileKeyValueStore(settings.data_dir), history_limit=settings.history_limit)
    return GameController(repository, rules=settings.game_rules())


def bootstrap(settings: ScorekeeperSettings | None = None) -> GameController:
    """Configure logging, build the controller, and resume any saved game."""
    settings = settings or ScorekeeperSettings()
    setup_logging(log_dir=settings.log_dir)
    controller = create_controller(settings)
    controller.load_saved_game()
    return controller
