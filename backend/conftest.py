"""Test setup shared by scorekeeper and shared tests.

Loads ``.env.tests`` and sends structlog events through stdlib logging, so
``caplog`` sees warnings such as "discarding malformed snapshot".
"""

import os
from pathlib import Path

import pytest
import structlog
from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env.tests")

structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=False,
)


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Each test starts without a bound game_id."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture(autouse=True)
def _isolate_scorekeeper_env(monkeypatch):
    """Keep a developer's SCOREKEEPER_* variables out of ScorekeeperSettings() in tests."""
    for name in [n for n in os.environ if n.startswith("SCOREKEEPER_")]:
        monkeypatch.delenv(name)
