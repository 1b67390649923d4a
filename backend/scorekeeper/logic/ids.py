"""Identifier and timestamp sources.

Transitions never call uuid or the wall clock directly; they receive an
IdSource and a Clock so tests can make ids and times deterministic.
"""

from collections.abc import Callable, Iterable
from datetime import UTC, datetime, timedelta
from uuid import uuid4

IdSource = Callable[[], str]
Clock = Callable[[], datetime]

_TIMESTAMP_STEP = timedelta(microseconds=1)


def new_id() -> str:
    return uuid4().hex


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def next_timestamp(clock: Clock, previous: Iterable[datetime]) -> datetime:
    """Return a timestamp strictly later than every timestamp in ``previous``.

    Rounds and player-added events are ordered by timestamp, so two events of
    one session must never share an instant. When the clock has not advanced
    past the latest recorded event, the latest event plus one microsecond is
    used instead.
    """
    now = clock()
    latest = max(previous, default=None)
    if latest is not None and now <= latest:
        return latest + _TIMESTAMP_STEP
    return now


class CounterIds:
    """Deterministic id source: ``<prefix>1``, ``<prefix>2``, ..."""

    def __init__(self, prefix: str = "id") -> None:
        self._prefix = prefix
        self._count = 0

    def __call__(self) -> str:
        self._count += 1
        return f"{self._prefix}{self._count}"
