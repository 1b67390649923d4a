import pytest

from scorekeeper.logic.exceptions import (
    DuplicateNameError,
    EmptyNameError,
    InvalidScoreError,
    InvalidWinningScoreError,
    NotEnoughPlayersError,
)
from scorekeeper.logic.ids import CounterIds
from scorekeeper.logic.roster import (
    add_player,
    build_start_roster,
    ensure_unique_name,
    normalize_name,
    parse_winning_score,
    suggest_initial_score,
)
from scorekeeper.logic.state import GameSession, Player
from scorekeeper.tests.helpers import START, SteppingClock


class TestNames:
    def test_normalize_trims(self):
        assert normalize_name("  Alice ") == "Alice"

    @pytest.mark.parametrize("name", ["", "   ", "\t\n"])
    def test_normalize_rejects_blank(self, name):
        with pytest.raises(EmptyNameError):
            normalize_name(name)

    def test_duplicate_check_ignores_case(self):
        with pytest.raises(DuplicateNameError, match="ALICE"):
            ensure_unique_name("ALICE", ["Bob", "alice"])

    def test_unique_name_passes(self):
        ensure_unique_name("Carol", ["Alice", "Bob"])


class TestParseWinningScore:
    @pytest.mark.parametrize(("value", "expected"), [(500, 500), ("250", 250), (" 1000 ", 1000), (1, 1)])
    def test_accepts_positive_integers(self, value, expected):
        assert parse_winning_score(value) == expected

    @pytest.mark.parametrize("value", [0, -10, "0", "-5"])
    def test_rejects_non_positive(self, value):
        with pytest.raises(InvalidWinningScoreError, match="greater than 0"):
            parse_winning_score(value)

    @pytest.mark.parametrize("value", ["abc", "", "12.5", True, 2.5])
    def test_rejects_non_numeric(self, value):
        with pytest.raises(InvalidWinningScoreError, match="must be a number"):
            parse_winning_score(value)


class TestBuildStartRoster:
    def test_creates_players_in_entry_order(self):
        roster = build_start_roster(["Alice", "Bob", "Carol"], ids=CounterIds("p"), min_players=2)
        assert [p.name for p in roster] == ["Alice", "Bob", "Carol"]
        assert [p.id for p in roster] == ["p1", "p2", "p3"]
        assert all(p.total_score == 0 for p in roster)

    def test_drops_blank_entries_and_trims(self):
        roster = build_start_roster([" Alice ", "", "  ", "Bob"], ids=CounterIds(), min_players=2)
        assert [p.name for p in roster] == ["Alice", "Bob"]

    def test_requires_minimum_players(self):
        with pytest.raises(NotEnoughPlayersError) as exc_info:
            build_start_roster(["Alice", " "], ids=CounterIds(), min_players=2)
        assert exc_info.value.required == 2
        assert exc_info.value.given == 1

    def test_rejects_case_insensitive_duplicates(self):
        with pytest.raises(DuplicateNameError):
            build_start_roster(["Alice", "alice "], ids=CounterIds(), min_players=2)


class TestAddPlayer:
    @pytest.fixture
    def session(self):
        return GameSession(
            id="g1",
            players=(Player(id="a", name="Alice", total_score=120),),
            started_at=START,
        )

    def test_appends_player_and_event(self, session):
        updated = add_player(session, "  Carol ", 200, ids=CounterIds("n"), clock=SteppingClock())
        carol = updated.players[-1]
        assert carol.name == "Carol"
        assert carol.id == "n1"
        (event,) = updated.player_added_events
        assert event.player_id == "n1"
        assert event.player_name == "Carol"
        assert event.initial_score == 200
        assert event.id == "n2"

    def test_event_timestamp_follows_existing_events(self, session):
        first = add_player(session, "Carol", 0, ids=CounterIds("x"), clock=lambda: START)
        second = add_player(first, "Dave", 0, ids=CounterIds("y"), clock=lambda: START)
        stamps = [e.timestamp for e in second.player_added_events]
        assert stamps[0] < stamps[1]

    def test_negative_initial_score_allowed(self, session):
        updated = add_player(session, "Carol", -50, ids=CounterIds(), clock=SteppingClock())
        assert updated.player_added_events[0].initial_score == -50

    def test_rejects_duplicate_name(self, session):
        with pytest.raises(DuplicateNameError):
            add_player(session, "ALICE", 0, ids=CounterIds(), clock=SteppingClock())

    def test_rejects_empty_name(self, session):
        with pytest.raises(EmptyNameError):
            add_player(session, "   ", 0, ids=CounterIds(), clock=SteppingClock())

    def test_rejects_non_integer_initial_score(self, session):
        with pytest.raises(InvalidScoreError):
            add_player(session, "Carol", "100", ids=CounterIds(), clock=SteppingClock())


class TestSuggestInitialScore:
    def _players(self, *totals: int) -> list[Player]:
        return [Player(id=str(i), name=f"P{i}", total_score=t) for i, t in enumerate(totals)]

    def test_empty_roster_suggests_zero(self):
        assert suggest_initial_score([]) == 0

    def test_rounds_average_to_nearest_five(self):
        # average 51 -> 50
        assert suggest_initial_score(self._players(40, 62)) == 50

    def test_rounds_half_up(self):
        # average 52.5 -> 53 -> 55
        assert suggest_initial_score(self._players(50, 55)) == 55

    def test_custom_step(self):
        assert suggest_initial_score(self._players(120, 160), step=25) == 150

    def test_negative_average(self):
        assert suggest_initial_score(self._players(-40, -22)) == -30
