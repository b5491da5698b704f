"""Tests for the rotation engine."""

import pytest

from dishrota.errors import IndexOutOfRange, NotFound, ValidationError
from dishrota.models.state import HouseholdState
from dishrota.rotation import (
    active_queue,
    advance,
    current_assignee,
    next_assignee,
    normalize_names,
    parse_roster,
    paused_queue,
    reorder,
    set_roster,
    toggle_pause,
)


class TestParseRoster:
    """Tests for the comma-separated roster field."""

    def test_splits_and_trims(self):
        """Names are split on commas and trimmed."""
        assert parse_roster(" Alex, Brooke ,Casey") == ["Alex", "Brooke", "Casey"]

    def test_drops_blanks(self):
        """Empty segments are ignored."""
        assert parse_roster("Alex,, ,Brooke,") == ["Alex", "Brooke"]

    def test_empty_text(self):
        """Blank input yields no names."""
        assert parse_roster("   ") == []


class TestNormalizeNames:
    """Tests for normalize_names."""

    def test_deduplicates_keeping_first(self):
        """Duplicates are dropped, first occurrence keeps its position."""
        assert normalize_names(["B", "A", " B", "C", "A"]) == ["B", "A", "C"]


class TestSetRoster:
    """Tests for set_roster."""

    def test_queue_is_permutation_of_roster(self, state: HouseholdState):
        """Queue, credits and pins are keyed exactly by the new roster."""
        new = set_roster(state, ["C", "E", "A"])

        assert sorted(new.queue) == sorted(new.roster) == ["A", "C", "E"]
        assert set(new.credits) == {"A", "C", "E"}
        assert set(new.pins) == {"A", "C", "E"}

    def test_preserves_values_for_survivors(self, state: HouseholdState):
        """Survivors keep credit and PIN; newcomers start at zero with no PIN."""
        state = state.model_copy(
            update={"credits": {"A": 2.5, "B": 1.0}, "pins": {"A": "1234", "B": None}}
        )

        new = set_roster(state, ["A", "E"])

        assert new.credits == {"A": 2.5, "E": 0.0}
        assert new.pins == {"A": "1234", "E": None}

    def test_paused_members_go_to_suffix(self, state: HouseholdState):
        """Paused survivors stay paused and sit after the active members."""
        state = toggle_pause(state, "A")

        new = set_roster(state, ["A", "B", "E"])

        assert new.queue == ["B", "E", "A"]
        assert new.paused == {"A": True}

    def test_removed_member_loses_paused_entry(self, state: HouseholdState):
        """Dropping a paused member removes their paused flag."""
        state = toggle_pause(state, "D")

        new = set_roster(state, ["A", "B"])

        assert new.paused == {}
        assert new.queue == ["A", "B"]

    def test_trims_and_deduplicates(self, state: HouseholdState):
        """Blank and duplicate names are removed before rebuilding."""
        new = set_roster(state, [" A ", "", "B", "A"])
        assert new.roster == ["A", "B"]

    def test_empty_roster_fails(self, state: HouseholdState):
        """A roster with only blanks is rejected and nothing changes."""
        with pytest.raises(ValidationError):
            set_roster(state, ["  ", ""])
        assert state.roster == ["A", "B", "C", "D"]

    def test_bumps_revision(self, state: HouseholdState):
        """Every transition produces a new revision."""
        assert set_roster(state, ["A"]).revision == state.revision + 1


class TestReorder:
    """Tests for reorder."""

    def test_moves_within_active(self, state: HouseholdState):
        """Moving index 0 to 2 shifts the others up."""
        assert reorder(state, 0, 2).queue == ["B", "C", "A", "D"]

    def test_equal_indices_is_noop(self, state: HouseholdState):
        """Same from and to returns the same state."""
        assert reorder(state, 1, 1) is state

    def test_paused_suffix_untouched(self, state: HouseholdState):
        """Indices refer to the active queue and paused members stay at the end."""
        state = toggle_pause(state, "B")  # A C D | B

        new = reorder(state, 2, 0)

        assert new.queue == ["D", "A", "C", "B"]

    @pytest.mark.parametrize("from_index,to_index", [(-1, 0), (0, 4), (4, 0)])
    def test_out_of_range(self, state: HouseholdState, from_index, to_index):
        """Positions outside the active queue are rejected."""
        with pytest.raises(IndexOutOfRange):
            reorder(state, from_index, to_index)

    def test_paused_positions_are_out_of_range(self, state: HouseholdState):
        """A paused member's queue position is not a valid active index."""
        state = toggle_pause(state, "D")
        with pytest.raises(IndexOutOfRange):
            reorder(state, 3, 0)

    def test_does_not_mutate_input(self, state: HouseholdState):
        """The original state is left as it was."""
        reorder(state, 0, 3)
        assert state.queue == ["A", "B", "C", "D"]


class TestAdvance:
    """Tests for advance."""

    def test_head_moves_to_tail(self, state: HouseholdState):
        """One advance rotates the active queue left by one."""
        assert advance(state).queue == ["B", "C", "D", "A"]

    def test_full_cycle_restores_order(self, state: HouseholdState):
        """n advances over n active members restore the original order."""
        current = state
        for _ in range(len(state.queue)):
            current = advance(current)
        assert current.queue == state.queue

    def test_skips_paused(self, state: HouseholdState):
        """Paused members stay in the suffix while the active part rotates."""
        state = toggle_pause(state, "A")  # B C D | A

        new = advance(state)

        assert new.queue == ["C", "D", "B", "A"]

    def test_all_paused_is_noop(self, state: HouseholdState):
        """Nothing happens when nobody is active."""
        for name in ["A", "B", "C", "D"]:
            state = toggle_pause(state, name)
        assert advance(state) is state


class TestTogglePause:
    """Tests for toggle_pause."""

    def test_pause_removes_from_active(self, state: HouseholdState):
        """Pausing B leaves A, C, D active with B parked at the end."""
        new = toggle_pause(state, "B")

        assert active_queue(new) == ["A", "C", "D"]
        assert paused_queue(new) == ["B"]
        assert new.queue == ["A", "C", "D", "B"]

    def test_unpause_appends_to_active(self, state: HouseholdState):
        """An unpaused member rejoins at the end of the active queue."""
        new = toggle_pause(toggle_pause(state, "B"), "B")

        assert new.queue == ["A", "C", "D", "B"]
        assert new.paused == {}

    def test_double_toggle_of_tail_restores(self, state: HouseholdState):
        """Toggling the active tail twice restores queue and paused set."""
        new = toggle_pause(toggle_pause(state, "D"), "D")

        assert new.queue == state.queue
        assert new.paused == state.paused

    def test_double_toggle_of_paused_restores(self, state: HouseholdState):
        """Unpausing then pausing a paused member restores queue and paused set."""
        paused = toggle_pause(state, "B")

        again = toggle_pause(toggle_pause(paused, "B"), "B")

        assert again.queue == paused.queue
        assert again.paused == paused.paused

    def test_unknown_name(self, state: HouseholdState):
        """Names off the roster are rejected."""
        with pytest.raises(NotFound):
            toggle_pause(state, "Zed")


class TestAssignees:
    """Tests for current and next assignee."""

    def test_current_and_next(self, state: HouseholdState):
        """Head is current, second is next."""
        assert current_assignee(state) == "A"
        assert next_assignee(state) == "B"

    def test_single_active_member(self, state: HouseholdState):
        """With one active member there is no next."""
        for name in ["B", "C", "D"]:
            state = toggle_pause(state, name)
        assert current_assignee(state) == "A"
        assert next_assignee(state) is None

    def test_nobody_active(self, state: HouseholdState):
        """With everyone paused there is no assignee."""
        for name in ["A", "B", "C", "D"]:
            state = toggle_pause(state, name)
        assert current_assignee(state) is None
