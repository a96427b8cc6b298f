"""Unit tests for caller-owned selection state and its memoised assessment."""

from __future__ import annotations

import pytest

from atlas.core.session.selection_state import SelectionState, selection_key
from atlas.domains.habits.domain_logic.selection import InvalidLevelError


@pytest.fixture
def state(catalog, engine_config) -> SelectionState:
    return SelectionState(catalog, engine_config)


class TestSelectionKey:
    def test_order_independent(self):
        a = {"smoking": 2, "exercise": 1}
        b = {"exercise": 1, "smoking": 2}
        assert selection_key(a) == selection_key(b)

    def test_zero_levels_ignored(self):
        assert selection_key({"smoking": 2, "reading": 0}) == selection_key({"smoking": 2})
        assert selection_key({"reading": 0}) == selection_key({})

    def test_levels_distinguish(self):
        assert selection_key({"smoking": 2}) != selection_key({"smoking": 3})

    def test_is_sha256_hex(self):
        key = selection_key({})
        assert len(key) == 64
        int(key, 16)


class TestSelectionState:
    def test_starts_empty(self, state):
        assert state.selection == {}
        assert state.level("smoking") == 0

    def test_initial_selection_validated(self, catalog, engine_config):
        state = SelectionState(catalog, engine_config, initial={"smoking": 2, "unicorn": 1})
        assert state.selection == {"smoking": 2}

    def test_initial_selection_rejects_bad_level(self, catalog, engine_config):
        with pytest.raises(InvalidLevelError):
            SelectionState(catalog, engine_config, initial={"smoking": 9})

    def test_set_level_changes_selection(self, state):
        assert state.set_level("exercise", 2) is True
        assert state.level("exercise") == 2

    def test_set_same_level_is_not_a_change(self, state):
        state.set_level("exercise", 2)
        assert state.set_level("exercise", 2) is False
        assert state.set_level("reading", 0) is False

    def test_unknown_habit_is_noop(self, state):
        assert state.set_level("unicorn", 2) is False
        assert state.selection == {}

    def test_invalid_level_leaves_state_untouched(self, state):
        state.set_level("smoking", 1)
        with pytest.raises(InvalidLevelError):
            state.set_level("smoking", 4)
        with pytest.raises(InvalidLevelError):
            state.set_level("smoking", 1.5)
        assert state.selection == {"smoking": 1}

    def test_selection_property_is_a_copy(self, state):
        state.set_level("smoking", 1)
        snapshot = state.selection
        snapshot["smoking"] = 3
        assert state.level("smoking") == 1

    def test_set_levels_all_or_nothing(self, state):
        state.set_level("reading", 1)
        with pytest.raises(InvalidLevelError):
            state.set_levels({"exercise": 2, "smoking": -1})
        assert state.selection == {"reading": 1}

    def test_set_levels_applies_batch(self, state):
        assert state.set_levels({"exercise": 2, "smoking": 1}) is True
        assert state.selection == {"exercise": 2, "smoking": 1}
        assert state.set_levels({"exercise": 2}) is False

    def test_reset(self, state):
        state.set_levels({"exercise": 2, "smoking": 1})
        state.reset()
        assert state.selection == {}


class TestMemoisation:
    def test_assessment_cached_until_change(self, state):
        state.set_level("smoking", 2)
        first = state.assessment()
        second = state.assessment()
        assert first is second
        assert state.computations == 1

    def test_change_invalidates(self, state):
        state.set_level("smoking", 2)
        before = state.assessment()
        state.set_level("smoking", 3)
        after = state.assessment()
        assert state.computations == 2
        assert after.metrics["general_health"] < before.metrics["general_health"]

    def test_noop_change_keeps_cache(self, state):
        state.set_level("smoking", 2)
        state.assessment()
        state.set_level("smoking", 2)
        state.set_level("unicorn", 1)
        state.assessment()
        assert state.computations == 1

    def test_assessment_matches_direct_call(self, state, catalog, engine_config):
        from atlas.domains.habits.domain_logic.assessment import assess

        state.set_levels({"exercise": 3, "alcohol": 2})
        assert state.assessment() == assess({"exercise": 3, "alcohol": 2}, catalog, engine_config)

    def test_empty_state_reproduces_baseline(self, state, catalog):
        metrics = state.assessment().metrics
        assert metrics == {m.name: m.baseline for m in catalog.metrics()}
