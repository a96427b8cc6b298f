"""Unit tests for the detailed physiological stats."""

from __future__ import annotations

import random

import pytest

from atlas.core.catalog.models import StatDefinition
from atlas.domains.habits.domain_logic.physiology import physiological_stats

STAT_IDS = [
    "cardio_strain",
    "inflammation",
    "sleep_quality",
    "stress_load",
    "recovery_capacity",
    "cognitive_function",
    "immune_system",
    "metabolic_health",
]


class TestBaseline:
    def test_empty_selection_is_baseline(self, catalog):
        stats = physiological_stats({}, catalog)
        assert list(stats) == STAT_IDS
        assert set(stats.values()) == {5.0}

    def test_level_zero_is_baseline(self, catalog):
        assert physiological_stats({"smoking": 0, "exercise": 0}, catalog) == physiological_stats({}, catalog)

    def test_unweighted_habits_ignored(self, catalog):
        assert physiological_stats({"pornography": 3}, catalog) == physiological_stats({}, catalog)

    def test_catalog_without_stats(self, tiny_catalog):
        assert physiological_stats({"junk": 3}, tiny_catalog) == {}


class TestWeights:
    def test_heavy_smoker(self, catalog):
        stats = physiological_stats({"smoking": 3}, catalog)
        assert stats["cardio_strain"] == 10.0
        assert stats["inflammation"] == pytest.approx(9.5)
        assert stats["recovery_capacity"] == pytest.approx(3.8)
        assert stats["immune_system"] == pytest.approx(0.8)
        assert stats["sleep_quality"] == 5.0

    def test_habits_add_linearly(self, tiny_catalog):
        tiny_catalog.register_stat(StatDefinition("energy", "Energy", 4.0, {"focus": 1.0, "junk": -0.5}))
        assert physiological_stats({"focus": 2, "junk": 2}, tiny_catalog) == {"energy": 5.0}


class TestClamping:
    def test_upper(self, catalog):
        assert physiological_stats({"chronic_stress": 3}, catalog)["stress_load"] == 10.0
        assert physiological_stats({"sleep_consistency": 3}, catalog)["sleep_quality"] == 10.0

    def test_lower(self, catalog):
        selection = {habit.id: 3 for habit in catalog.find_by_valence("harmful")}
        stats = physiological_stats(selection, catalog)
        assert stats["immune_system"] == 0.0
        assert stats["metabolic_health"] == 0.0

    def test_bounds_random(self, catalog):
        rng = random.Random(11)
        habits = catalog.habits()
        for _ in range(200):
            selection = {h.id: rng.randint(0, h.max_level) for h in habits if rng.random() < 0.6}
            for value in physiological_stats(selection, catalog).values():
                assert 0.0 <= value <= 10.0
