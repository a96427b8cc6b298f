"""Detailed physiological stats: habit selection -> 0-10 gauges.

A finer-grained view than the whole-body metrics, meant for detail panels
(cardio strain, inflammation, sleep quality, ...). Each gauge is linear in
habit levels and clamped once:

    stat = clamp(baseline + sum(weight * level))
"""

from __future__ import annotations

from atlas.core.catalog.registry import HabitCatalog
from atlas.domains.habits.domain_logic.selection import HabitSelection


def physiological_stats(selection: HabitSelection, catalog: HabitCatalog) -> dict[str, float]:
    """Project a validated selection onto every stat in the catalog."""
    bounds = catalog.stat_bounds
    stats: dict[str, float] = {}

    for stat in catalog.stats():
        value = stat.baseline
        for habit_id, weight in stat.weights.items():
            level = selection.get(habit_id, 0)
            if level > 0:
                value += weight * level
        stats[stat.id] = max(bounds.lower, min(bounds.upper, value))

    return stats
