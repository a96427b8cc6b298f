"""Recommendation ranking: priority-ordered, capped habit suggestions.

Tiers come from the catalog (critical -> high -> moderate) and are walked in
order; within a tier the configured habit order is kept. No re-sorting by
magnitude happens here.
"""

from __future__ import annotations

from collections.abc import Iterable

from atlas.core.catalog.models import RecommendationTier
from atlas.core.catalog.registry import HabitCatalog
from atlas.core.config.engine import EngineConfig
from atlas.domains.habits.domain_logic.assessment_models import DominantFactor, Recommendation
from atlas.domains.habits.domain_logic.selection import HabitSelection


def _tier_applies(tier: RecommendationTier, level: int, config: EngineConfig) -> bool:
    if tier.direction == "reduce":
        min_level = tier.min_level if tier.min_level is not None else config.critical_min_level
        return level >= min_level
    return level < (tier.target_level or 0)


def _build(
    tier: RecommendationTier,
    habit_id: str,
    level: int,
    catalog: HabitCatalog,
    factor: DominantFactor | None,
) -> Recommendation:
    name = catalog.display_name(habit_id)
    habit = catalog.get_habit(habit_id)
    values = {
        "name": name,
        "name_lower": name.lower(),
        "level": level,
        "level_label": habit.level_label(level) if habit else str(level),
    }

    rationale = tier.rationale.format(**values)
    if factor is not None and tier.direction == "reduce":
        rationale = f"{rationale} {factor.explanation}"

    return Recommendation(
        priority=tier.priority,
        habit_id=habit_id,
        action=tier.action.format(**values),
        rationale=rationale,
        expected_impact=tier.expected_impact.format(**values),
    )


def rank(
    selection: HabitSelection,
    dominant_factors: Iterable[DominantFactor],
    catalog: HabitCatalog,
    config: EngineConfig | None = None,
) -> list[Recommendation]:
    """Collect up to ``config.max_recommendations`` suggestions, tier by tier.

    A "reduce" suggestion for a habit that is also a negative dominant factor
    has that factor's explanation appended to its rationale.
    """
    config = config or EngineConfig()
    negatives = {f.habit_id: f for f in dominant_factors if f.direction == "negative"}
    recommendations: list[Recommendation] = []

    for tier in catalog.tiers():
        for habit_id in tier.habits:
            if len(recommendations) >= config.max_recommendations:
                return recommendations
            level = selection.get(habit_id, 0)
            if _tier_applies(tier, level, config):
                recommendations.append(
                    _build(tier, habit_id, level, catalog, negatives.get(habit_id))
                )

    return recommendations
