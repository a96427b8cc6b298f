"""Habit assessment orchestration: selection -> full HabitAssessment.

This is the main entry point for callers. It validates the selection at the
boundary, then runs the scoring engine, organ projector, recommendation
ranker, organ reports and physiological stats over the same validated
selection.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from atlas.core.catalog.loader import get_default_catalog
from atlas.core.catalog.registry import HabitCatalog
from atlas.core.config.engine import EngineConfig
from atlas.domains.habits.domain_logic.assessment_models import (
    HEALTH_CATEGORIES,
    HEALTH_CATEGORY_FLOOR,
    LOWER_IS_BETTER,
    AssessmentComparison,
    HabitAssessment,
    ValueChange,
)
from atlas.domains.habits.domain_logic.organ_projector import build_organ_reports, project
from atlas.domains.habits.domain_logic.physiology import physiological_stats
from atlas.domains.habits.domain_logic.recommendation_ranker import rank
from atlas.domains.habits.domain_logic.scoring_engine import score
from atlas.domains.habits.domain_logic.selection import active_levels, validate_selection


def health_category(general_health: float) -> str:
    """Coarse label for the overall health value."""
    for threshold, label in HEALTH_CATEGORIES:
        if general_health >= threshold:
            return label
    return HEALTH_CATEGORY_FLOOR


def _active_habits(selection: Mapping[str, int], catalog: HabitCatalog) -> dict[str, list[str]]:
    grouped: dict[str, list[str]] = {"beneficial": [], "harmful": []}
    for habit_id in active_levels(selection):
        habit = catalog.get_habit(habit_id)
        if habit is not None:
            grouped[habit.valence].append(habit_id)
    return grouped


def assess(
    selection: Mapping[str, Any],
    catalog: HabitCatalog | None = None,
    config: EngineConfig | None = None,
) -> HabitAssessment:
    """Compute the full assessment for one habit selection.

    Raises InvalidLevelError when a known habit carries an invalid level.
    Unknown habit ids are ignored.
    """
    catalog = catalog or get_default_catalog()
    config = config or EngineConfig.from_settings()

    validated = validate_selection(selection, catalog)

    scored = score(validated, catalog, config)
    organs = project(validated, catalog)
    recommendations = rank(validated, scored.dominant_factors, catalog, config)

    return HabitAssessment(
        selection=validated,
        metrics=scored.metrics,
        organs=organs,
        positive_factors=scored.positive_factors,
        negative_factors=scored.negative_factors,
        recommendations=recommendations,
        health_category=health_category(scored.metrics["general_health"]),
        organ_reports=build_organ_reports(validated, catalog, organs),
        stats=physiological_stats(validated, catalog),
        active_habits=_active_habits(validated, catalog),
    )


# ---------------------------------------------------------------------------
# Before / after comparison
# ---------------------------------------------------------------------------

def _change(name: str, before: float, after: float, tolerance: float) -> ValueChange:
    delta = after - before
    # For risk and load values a fall is the good direction
    signed = -delta if name in LOWER_IS_BETTER else delta
    if signed > tolerance:
        direction = "improving"
    elif signed < -tolerance:
        direction = "declining"
    else:
        direction = "stable"
    return ValueChange(before=before, after=after, delta=delta, direction=direction)


def compare_assessments(
    before: HabitAssessment,
    after: HabitAssessment,
    *,
    tolerance: float = 0.5,
) -> AssessmentComparison:
    """Compare two assessments metric by metric, organ by organ and stat by stat.

    Changes within ``tolerance`` points count as stable. Only names present
    in both assessments are compared.
    """
    return AssessmentComparison(
        metrics={
            name: _change(name, value, after.metrics[name], tolerance)
            for name, value in before.metrics.items()
            if name in after.metrics
        },
        organs={
            name: _change(name, value, after.organs[name], tolerance)
            for name, value in before.organs.items()
            if name in after.organs
        },
        health_category_before=before.health_category,
        health_category_after=after.health_category,
        stats={
            name: _change(name, value, after.stats[name], tolerance)
            for name, value in before.stats.items()
            if name in after.stats
        },
    )
