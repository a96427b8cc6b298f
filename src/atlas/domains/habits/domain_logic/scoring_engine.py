"""Deterministic habit scoring: habit selection -> clamped metric profile.

Every metric starts at its baseline, every active habit's effects are summed
in, and each metric is clamped once at the end. Habits whose exponential
effects clear the significance threshold are surfaced as dominant factors.

All formulas are deterministic and free of I/O.
"""

from __future__ import annotations

import logging
import math

from atlas.core.catalog.models import EffectDescriptor
from atlas.core.catalog.registry import CatalogIntegrityError, HabitCatalog
from atlas.core.config.engine import EngineConfig
from atlas.domains.habits.domain_logic.assessment_models import DominantFactor, ScoreResult
from atlas.domains.habits.domain_logic.explanations import explain
from atlas.domains.habits.domain_logic.selection import HabitSelection

logger = logging.getLogger(__name__)


def effect_delta(effect: EffectDescriptor, level: int) -> float:
    """Contribution of one effect descriptor at ``level`` (level >= 1)."""
    if effect.shape == "linear":
        return effect.magnitude * level
    if effect.shape == "exponential":
        return effect.magnitude * level ** effect.curve_exponent
    if effect.shape == "diminishing":
        return effect.magnitude * math.sqrt(level)
    raise ValueError(f"Unknown effect shape: {effect.shape!r}")


def baseline_metrics(catalog: HabitCatalog) -> dict[str, float]:
    """Every metric at its declared baseline, in declaration order."""
    return {m.name: m.baseline for m in catalog.metrics()}


def _dominant_factor(
    habit_id: str,
    level: int,
    effects: tuple[EffectDescriptor, ...],
    catalog: HabitCatalog,
    threshold: float,
) -> DominantFactor | None:
    exponential = [e for e in effects if e.shape == "exponential"]
    if not any(abs(e.magnitude) > threshold for e in exponential):
        return None

    deltas = [(e.metric, abs(effect_delta(e, level))) for e in exponential]
    impact = sum(d for _, d in deltas)
    primary_metric = max(deltas, key=lambda item: item[1])[0]

    habit = catalog.get_habit(habit_id)
    assert habit is not None  # callers skip habits without catalog entries
    return DominantFactor(
        habit_id=habit_id,
        display_name=habit.display_name,
        level=level,
        impact=impact,
        primary_metric=primary_metric,
        direction="positive" if habit.valence == "beneficial" else "negative",
        explanation=explain(habit_id, level, impact, catalog),
    )


def score(
    selection: HabitSelection,
    catalog: HabitCatalog,
    config: EngineConfig | None = None,
) -> ScoreResult:
    """Score a validated habit selection.

    Habits are folded in impact-model order rather than selection order, so
    the result does not depend on how the caller built the mapping.

    Raises CatalogIntegrityError (strict_integrity only) when an active habit
    has effects but no catalog entry; otherwise that habit is skipped.
    """
    config = config or EngineConfig()
    running = baseline_metrics(catalog)
    positive: list[DominantFactor] = []
    negative: list[DominantFactor] = []

    for habit_id in catalog.modelled_habit_ids:
        level = selection.get(habit_id, 0)
        if level <= 0:
            continue

        if catalog.get_habit(habit_id) is None:
            if config.strict_integrity:
                raise CatalogIntegrityError(
                    f"Habit '{habit_id}' has impact effects but no catalog entry"
                )
            logger.warning("Skipping habit %r: impact effects without catalog entry", habit_id)
            continue

        effects = catalog.effects_for(habit_id)
        for effect in effects:
            running[effect.metric] += effect_delta(effect, level)

        factor = _dominant_factor(habit_id, level, effects, catalog, config.dominant_threshold)
        if factor is not None:
            (positive if factor.direction == "positive" else negative).append(factor)

    metrics = {m.name: m.clamp(running[m.name]) for m in catalog.metrics()}

    positive.sort(key=lambda f: (-f.impact, f.habit_id))
    negative.sort(key=lambda f: (-f.impact, f.habit_id))

    return ScoreResult(
        metrics=metrics,
        raw=dict(running),
        positive_factors=positive,
        negative_factors=negative,
    )
