"""Organ health projection from habit selections.

Each organ has its own baseline and vulnerability weights, so this
projection is independent of the whole-body metrics and is reproducible
from the selection alone:

    organ = clamp(baseline + sum(weight * level * level_scale))
"""

from __future__ import annotations

from atlas.core.catalog.registry import HabitCatalog
from atlas.domains.habits.domain_logic.assessment_models import (
    ORGAN_CONSULT_THRESHOLD,
    ORGAN_STATUS_FLOOR,
    ORGAN_STATUSES,
    OrganContribution,
    OrganReport,
)
from atlas.domains.habits.domain_logic.explanations import explain_organ_effect
from atlas.domains.habits.domain_logic.selection import HabitSelection


def _clamp(value: float, lo: float, hi: float) -> float:
    """Clamp a value to [lo, hi]."""
    return max(lo, min(hi, value))


def project(selection: HabitSelection, catalog: HabitCatalog) -> dict[str, float]:
    """Project a validated selection onto every organ in the catalog."""
    bounds = catalog.organ_bounds
    profile: dict[str, float] = {}

    for organ in catalog.organs():
        value = organ.baseline
        for habit_id, weight in organ.weights.items():
            level = selection.get(habit_id, 0)
            if level > 0:
                value += weight * level * bounds.level_scale
        profile[organ.id] = _clamp(value, bounds.lower, bounds.upper)

    return profile


def organ_contributions(
    selection: HabitSelection,
    catalog: HabitCatalog,
    organ_id: str,
) -> list[OrganContribution]:
    """Per-habit contributions to one organ, largest effect first.

    Returns an empty list for unknown organs or when no weighted habit is active.
    """
    organ = catalog.get_organ(organ_id)
    if organ is None:
        return []

    contributions: list[OrganContribution] = []
    for habit_id, weight in organ.weights.items():
        level = selection.get(habit_id, 0)
        habit = catalog.get_habit(habit_id)
        if level <= 0 or habit is None:
            continue
        delta = weight * level * catalog.organ_bounds.level_scale
        contributions.append(
            OrganContribution(
                habit_id=habit_id,
                display_name=habit.display_name,
                valence=habit.valence,
                level=level,
                delta=delta,
                explanation=explain_organ_effect(habit_id, level, organ_id, delta, catalog),
            )
        )

    contributions.sort(key=lambda c: (-abs(c.delta), c.habit_id))
    return contributions


def organ_status(health: float) -> str:
    """Coarse status label for an organ health value."""
    for threshold, label in ORGAN_STATUSES:
        if health >= threshold:
            return label
    return ORGAN_STATUS_FLOOR


def _organ_advice(contributions: list[OrganContribution], health: float) -> list[str]:
    advice: list[str] = []

    harmful = [c for c in contributions if c.valence == "harmful"]
    if harmful:
        worst = max(harmful, key=lambda c: abs(c.delta))
        advice.append(
            f"Your {worst.display_name.lower()} is causing significant damage to this "
            "organ. Consider reducing it gradually."
        )

    beneficial = [c for c in contributions if c.valence == "beneficial"]
    if beneficial:
        best = max(beneficial, key=lambda c: abs(c.delta))
        advice.append(
            f"Your {best.display_name.lower()} is having a positive impact. Keep it up!"
        )

    if health < ORGAN_CONSULT_THRESHOLD:
        advice.append(
            "This organ is in a concerning state. Consider consulting a health professional."
        )

    return advice


def build_organ_report(
    organ_id: str,
    selection: HabitSelection,
    catalog: HabitCatalog,
    organs: dict[str, float] | None = None,
) -> OrganReport:
    """Build the narrated report for one organ.

    ``organs`` may carry an already-projected profile to avoid recomputing it.
    Raises KeyError for unknown organ ids.
    """
    organ = catalog.get_organ(organ_id)
    if organ is None:
        raise KeyError(f"Unknown organ: {organ_id!r}")

    profile = organs if organs is not None else project(selection, catalog)
    health = profile[organ_id]
    contributions = organ_contributions(selection, catalog, organ_id)

    return OrganReport(
        organ_id=organ_id,
        display_name=organ.display_name,
        description=organ.description,
        health=health,
        status=organ_status(health),
        affecting_habits=contributions,
        advice=_organ_advice(contributions, health),
    )


def build_organ_reports(
    selection: HabitSelection,
    catalog: HabitCatalog,
    organs: dict[str, float] | None = None,
) -> dict[str, OrganReport]:
    """Reports for every organ, in catalog order."""
    profile = organs if organs is not None else project(selection, catalog)
    return {
        organ.id: build_organ_report(organ.id, selection, catalog, profile)
        for organ in catalog.organs()
    }
