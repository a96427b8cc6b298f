"""Human-readable explanations for dominant factors and organ effects.

Pure string templating: pick the habit's canned template (or the generic
fallback) and interpolate the level and magnitude.
"""

from __future__ import annotations

from atlas.core.catalog.registry import HabitCatalog

GENERIC_TEMPLATE = "{name} at level {level} affects your health in multiple ways"

# (threshold on |impact|, adverb), checked in order
INTENSITY_WORDS = [
    (15.0, "dramatically"),
    (8.0, "significantly"),
]
INTENSITY_FLOOR = "moderately"


def intensity_word(impact: float) -> str:
    """Adverb describing how large an impact is."""
    magnitude = abs(impact)
    for threshold, word in INTENSITY_WORDS:
        if magnitude > threshold:
            return word
    return INTENSITY_FLOOR


def explain(habit_id: str, level: int, impact: float, catalog: HabitCatalog) -> str:
    """Explain a habit's aggregate effect at the given level."""
    habit = catalog.get_habit(habit_id)
    template = habit.explanation if habit and habit.explanation else GENERIC_TEMPLATE
    return template.format(
        name=catalog.display_name(habit_id),
        level=level,
        level_label=habit.level_label(level) if habit else str(level),
        impact=round(abs(impact)),
        intensity=intensity_word(impact),
    )


def explain_organ_effect(
    habit_id: str,
    level: int,
    organ_id: str,
    delta: float,
    catalog: HabitCatalog,
) -> str:
    """Explain how one habit moves one organ, e.g. for organ detail panels."""
    organ = catalog.get_organ(organ_id)
    organ_name = organ.display_name.lower() if organ else organ_id
    verb = "raises" if delta > 0 else "lowers"
    return (
        f"{catalog.display_name(habit_id)} at level {level} {verb} "
        f"{organ_name} health by {round(abs(delta))} points."
    )
