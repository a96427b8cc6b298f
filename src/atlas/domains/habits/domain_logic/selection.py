"""Boundary validation for habit selections.

A selection maps habit id -> intensity level (0 = not practised). Callers may
also pass the persisted UI shape, habit id -> {"level": n}. Validation runs
once, before the engine sees the selection; the engine trusts its input.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from atlas.core.catalog.registry import HabitCatalog

logger = logging.getLogger(__name__)

HabitSelection = Mapping[str, int]


class InvalidLevelError(ValueError):
    """Raised when a selection carries a non-integer or out-of-range level."""

    def __init__(self, habit_id: str, level: Any, reason: str) -> None:
        self.habit_id = habit_id
        self.level = level
        super().__init__(f"Invalid level {level!r} for habit {habit_id!r}: {reason}")


def _extract_level(habit_id: str, value: Any) -> Any:
    if isinstance(value, Mapping):
        if "level" not in value:
            raise InvalidLevelError(habit_id, value, "mapping has no 'level' key")
        return value["level"]
    return value


def check_level(habit_id: str, level: Any, max_level: int) -> int:
    """Return ``level`` if it is an integer in [0, max_level], else raise."""
    # bool is an int subclass; True must not sneak through as level 1
    if isinstance(level, bool) or not isinstance(level, int):
        raise InvalidLevelError(habit_id, level, "level must be an integer")
    if level < 0:
        raise InvalidLevelError(habit_id, level, "level must not be negative")
    if level > max_level:
        raise InvalidLevelError(habit_id, level, f"maximum level is {max_level}")
    return level


def validate_selection(selection: Mapping[str, Any], catalog: HabitCatalog) -> dict[str, int]:
    """Validate a raw selection against the catalog.

    Unknown habit ids are dropped (the catalog may be older or newer than the
    caller's saved state). Level-0 entries are kept; the engine skips them.

    Returns a new dict; the input is never mutated.
    Raises InvalidLevelError for the first invalid level found.
    """
    validated: dict[str, int] = {}
    dropped: list[str] = []

    for habit_id, value in selection.items():
        habit = catalog.get_habit(habit_id)
        if habit is None:
            dropped.append(habit_id)
            continue
        level = _extract_level(habit_id, value)
        validated[habit_id] = check_level(habit_id, level, habit.max_level)

    if dropped:
        logger.debug("Ignoring unknown habit ids in selection: %s", sorted(dropped))

    return validated


def active_levels(selection: HabitSelection) -> dict[str, int]:
    """Entries with level > 0, in selection order."""
    return {habit_id: level for habit_id, level in selection.items() if level > 0}
