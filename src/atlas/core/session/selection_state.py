"""Caller-owned selection state with a memoised assessment.

The engine is a pure function; whoever drives it (a UI state holder, a test,
a batch job) owns exactly one ``current selection -> current assessment``
pair. This class is that pair: every change to the selection invalidates the
cached assessment, and the next read recomputes it.

The cache key is the canonical encoding of the selection (SHA-256 of
sorted, compact JSON with level-0 entries removed), so two selections that
differ only in key order or explicit zeros share one key.
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Mapping
from typing import Any

from atlas.core.catalog.loader import get_default_catalog
from atlas.core.catalog.registry import HabitCatalog
from atlas.core.config.engine import EngineConfig
from atlas.domains.habits.domain_logic.assessment import assess
from atlas.domains.habits.domain_logic.assessment_models import HabitAssessment
from atlas.domains.habits.domain_logic.selection import (
    active_levels,
    check_level,
    validate_selection,
)

logger = logging.getLogger(__name__)


def selection_key(selection: Mapping[str, int]) -> str:
    """Order-independent cache key for a validated selection.

    Returns:
        Hex-encoded SHA-256 digest of the canonical JSON encoding.
    """
    canonical = json.dumps(active_levels(selection), sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode()).hexdigest()


class SelectionState:
    """Holds one habit selection and lazily recomputes its assessment.

    Usage::

        state = SelectionState()
        state.set_level("smoking", 2)
        result = state.assessment()     # computed
        result = state.assessment()     # cached
        state.set_level("smoking", 0)   # invalidates
    """

    def __init__(
        self,
        catalog: HabitCatalog | None = None,
        config: EngineConfig | None = None,
        initial: Mapping[str, Any] | None = None,
    ) -> None:
        self._catalog = catalog or get_default_catalog()
        self._config = config or EngineConfig.from_settings()
        self._selection: dict[str, int] = validate_selection(initial or {}, self._catalog)
        self._cached_key: str | None = None
        self._cached: HabitAssessment | None = None
        self.computations = 0

    @property
    def selection(self) -> dict[str, int]:
        """A copy of the current selection."""
        return dict(self._selection)

    @property
    def key(self) -> str:
        return selection_key(self._selection)

    def level(self, habit_id: str) -> int:
        return self._selection.get(habit_id, 0)

    def set_level(self, habit_id: str, level: Any) -> bool:
        """Set one habit's level.

        Returns True when the selection changed. Unknown habit ids are a
        no-op (False). Raises InvalidLevelError for bad levels, leaving the
        current selection untouched.
        """
        habit = self._catalog.get_habit(habit_id)
        if habit is None:
            logger.debug("Ignoring level for unknown habit %r", habit_id)
            return False

        level = check_level(habit_id, level, habit.max_level)
        if self._selection.get(habit_id, 0) == level:
            return False

        updated = dict(self._selection)
        updated[habit_id] = level
        self._replace(updated)
        return True

    def set_levels(self, levels: Mapping[str, Any]) -> bool:
        """Apply several levels at once; all-or-nothing on validation errors."""
        validated = validate_selection(levels, self._catalog)
        updated = {**self._selection, **validated}
        if active_levels(updated) == active_levels(self._selection):
            return False
        self._replace(updated)
        return True

    def reset(self) -> None:
        """Clear every habit back to level 0."""
        self._replace({})

    def _replace(self, selection: dict[str, int]) -> None:
        self._selection = selection
        self._cached = None
        self._cached_key = None

    def assessment(self) -> HabitAssessment:
        """The assessment for the current selection, recomputed only when stale."""
        key = self.key
        if self._cached is None or self._cached_key != key:
            self._cached = assess(self._selection, self._catalog, self._config)
            self._cached_key = key
            self.computations += 1
        return self._cached
