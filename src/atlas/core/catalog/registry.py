"""Catalog registry: in-memory index for the loaded habit reference data."""

from __future__ import annotations

import logging

from atlas.core.catalog.models import (
    EFFECT_SHAPES,
    PRIORITIES,
    VALENCES,
    EffectDescriptor,
    HabitDefinition,
    MetricDefinition,
    OrganBounds,
    OrganDefinition,
    RecommendationTier,
    StatBounds,
    StatDefinition,
)

logger = logging.getLogger(__name__)


class CatalogIntegrityError(ValueError):
    """Raised when the reference data contradicts itself (unknown ids, bad shapes)."""

    def __init__(self, errors: list[str] | str) -> None:
        self.errors = [errors] if isinstance(errors, str) else list(errors)
        super().__init__("; ".join(self.errors))


class HabitCatalog:
    """Read-only lookup tables for habits, metrics, effects, organs, stats and tiers.

    Populated once by the loader, then treated as immutable: every engine
    call reads from it and nothing writes to it after loading.
    """

    def __init__(self) -> None:
        self._habits: dict[str, HabitDefinition] = {}
        self._metrics: dict[str, MetricDefinition] = {}
        self._effects: dict[str, tuple[EffectDescriptor, ...]] = {}
        self._organs: dict[str, OrganDefinition] = {}
        self._tiers: list[RecommendationTier] = []
        self._by_valence: dict[str, list[str]] = {}
        self._stats: dict[str, StatDefinition] = {}
        self.organ_bounds = OrganBounds()
        self.stat_bounds = StatBounds()

    # -- Registration ---------------------------------------------------------

    def register_habit(self, habit: HabitDefinition) -> None:
        """Add a habit to all indexes."""
        if habit.id in self._habits:
            raise ValueError(f"Duplicate habit id registered: {habit.id!r}")
        self._habits[habit.id] = habit
        self._by_valence.setdefault(habit.valence, []).append(habit.id)

    def register_metric(self, metric: MetricDefinition) -> None:
        if metric.name in self._metrics:
            raise ValueError(f"Duplicate metric registered: {metric.name!r}")
        self._metrics[metric.name] = metric

    def register_effects(self, habit_id: str, effects: list[EffectDescriptor]) -> None:
        """Attach the effect descriptors for one habit."""
        if habit_id in self._effects:
            raise ValueError(f"Duplicate impact entry registered: {habit_id!r}")
        metrics = [e.metric for e in effects]
        if len(set(metrics)) != len(metrics):
            raise ValueError(f"Habit {habit_id!r} has more than one effect per metric")
        self._effects[habit_id] = tuple(effects)

    def register_organ(self, organ: OrganDefinition) -> None:
        if organ.id in self._organs:
            raise ValueError(f"Duplicate organ id registered: {organ.id!r}")
        self._organs[organ.id] = organ

    def register_tier(self, tier: RecommendationTier) -> None:
        self._tiers.append(tier)

    def register_stat(self, stat: StatDefinition) -> None:
        if stat.id in self._stats:
            raise ValueError(f"Duplicate stat id registered: {stat.id!r}")
        self._stats[stat.id] = stat

    # -- Lookups --------------------------------------------------------------

    def get_habit(self, habit_id: str) -> HabitDefinition | None:
        """Look up a habit by ID."""
        return self._habits.get(habit_id)

    def get_metric(self, name: str) -> MetricDefinition | None:
        return self._metrics.get(name)

    def get_organ(self, organ_id: str) -> OrganDefinition | None:
        return self._organs.get(organ_id)

    def effects_for(self, habit_id: str) -> tuple[EffectDescriptor, ...]:
        """Effect descriptors for a habit; empty when the habit has no modelled effect."""
        return self._effects.get(habit_id, ())

    def has_effects(self, habit_id: str) -> bool:
        return habit_id in self._effects

    def display_name(self, habit_id: str) -> str:
        """Display name for a habit, falling back to the raw id."""
        habit = self._habits.get(habit_id)
        return habit.display_name if habit else habit_id

    def find_by_valence(self, valence: str) -> list[HabitDefinition]:
        ids = self._by_valence.get(valence, [])
        return [self._habits[hid] for hid in ids]

    @property
    def modelled_habit_ids(self) -> tuple[str, ...]:
        """Habits present in the impact model, in load order."""
        return tuple(self._effects)

    def habits(self) -> list[HabitDefinition]:
        return list(self._habits.values())

    def metrics(self) -> list[MetricDefinition]:
        """Metrics in declaration order."""
        return list(self._metrics.values())

    def organs(self) -> list[OrganDefinition]:
        """Organs in declaration order."""
        return list(self._organs.values())

    def tiers(self) -> list[RecommendationTier]:
        """Recommendation tiers in evaluation order."""
        return list(self._tiers)

    def stats(self) -> list[StatDefinition]:
        """Physiological stats in declaration order."""
        return list(self._stats.values())

    # -- Integrity ------------------------------------------------------------

    def orphan_effect_ids(self) -> list[str]:
        """Habits with modelled effects but no catalog entry."""
        return [hid for hid in self._effects if hid not in self._habits]

    def integrity_errors(self) -> list[str]:
        """Structural problems that make the catalog unusable.

        Orphaned impact entries are reported separately by orphan_effect_ids()
        because production builds tolerate them.
        """
        errors: list[str] = []

        if not self._metrics:
            errors.append("No metrics defined")

        for metric in self._metrics.values():
            if metric.lower > metric.upper:
                errors.append(f"Metric '{metric.name}': lower bound exceeds upper bound")
            elif not metric.lower <= metric.baseline <= metric.upper:
                errors.append(f"Metric '{metric.name}': baseline outside its range")

        for habit in self._habits.values():
            if habit.valence not in VALENCES:
                errors.append(f"Habit '{habit.id}': unknown valence '{habit.valence}'")
            if not habit.levels:
                errors.append(f"Habit '{habit.id}': no intensity levels")

        for habit_id, effects in self._effects.items():
            for effect in effects:
                where = f"Effect '{habit_id}.{effect.metric}'"
                if effect.metric not in self._metrics:
                    errors.append(f"{where}: unknown metric")
                if effect.shape not in EFFECT_SHAPES:
                    errors.append(f"{where}: unknown shape '{effect.shape}'")
                if effect.curve_exponent < 1.0:
                    errors.append(f"{where}: curve exponent {effect.curve_exponent} < 1.0")
                if effect.magnitude == 0:
                    errors.append(f"{where}: zero magnitude (omit the entry instead)")

        bounds = self.organ_bounds
        if bounds.lower > bounds.upper:
            errors.append("Organ bounds: lower bound exceeds upper bound")
        for organ in self._organs.values():
            if not bounds.lower <= organ.baseline <= bounds.upper:
                errors.append(f"Organ '{organ.id}': baseline outside organ bounds")
            for habit_id in organ.weights:
                if habit_id not in self._habits:
                    errors.append(f"Organ '{organ.id}': weight for unknown habit '{habit_id}'")

        stat_bounds = self.stat_bounds
        if stat_bounds.lower > stat_bounds.upper:
            errors.append("Stat bounds: lower bound exceeds upper bound")
        for stat in self._stats.values():
            if not stat_bounds.lower <= stat.baseline <= stat_bounds.upper:
                errors.append(f"Stat '{stat.id}': baseline outside stat bounds")
            for habit_id in stat.weights:
                if habit_id not in self._habits:
                    errors.append(f"Stat '{stat.id}': weight for unknown habit '{habit_id}'")

        for tier in self._tiers:
            if tier.priority not in PRIORITIES:
                errors.append(f"Tier '{tier.priority}': unknown priority")
            if tier.direction not in ("reduce", "increase"):
                errors.append(f"Tier '{tier.priority}': unknown direction '{tier.direction}'")
            elif tier.direction == "increase" and tier.target_level is None:
                errors.append(f"Tier '{tier.priority}': increase tier needs a target_level")
            for habit_id in tier.habits:
                if habit_id not in self._habits:
                    errors.append(f"Tier '{tier.priority}': unknown habit '{habit_id}'")

        return errors
