"""Data models for the static habit, metric, organ and recommendation catalogs."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal

Valence = Literal["beneficial", "harmful"]
EffectShape = Literal["linear", "exponential", "diminishing"]
Priority = Literal["critical", "high", "moderate"]

VALENCES: tuple[str, ...] = ("beneficial", "harmful")
EFFECT_SHAPES: tuple[str, ...] = ("linear", "exponential", "diminishing")
PRIORITIES: tuple[str, ...] = ("critical", "high", "moderate")


@dataclass(frozen=True)
class HabitDefinition:
    """A trackable lifestyle behaviour with discrete intensity levels.

    ``levels`` holds the labels for levels 1..N; level 0 always means
    "not practised" and has no label.
    """

    id: str
    display_name: str
    category: str
    valence: Valence
    levels: tuple[str, ...]
    explanation: str = ""

    @property
    def max_level(self) -> int:
        return len(self.levels)

    def level_label(self, level: int) -> str:
        """Return the label for ``level`` ("none" for level 0)."""
        if level <= 0:
            return "none"
        return self.levels[level - 1]


@dataclass(frozen=True)
class EffectDescriptor:
    """How one habit moves one metric per unit of intensity."""

    metric: str
    shape: EffectShape
    magnitude: float
    curve_exponent: float = 1.0


@dataclass(frozen=True)
class MetricDefinition:
    """A whole-body metric with its baseline and realistic clamp range."""

    name: str
    display_name: str
    baseline: float
    lower: float
    upper: float

    def clamp(self, value: float) -> float:
        return max(self.lower, min(self.upper, value))


@dataclass(frozen=True)
class OrganDefinition:
    """An organ with its own baseline and habit vulnerability weights.

    Weights carry their sign: a negative weight means the habit damages the organ.
    They are stored as a read-only mapping so a loaded catalog cannot drift.
    """

    id: str
    display_name: str
    description: str
    baseline: float
    weights: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "weights", MappingProxyType(dict(self.weights)))


@dataclass(frozen=True)
class OrganBounds:
    """Projection constants shared by every organ."""

    lower: float = 15.0
    upper: float = 100.0
    level_scale: float = 2.0


@dataclass(frozen=True)
class StatDefinition:
    """A 0-10 physiological gauge moved linearly by habit levels."""

    id: str
    display_name: str
    baseline: float
    weights: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "weights", MappingProxyType(dict(self.weights)))


@dataclass(frozen=True)
class StatBounds:
    lower: float = 0.0
    upper: float = 10.0


@dataclass(frozen=True)
class RecommendationTier:
    """One priority tier of the recommendation ranker.

    ``direction`` is "reduce" (flag habits at or above ``min_level``) or
    "increase" (flag habits below ``target_level``).
    """

    priority: Priority
    direction: Literal["reduce", "increase"]
    habits: tuple[str, ...]
    action: str
    rationale: str
    expected_impact: str
    min_level: int | None = None
    target_level: int | None = None
