"""Result models and domain constants for habit assessments."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Literal

from atlas.core.catalog.models import Priority

Direction = Literal["positive", "negative"]


# ---------------------------------------------------------------------------
# Domain constants
# ---------------------------------------------------------------------------

# Overall health category thresholds on general_health (descending)
HEALTH_CATEGORIES = [
    (85.0, "excellent"),
    (70.0, "good"),
    (55.0, "moderate"),
    (40.0, "concerning"),
]
HEALTH_CATEGORY_FLOOR = "critical"

# Organ status thresholds on the organ health value (descending)
ORGAN_STATUSES = [
    (80.0, "excellent"),
    (60.0, "good"),
    (40.0, "concerning"),
]
ORGAN_STATUS_FLOOR = "critical"

# Below this an organ report recommends seeing a health professional
ORGAN_CONSULT_THRESHOLD = 60.0

# Metrics and stats where a lower value is the better outcome
LOWER_IS_BETTER = frozenset({"disease_risk", "cardio_strain", "inflammation", "stress_load"})

OUTPUT_NDIGITS = 2


def _round_floats(obj: Any, ndigits: int = OUTPUT_NDIGITS) -> Any:
    if isinstance(obj, float):
        return round(obj, ndigits)
    if isinstance(obj, dict):
        return {k: _round_floats(v, ndigits=ndigits) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_round_floats(v, ndigits=ndigits) for v in obj]
    return obj


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DominantFactor:
    """A habit whose exponential effects are large enough to call out."""

    habit_id: str
    display_name: str
    level: int
    impact: float                   # sum of |delta| over exponential effects
    primary_metric: str             # metric with the largest exponential |delta|
    direction: Direction            # from habit valence, not delta sign
    explanation: str = ""


@dataclass(frozen=True)
class Recommendation:
    """A templated suggestion to change one habit's level."""

    priority: Priority
    habit_id: str
    action: str
    rationale: str
    expected_impact: str


@dataclass
class ScoreResult:
    """Output of the scoring engine."""

    metrics: dict[str, float]
    raw: dict[str, float]           # pre-clamp values
    positive_factors: list[DominantFactor] = field(default_factory=list)
    negative_factors: list[DominantFactor] = field(default_factory=list)

    @property
    def dominant_factors(self) -> list[DominantFactor]:
        """Both buckets, positive first."""
        return [*self.positive_factors, *self.negative_factors]


@dataclass
class OrganContribution:
    """One habit's effect on one organ."""

    habit_id: str
    display_name: str
    valence: str
    level: int
    delta: float
    explanation: str = ""


@dataclass
class OrganReport:
    """Narrated view of a single organ for detail panels."""

    organ_id: str
    display_name: str
    description: str
    health: float
    status: str
    affecting_habits: list[OrganContribution] = field(default_factory=list)
    advice: list[str] = field(default_factory=list)


@dataclass
class HabitAssessment:
    """Aggregate result handed back to the caller for one habit selection."""

    selection: dict[str, int]
    metrics: dict[str, float]
    organs: dict[str, float]
    positive_factors: list[DominantFactor]
    negative_factors: list[DominantFactor]
    recommendations: list[Recommendation]
    health_category: str
    organ_reports: dict[str, OrganReport] = field(default_factory=dict)
    stats: dict[str, float] = field(default_factory=dict)
    active_habits: dict[str, list[str]] = field(default_factory=dict)

    @property
    def overall_health(self) -> float:
        return self.metrics["general_health"]

    def to_dict(self, ndigits: int = OUTPUT_NDIGITS) -> dict[str, Any]:
        """JSON-ready representation with floats rounded for display."""
        return _round_floats(asdict(self), ndigits=ndigits)


@dataclass(frozen=True)
class ValueChange:
    """Before/after values for one metric or organ."""

    before: float
    after: float
    delta: float
    direction: str                  # 'improving' | 'declining' | 'stable'


@dataclass
class AssessmentComparison:
    """Before/after comparison of two assessments."""

    metrics: dict[str, ValueChange]
    organs: dict[str, ValueChange]
    health_category_before: str
    health_category_after: str
    stats: dict[str, ValueChange] = field(default_factory=dict)

    def improved(self) -> list[str]:
        """Names of metrics, organs and stats that improved."""
        return [
            name
            for table in (self.metrics, self.organs, self.stats)
            for name, change in table.items()
            if change.direction == "improving"
        ]

    def declined(self) -> list[str]:
        return [
            name
            for table in (self.metrics, self.organs, self.stats)
            for name, change in table.items()
            if change.direction == "declining"
        ]

    def to_dict(self, ndigits: int = OUTPUT_NDIGITS) -> dict[str, Any]:
        return _round_floats(asdict(self), ndigits=ndigits)
