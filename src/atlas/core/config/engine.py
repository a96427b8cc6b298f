"""Engine tunables passed explicitly into the pure scoring functions.

Settings are read from the environment once by the caller; the engine itself
never touches the environment, so the same selection always yields the same
profile for a given EngineConfig.
"""

from __future__ import annotations

from dataclasses import dataclass

from atlas.core.config.settings import Settings, get_settings

# Hard ceiling on recommendations per assessment; configuration may lower it only
MAX_RECOMMENDATIONS_CAP = 5


@dataclass(frozen=True)
class EngineConfig:
    """Thresholds shared by the scoring engine and the recommendation ranker."""

    # An exponential effect counts towards a dominant factor when |magnitude| > this
    dominant_threshold: float = 3.0

    # Critical-tier habits are flagged at level >= this
    critical_min_level: int = 1

    max_recommendations: int = 5

    # Raise instead of skipping when the impact model and habit catalog disagree
    strict_integrity: bool = False

    def __post_init__(self):
        if self.dominant_threshold < 0:
            raise ValueError(f"dominant_threshold must be >= 0, got {self.dominant_threshold}")
        if self.critical_min_level < 1:
            raise ValueError(f"critical_min_level must be >= 1, got {self.critical_min_level}")
        if not 0 <= self.max_recommendations <= MAX_RECOMMENDATIONS_CAP:
            raise ValueError(
                f"max_recommendations must be between 0 and {MAX_RECOMMENDATIONS_CAP}, "
                f"got {self.max_recommendations}"
            )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> EngineConfig:
        settings = settings or get_settings()
        return cls(
            dominant_threshold=settings.atlas_dominant_threshold,
            critical_min_level=settings.atlas_critical_min_level,
            max_recommendations=settings.atlas_max_recommendations,
            strict_integrity=settings.atlas_strict_integrity,
        )
