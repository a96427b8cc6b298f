"""Shared test fixtures for Habit Atlas tests."""

from __future__ import annotations

import shutil
import sys
from pathlib import Path

import pytest

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from atlas.core.catalog.loader import DEFAULT_DATA_DIR, get_default_catalog, load_catalog  # noqa: E402
from atlas.core.catalog.models import (  # noqa: E402
    EffectDescriptor,
    HabitDefinition,
    MetricDefinition,
    OrganBounds,
    OrganDefinition,
    RecommendationTier,
)
from atlas.core.catalog.registry import HabitCatalog  # noqa: E402
from atlas.core.config.engine import EngineConfig  # noqa: E402

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

_ENV_VARS = (
    "ATLAS_DATA_DIR",
    "ATLAS_LOG_LEVEL",
    "ATLAS_STRICT_INTEGRITY",
    "ATLAS_DOMINANT_THRESHOLD",
    "ATLAS_CRITICAL_MIN_LEVEL",
    "ATLAS_MAX_RECOMMENDATIONS",
)


@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # A stray .env in the working directory must not leak into Settings.
    monkeypatch.chdir(tmp_path)
    get_default_catalog.cache_clear()
    yield
    get_default_catalog.cache_clear()


# ---------------------------------------------------------------------------
# Catalog fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def catalog() -> HabitCatalog:
    """The packaged catalog, loaded strictly."""
    return load_catalog(DEFAULT_DATA_DIR, strict=True)


@pytest.fixture
def engine_config() -> EngineConfig:
    return EngineConfig()


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """A writable copy of the packaged catalog files."""
    target = tmp_path / "data"
    shutil.copytree(DEFAULT_DATA_DIR, target)
    return target


def make_tiny_catalog() -> HabitCatalog:
    """A three-habit catalog with hand-checkable numbers.

    focus (beneficial): linear +2 on score, exponential +4 (curve 2) on mood
    junk (harmful):     exponential -5 (curve 1) on score, diminishing +1 on mood
    nap (beneficial):   diminishing +3 on mood, exponential +1 (curve 2) on score
    """
    cat = HabitCatalog()
    levels = ("low", "mid", "high")
    cat.register_habit(HabitDefinition("focus", "Focus", "mental", "beneficial", levels,
                                       explanation="{name} L{level} {intensity} +{impact}"))
    cat.register_habit(HabitDefinition("junk", "Junk Food", "nutrition", "harmful", levels))
    cat.register_habit(HabitDefinition("nap", "Napping", "sleep", "beneficial", levels))

    cat.register_metric(MetricDefinition("score", "Score", 50.0, 10.0, 100.0))
    cat.register_metric(MetricDefinition("mood", "Mood", 40.0, 0.0, 60.0))

    cat.register_effects("focus", [
        EffectDescriptor("score", "linear", 2.0),
        EffectDescriptor("mood", "exponential", 4.0, 2.0),
    ])
    cat.register_effects("junk", [
        EffectDescriptor("score", "exponential", -5.0, 1.0),
        EffectDescriptor("mood", "diminishing", 1.0),
    ])
    cat.register_effects("nap", [
        EffectDescriptor("mood", "diminishing", 3.0),
        EffectDescriptor("score", "exponential", 1.0, 2.0),
    ])

    cat.organ_bounds = OrganBounds(lower=15.0, upper=100.0, level_scale=2.0)
    cat.register_organ(OrganDefinition("heart", "Heart", "Pumps blood.", 75.0,
                                       {"junk": -4.0, "focus": 1.0}))
    cat.register_organ(OrganDefinition("skin", "Skin", "Outer barrier.", 80.0, {"nap": 2.0}))

    cat.register_tier(RecommendationTier(
        priority="critical", direction="reduce", habits=("junk",),
        action="Reduce {name_lower}", rationale="{name} hurts.", expected_impact="Big.",
    ))
    cat.register_tier(RecommendationTier(
        priority="high", direction="increase", habits=("focus", "nap"), target_level=2,
        action="Improve {name_lower}", rationale="{name} helps.", expected_impact="Medium.",
    ))
    return cat


@pytest.fixture
def tiny_catalog() -> HabitCatalog:
    return make_tiny_catalog()
