"""Catalog loader: reads the habit reference data from YAML files on disk."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from atlas.core.catalog.models import (
    EffectDescriptor,
    HabitDefinition,
    MetricDefinition,
    OrganBounds,
    OrganDefinition,
    RecommendationTier,
    StatBounds,
    StatDefinition,
)
from atlas.core.catalog.registry import CatalogIntegrityError, HabitCatalog
from atlas.core.config.settings import get_settings

logger = logging.getLogger(__name__)

# Packaged YAML definitions live under src/atlas/domains/habits/data/
DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent.parent / "domains" / "habits" / "data"

HABITS_FILE = "habits.yaml"
IMPACT_MODEL_FILE = "impact_model.yaml"
ORGANS_FILE = "organs.yaml"
RECOMMENDATIONS_FILE = "recommendations.yaml"
STATS_FILE = "stats.yaml"

CATALOG_FILES = (HABITS_FILE, IMPACT_MODEL_FILE, ORGANS_FILE, RECOMMENDATIONS_FILE, STATS_FILE)


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise CatalogIntegrityError(f"Catalog file not found: {path}")
    with open(path) as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise CatalogIntegrityError(f"{path.name}: expected a mapping at the top level")
    return data


def parse_habit(data: dict[str, Any]) -> HabitDefinition:
    """Parse a single habit entry."""
    return HabitDefinition(
        id=data["id"],
        display_name=data["display_name"],
        category=data.get("category", "general"),
        valence=data["valence"],
        levels=tuple(data.get("levels", [])),
        explanation=(data.get("explanation") or "").strip(),
    )


def parse_metric(data: dict[str, Any]) -> MetricDefinition:
    lower, upper = data["range"]
    return MetricDefinition(
        name=data["name"],
        display_name=data.get("display_name", data["name"].replace("_", " ").title()),
        baseline=float(data["baseline"]),
        lower=float(lower),
        upper=float(upper),
    )


def parse_effect(metric: str, data: dict[str, Any]) -> EffectDescriptor:
    return EffectDescriptor(
        metric=metric,
        shape=data["shape"],
        magnitude=float(data["magnitude"]),
        curve_exponent=float(data.get("curve", 1.0)),
    )


def parse_organ(data: dict[str, Any]) -> OrganDefinition:
    return OrganDefinition(
        id=data["id"],
        display_name=data["display_name"],
        description=(data.get("description") or "").strip(),
        baseline=float(data["baseline"]),
        weights={habit_id: float(w) for habit_id, w in (data.get("weights") or {}).items()},
    )


def parse_stat(data: dict[str, Any]) -> StatDefinition:
    return StatDefinition(
        id=data["id"],
        display_name=data.get("display_name", data["id"].replace("_", " ").title()),
        baseline=float(data["baseline"]),
        weights={habit_id: float(w) for habit_id, w in (data.get("weights") or {}).items()},
    )


def parse_tier(data: dict[str, Any]) -> RecommendationTier:
    return RecommendationTier(
        priority=data["priority"],
        direction=data["direction"],
        habits=tuple(data.get("habits", [])),
        action=data["action"],
        rationale=data["rationale"].strip(),
        expected_impact=data["expected_impact"].strip(),
        min_level=data.get("min_level"),
        target_level=data.get("target_level"),
    )


def populate_catalog(directory: Path, catalog: HabitCatalog) -> None:
    """Parse every catalog file in ``directory`` into ``catalog``.

    Raises CatalogIntegrityError naming the file when an entry is malformed.
    """
    current = HABITS_FILE
    try:
        habits_data = _read_yaml(directory / HABITS_FILE)
        for entry in habits_data.get("habits", []):
            catalog.register_habit(parse_habit(entry))

        current = IMPACT_MODEL_FILE
        impact_data = _read_yaml(directory / IMPACT_MODEL_FILE)
        for entry in impact_data.get("metrics", []):
            catalog.register_metric(parse_metric(entry))
        for habit_id, effects in (impact_data.get("effects") or {}).items():
            catalog.register_effects(
                habit_id,
                [parse_effect(metric, spec) for metric, spec in (effects or {}).items()],
            )

        current = ORGANS_FILE
        organs_data = _read_yaml(directory / ORGANS_FILE)
        bounds = organs_data.get("bounds") or {}
        catalog.organ_bounds = OrganBounds(
            lower=float(bounds.get("lower", 15.0)),
            upper=float(bounds.get("upper", 100.0)),
            level_scale=float(bounds.get("level_scale", 2.0)),
        )
        for entry in organs_data.get("organs", []):
            catalog.register_organ(parse_organ(entry))

        current = RECOMMENDATIONS_FILE
        rec_data = _read_yaml(directory / RECOMMENDATIONS_FILE)
        for entry in rec_data.get("tiers", []):
            catalog.register_tier(parse_tier(entry))

        current = STATS_FILE
        stats_data = _read_yaml(directory / STATS_FILE)
        bounds = stats_data.get("bounds") or {}
        catalog.stat_bounds = StatBounds(
            lower=float(bounds.get("lower", 0.0)),
            upper=float(bounds.get("upper", 10.0)),
        )
        for entry in stats_data.get("stats", []):
            catalog.register_stat(parse_stat(entry))
    except CatalogIntegrityError:
        raise
    except (KeyError, TypeError, ValueError) as exc:
        raise CatalogIntegrityError(f"{current}: malformed entry: {exc!r}") from exc


def load_catalog(directory: str | Path | None = None, *, strict: bool = False) -> HabitCatalog:
    """Load and integrity-check the catalog from a data directory.

    Structural problems (unknown metrics, bad shapes, tiers naming unknown
    habits) always raise. Impact entries for habits missing from the habit
    catalog raise only when ``strict``; otherwise they are logged and the
    scoring engine skips them.
    """
    directory = Path(directory) if directory else DEFAULT_DATA_DIR
    catalog = HabitCatalog()
    populate_catalog(directory, catalog)

    errors = catalog.integrity_errors()
    if errors:
        raise CatalogIntegrityError(errors)

    orphans = catalog.orphan_effect_ids()
    if orphans:
        if strict:
            raise CatalogIntegrityError(
                [f"Impact model entry '{hid}' has no habit catalog entry" for hid in orphans]
            )
        logger.warning("Impact model entries without catalog habits (ignored): %s", orphans)

    logger.info(
        "Loaded catalog from %s: %d habits, %d metrics, %d organs, %d stats, %d tiers",
        directory,
        len(catalog.habits()),
        len(catalog.metrics()),
        len(catalog.organs()),
        len(catalog.stats()),
        len(catalog.tiers()),
    )
    return catalog


@lru_cache(maxsize=1)
def get_default_catalog() -> HabitCatalog:
    """Load the process-wide catalog once, honouring ATLAS_DATA_DIR."""
    settings = get_settings()
    return load_catalog(settings.atlas_data_dir or None, strict=settings.atlas_strict_integrity)
