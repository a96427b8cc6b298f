"""Catalog validator: ensures the habit reference data is well-formed.

Run as ``python -m atlas.core.catalog.validator [DATA_DIR]`` before shipping
an edited impact model; exits non-zero when any check fails.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from atlas.core.catalog.loader import CATALOG_FILES, DEFAULT_DATA_DIR, populate_catalog
from atlas.core.catalog.registry import CatalogIntegrityError, HabitCatalog
from atlas.core.config.settings import get_settings

logger = logging.getLogger(__name__)


def validate_catalog(catalog: HabitCatalog) -> list[str]:
    """Check a populated catalog, including the soft checks loading tolerates."""
    errors = list(catalog.integrity_errors())

    for habit_id in catalog.orphan_effect_ids():
        errors.append(f"Impact model entry '{habit_id}' has no habit catalog entry")

    # Every habit should move at least one metric, or it is dead weight in the UI.
    for habit in catalog.habits():
        if not catalog.has_effects(habit.id):
            errors.append(f"Habit '{habit.id}' has no impact model entry")

    # The assessment reads these by name.
    for name in _REQUIRED_METRICS:
        if catalog.get_metric(name) is None:
            errors.append(f"Required metric '{name}' is not defined")

    # Beneficial habits should never raise disease risk, harmful ones never lower it.
    for habit in catalog.find_by_valence("beneficial"):
        if any(m > 0 for m in _risk_magnitudes(catalog, habit.id)):
            errors.append(f"Beneficial habit '{habit.id}' increases disease_risk")
    for habit in catalog.find_by_valence("harmful"):
        if any(m < 0 for m in _risk_magnitudes(catalog, habit.id)):
            errors.append(f"Harmful habit '{habit.id}' decreases disease_risk")

    # Templates must only use the placeholders the engine fills in.
    for habit in catalog.habits():
        if habit.explanation and not _template_ok(habit.explanation, _EXPLANATION_FIELDS):
            errors.append(f"Habit '{habit.id}': explanation template has unknown placeholders")
    for tier in catalog.tiers():
        for label, template in (
            ("action", tier.action),
            ("rationale", tier.rationale),
            ("expected_impact", tier.expected_impact),
        ):
            if not _template_ok(template, _TIER_FIELDS):
                errors.append(f"Tier '{tier.priority}': {label} template has unknown placeholders")

    return errors


_REQUIRED_METRICS = ("general_health", "disease_risk")

_EXPLANATION_FIELDS = {
    "name": "Habit",
    "level": 1,
    "level_label": "light",
    "impact": 1,
    "intensity": "moderately",
}
_TIER_FIELDS = {"name": "Habit", "name_lower": "habit", "level": 1, "level_label": "light"}


def _risk_magnitudes(catalog: HabitCatalog, habit_id: str) -> list[float]:
    return [e.magnitude for e in catalog.effects_for(habit_id) if e.metric == "disease_risk"]


def _template_ok(template: str, fields: dict[str, object]) -> bool:
    try:
        template.format(**fields)
    except (KeyError, IndexError, ValueError):
        return False
    return True


def validate_data_directory(directory: str | Path) -> tuple[HabitCatalog | None, list[str]]:
    """Validate all catalog files in a directory.

    Returns: (catalog_or_none, errors)
    """
    directory = Path(directory)
    if not directory.is_dir():
        return None, [f"Catalog directory not found: {directory}"]

    missing = [name for name in CATALOG_FILES if not (directory / name).is_file()]
    if missing:
        return None, [f"{directory}: missing catalog file '{name}'" for name in missing]

    catalog = HabitCatalog()
    try:
        populate_catalog(directory, catalog)
    except CatalogIntegrityError as exc:
        return None, exc.errors

    return catalog, validate_catalog(catalog)


def main(argv: list[str] | None = None) -> int:
    """Validate a catalog directory and log every problem found."""
    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.atlas_log_level.upper(), logging.INFO))

    args = sys.argv[1:] if argv is None else argv
    directory = Path(args[0]) if args else Path(settings.atlas_data_dir or DEFAULT_DATA_DIR)

    catalog, errors = validate_data_directory(directory)
    for err in errors:
        logger.error("%s", err)

    if errors:
        logger.error("Catalog at %s failed validation with %d error(s)", directory, len(errors))
        return 1

    assert catalog is not None  # for type checkers
    logger.info(
        "Catalog at %s is valid: %d habits, %d organs",
        directory,
        len(catalog.habits()),
        len(catalog.organs()),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
