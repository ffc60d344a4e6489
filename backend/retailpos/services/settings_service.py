# Overview: Singleton store settings: lazy creation, merge-and-validate updates.

"""
Settings Service

The store_settings table holds exactly one row. Reads create it with the
defaults from models.settings when it is missing; updates merge the
incoming fields onto the stored row and validate the merged result, so a
field omitted from an update keeps its stored value.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import StoreSettings
from ..models.settings import (
    DEFAULT_LOW_STOCK_THRESHOLD,
    DEFAULT_MODERATE_STOCK_THRESHOLD,
    DEFAULT_HIGH_STOCK_THRESHOLD,
    DEFAULT_LOYALTY_POINTS_PER_DOLLAR,
    MIN_LOYALTY_POINTS_PER_DOLLAR,
)
from ..validation import ValidationError, parse_int, parse_decimal


THRESHOLD_FIELDS = ("low_stock_threshold", "moderate_stock_threshold", "high_stock_threshold")
SETTINGS_FIELDS = THRESHOLD_FIELDS + ("loyalty_points_enabled", "loyalty_points_per_dollar")


def load_settings() -> StoreSettings:
    """
    Return the singleton row, adding it to the session if absent.

    Does not commit: settlement calls this inside its own unit of work.
    """
    settings = db.session.get(StoreSettings, StoreSettings.SINGLETON_ID)
    if settings is not None:
        return settings

    settings = StoreSettings(
        id=StoreSettings.SINGLETON_ID,
        low_stock_threshold=DEFAULT_LOW_STOCK_THRESHOLD,
        moderate_stock_threshold=DEFAULT_MODERATE_STOCK_THRESHOLD,
        high_stock_threshold=DEFAULT_HIGH_STOCK_THRESHOLD,
        loyalty_points_enabled=False,
        loyalty_points_per_dollar=DEFAULT_LOYALTY_POINTS_PER_DOLLAR,
    )
    try:
        with db.session.begin_nested():
            db.session.add(settings)
    except IntegrityError:
        # Another request created the row first
        settings = db.session.get(StoreSettings, StoreSettings.SINGLETON_ID)
    return settings


def get_settings() -> StoreSettings:
    """Fetch the singleton settings, creating and committing defaults on first access."""
    settings = load_settings()
    db.session.commit()
    return settings


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off", ""):
            return False
        raise ValidationError("loyalty_points_enabled must be a boolean")
    if isinstance(value, int):
        return bool(value)
    raise ValidationError("loyalty_points_enabled must be a boolean")


def validate_settings(values: dict) -> None:
    low = values["low_stock_threshold"]
    moderate = values["moderate_stock_threshold"]
    high = values["high_stock_threshold"]

    if low < 0:
        raise ValidationError("low_stock_threshold must be >= 0")
    if not (low < moderate < high):
        raise ValidationError("Thresholds must be in ascending order: low < moderate < high")

    if values["loyalty_points_per_dollar"] < MIN_LOYALTY_POINTS_PER_DOLLAR:
        raise ValidationError(
            f"loyalty_points_per_dollar must be at least {MIN_LOYALTY_POINTS_PER_DOLLAR}"
        )


def update_settings(patch: dict) -> StoreSettings:
    """
    Merge `patch` onto the stored settings and persist.

    Raises:
        ValidationError: unknown field, malformed value, thresholds not
            strictly ascending, or loyalty rate below the minimum. Nothing
            is persisted in that case.
    """
    if not isinstance(patch, dict):
        raise ValidationError("Invalid JSON payload")

    for key in patch:
        if key not in SETTINGS_FIELDS:
            raise ValidationError(f"Field not allowed: {key}")

    try:
        settings = load_settings()

        merged = {field: getattr(settings, field) for field in SETTINGS_FIELDS}
        for field in THRESHOLD_FIELDS:
            if patch.get(field) is not None:
                merged[field] = parse_int(patch[field], field)
        if patch.get("loyalty_points_enabled") is not None:
            merged["loyalty_points_enabled"] = _parse_bool(patch["loyalty_points_enabled"])
        if patch.get("loyalty_points_per_dollar") is not None:
            merged["loyalty_points_per_dollar"] = float(
                parse_decimal(patch["loyalty_points_per_dollar"], "loyalty_points_per_dollar")
            )

        validate_settings(merged)

        for field, value in merged.items():
            setattr(settings, field, value)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return settings
