from __future__ import annotations

from ..extensions import db
from retailpos.time_utils import to_utc_z


DEFAULT_LOW_STOCK_THRESHOLD = 5
DEFAULT_MODERATE_STOCK_THRESHOLD = 10
DEFAULT_HIGH_STOCK_THRESHOLD = 20
DEFAULT_LOYALTY_POINTS_PER_DOLLAR = 1.0
MIN_LOYALTY_POINTS_PER_DOLLAR = 0.1


class StoreSettings(db.Model):
    """
    Singleton row of store-wide configuration.

    Exactly one row exists (id=1). It is created with the defaults above the
    first time anything reads it; see settings_service.get_settings().
    """
    __tablename__ = "store_settings"
    __table_args__ = (
        db.CheckConstraint(
            "low_stock_threshold < moderate_stock_threshold AND moderate_stock_threshold < high_stock_threshold",
            name="ck_store_settings_thresholds_ascending",
        ),
        db.CheckConstraint("loyalty_points_per_dollar >= 0.1", name="ck_store_settings_rate_min"),
    )

    SINGLETON_ID = 1

    id = db.Column(db.Integer, primary_key=True)

    low_stock_threshold = db.Column(db.Integer, nullable=False, default=DEFAULT_LOW_STOCK_THRESHOLD)
    moderate_stock_threshold = db.Column(db.Integer, nullable=False, default=DEFAULT_MODERATE_STOCK_THRESHOLD)
    high_stock_threshold = db.Column(db.Integer, nullable=False, default=DEFAULT_HIGH_STOCK_THRESHOLD)

    loyalty_points_enabled = db.Column(db.Boolean, nullable=False, default=False)
    loyalty_points_per_dollar = db.Column(db.Float, nullable=False, default=DEFAULT_LOYALTY_POINTS_PER_DOLLAR)

    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "low_stock_threshold": self.low_stock_threshold,
            "moderate_stock_threshold": self.moderate_stock_threshold,
            "high_stock_threshold": self.high_stock_threshold,
            "loyalty_points_enabled": self.loyalty_points_enabled,
            "loyalty_points_per_dollar": self.loyalty_points_per_dollar,
            "updated_at": to_utc_z(self.updated_at),
        }
