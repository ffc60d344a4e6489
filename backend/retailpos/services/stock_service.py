# Overview: Stock level classification against the configured thresholds.

from __future__ import annotations

from ..extensions import db
from ..models import Product, StoreSettings
from .settings_service import load_settings


STOCK_OUT = "out"
STOCK_LOW = "low"
STOCK_MODERATE = "moderate"
STOCK_SUFFICIENT = "sufficient"
STOCK_HIGH = "high"

STOCK_LEVELS = (STOCK_OUT, STOCK_LOW, STOCK_MODERATE, STOCK_SUFFICIENT, STOCK_HIGH)


def classify_stock(quantity: int, settings: StoreSettings) -> str:
    """
    Map an on-hand quantity to a stock level.

    out         quantity == 0
    low         0 < quantity < low
    moderate    low <= quantity < moderate
    sufficient  moderate <= quantity < high
    high        quantity >= high
    """
    if quantity <= 0:
        return STOCK_OUT
    if quantity < settings.low_stock_threshold:
        return STOCK_LOW
    if quantity < settings.moderate_stock_threshold:
        return STOCK_MODERATE
    if quantity < settings.high_stock_threshold:
        return STOCK_SUFFICIENT
    return STOCK_HIGH


def product_payload(p: Product, settings: StoreSettings | None = None) -> dict:
    """Product dict plus its stock level under the current thresholds."""
    if settings is None:
        settings = load_settings()
    data = p.to_dict()
    data["stock_level"] = classify_stock(p.quantity, settings)
    return data


def stock_notifications() -> dict:
    """
    Products needing attention: out of stock, and in stock but below the
    low threshold.
    """
    settings = load_settings()
    low = settings.low_stock_threshold

    out_of_stock = (
        db.session.query(Product)
        .filter(Product.quantity == 0)
        .order_by(Product.name.asc(), Product.id.asc())
        .all()
    )
    low_stock = (
        db.session.query(Product)
        .filter(Product.quantity > 0, Product.quantity < low)
        .order_by(Product.quantity.asc(), Product.name.asc())
        .all()
    )
    report = {
        "low_stock_threshold": low,
        "out_of_stock": [product_payload(p, settings) for p in out_of_stock],
        "low_stock": [product_payload(p, settings) for p in low_stock],
        "count": len(out_of_stock) + len(low_stock),
    }
    db.session.commit()
    return report
