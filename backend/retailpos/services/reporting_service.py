# Overview: Service-layer operations for reporting; encapsulates business logic and database work.

from __future__ import annotations

import math
from sqlalchemy import func

from retailpos.extensions import db
from retailpos.models import Sale, Product
from retailpos.services.sales_service import SALES_PERIODS, resolve_period
from retailpos.time_utils import window_bounds, to_utc_z


# Days of cover each recommended threshold should hold, and its floor
LOW_COVER_DAYS, LOW_FLOOR = 3, 1
MODERATE_COVER_DAYS, MODERATE_FLOOR = 7, 5
HIGH_COVER_DAYS, HIGH_FLOOR = 14, 10

# Windows tried in order when estimating a product's daily sales
RECOMMENDATION_WINDOWS = (7, 30, 365)


def sales_analytics(*, period: str | None = None) -> dict:
    """
    Per-product sales totals over the last week, month or year.

    average_daily_sales is total quantity divided by the days in the period.
    """
    period = resolve_period(period)
    days = SALES_PERIODS[period]
    start, now = window_bounds(days)

    rows = (
        db.session.query(
            Sale.product_id,
            Product.name,
            func.sum(Sale.quantity),
            func.sum(Sale.total_cents),
            func.count(Sale.id),
        )
        .join(Product, Product.id == Sale.product_id)
        .filter(Sale.created_at >= start)
        .group_by(Sale.product_id, Product.name)
        .order_by(func.sum(Sale.total_cents).desc(), Sale.product_id.asc())
        .all()
    )

    analytics = []
    for product_id, name, qty, revenue, count in rows:
        analytics.append({
            "product_id": product_id,
            "product_name": name,
            "total_quantity": int(qty or 0),
            "total_revenue_cents": int(revenue or 0),
            "sales_count": int(count or 0),
            "average_daily_sales": round((qty or 0) / days, 4),
        })

    return {
        "period": period,
        "start": to_utc_z(start),
        "end": to_utc_z(now),
        "analytics": analytics,
    }


def _recommend(avg_daily: float) -> tuple[int, int, int]:
    return (
        max(LOW_FLOOR, math.ceil(avg_daily * LOW_COVER_DAYS)),
        max(MODERATE_FLOOR, math.ceil(avg_daily * MODERATE_COVER_DAYS)),
        max(HIGH_FLOOR, math.ceil(avg_daily * HIGH_COVER_DAYS)),
    )


def threshold_recommendations() -> dict:
    """
    Suggested low/moderate/high stock thresholds.

    A product's daily rate comes from the shortest window (7, 30, 365 days)
    that has any sales. Overall values are the rounded-up mean of the
    per-product recommendations, with the same floors.
    """
    year_ago, now = window_bounds(max(RECOMMENDATION_WINDOWS))

    products = db.session.query(Product).order_by(Product.name.asc(), Product.id.asc()).all()
    sales = (
        db.session.query(Sale.product_id, Sale.quantity, Sale.created_at)
        .filter(Sale.created_at >= year_ago)
        .all()
    )

    by_product: dict[int, list[tuple[int, object]]] = {}
    for product_id, quantity, created_at in sales:
        by_product.setdefault(product_id, []).append((quantity, created_at))

    recommendations = []
    for p in products:
        product_sales = by_product.get(p.id, [])
        window_counts = {}
        avg_daily = 0.0
        for days in RECOMMENDATION_WINDOWS:
            cutoff, _ = window_bounds(days, now=now)
            in_window = [q for q, created_at in product_sales if created_at >= cutoff]
            window_counts[days] = len(in_window)
            if not avg_daily and in_window:
                avg_daily = sum(in_window) / days

        low, moderate, high = _recommend(avg_daily)
        recommendations.append({
            "product_id": p.id,
            "product_name": p.name,
            "current_quantity": p.quantity,
            "average_daily_sales": round(avg_daily, 4),
            "recommended_low": low,
            "recommended_moderate": moderate,
            "recommended_high": high,
            "sales_data": {
                "week": window_counts[7],
                "month": window_counts[30],
                "year": window_counts[365],
            },
        })

    n = max(1, len(recommendations))
    overall = {
        "recommended_low": max(LOW_FLOOR, math.ceil(sum(r["recommended_low"] for r in recommendations) / n)),
        "recommended_moderate": max(MODERATE_FLOOR, math.ceil(sum(r["recommended_moderate"] for r in recommendations) / n)),
        "recommended_high": max(HIGH_FLOOR, math.ceil(sum(r["recommended_high"] for r in recommendations) / n)),
    }

    return {"overall": overall, "by_product": recommendations}
