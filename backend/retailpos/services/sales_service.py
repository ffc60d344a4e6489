"""
Sales Service - sale settlement

A settlement turns one checkout into three writes that commit together:
  1. a Sale row (price captured from the product at this moment)
  2. the product's on-hand quantity decremented by the sold quantity
  3. when loyalty applies, the customer's points and lifetime spend
     incremented

Validation happens before any write. The quantity decrement is a
compare-and-decrement (UPDATE ... WHERE quantity >= :q) and the loyalty
update is an SQL-side increment, so concurrent checkouts of the same
product or customer cannot oversell or lose points. Any failure rolls the
whole unit of work back.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

from flask import current_app

from ..extensions import db
from ..models import Sale, Product, Customer
from ..validation import ValidationError, NotFoundError, parse_int
from retailpos.time_utils import window_bounds, to_utc_z
from .concurrency import lock_for_update, run_with_retry, decrement_if_available, increment_columns
from .customers_service import find_customer_for_checkout, create_customer
from .settings_service import load_settings

POINTS_QUANTUM = Decimal("0.01")

SALES_PERIODS = {
    "week": 7,
    "month": 30,
    "year": 365,
}
DEFAULT_SALES_PERIOD = "week"


class SaleError(Exception):
    """Raised for sale operation errors."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class InsufficientStockError(SaleError):
    """Requested quantity exceeds what is on hand."""


def _insufficient(product_id: int, requested: int, on_hand: int) -> InsufficientStockError:
    return InsufficientStockError(
        "Insufficient stock",
        details={
            "product_id": product_id,
            "requested_quantity": requested,
            "on_hand": on_hand,
        },
    )


def compute_points(spend_cents: int, points_per_dollar: float) -> Decimal:
    """Points for a spend: dollars * rate, rounded half-up to 2 places."""
    dollars = Decimal(spend_cents) / 100
    return (dollars * Decimal(str(points_per_dollar))).quantize(POINTS_QUANTUM, rounding=ROUND_HALF_UP)


def _resolve_customer_id(customer_id, policy: str) -> int | None:
    """
    Existing customer id, or None.

    With the "ignore" policy an unknown id degrades to an anonymous sale;
    with "reject" it fails the settlement.
    """
    if customer_id is None or customer_id == "":
        return None
    customer_id = parse_int(customer_id, "customer_id")
    if db.session.get(Customer, customer_id) is not None:
        return customer_id
    if policy == "reject":
        raise NotFoundError("Customer not found")
    current_app.logger.warning(
        "Customer %s does not exist; recording sale without a customer", customer_id
    )
    return None


def _checkout_field(value, column: str, field: str) -> str | None:
    """Strip a checkout customer field; blank is None, over-long is rejected."""
    value = str(value or "").strip() or None
    max_length = Customer.__table__.c[column].type.length
    if value is not None and len(value) > max_length:
        raise ValidationError(f"{field} exceeds max length {max_length}")
    return value


def _checkout_customer(name: str, card_number: str | None) -> Customer:
    customer = find_customer_for_checkout(name, card_number)
    if customer is not None:
        return customer
    return create_customer(
        patch={"name": name, "card_number": card_number or None},
        commit=False,
    )


def settle_sale(
    *,
    product_id,
    quantity,
    customer_id=None,
    customer_name: str | None = None,
    customer_card_number: str | None = None,
    total_cents=None,
    missing_customer_policy: str | None = None,
) -> Sale:
    """
    Record one sale, decrement stock and accrue loyalty points atomically.

    Args:
        product_id: Product being sold
        quantity: Units sold, positive integer
        customer_id: Optional existing customer
        customer_name: Optional name; with loyalty enabled the customer is
            looked up (card number, then name) or created, and replaces
            customer_id
        customer_card_number: Optional card number for that lookup
        total_cents: Optional caller-computed total (e.g. after a discount);
            used for loyalty accrual only, the Sale total is always
            price * quantity. Zero or omitted means price * quantity
        missing_customer_policy: "ignore" or "reject"; defaults to the
            MISSING_CUSTOMER_POLICY config value

    Raises:
        ValidationError: quantity not a positive integer, bad ids or total,
            over-long customer name or card number
        NotFoundError: product missing (or customer, under "reject")
        InsufficientStockError: on-hand quantity below the request
        ConflictError: card number taken by a concurrent checkout
    """
    if quantity is None or quantity == "":
        raise ValidationError("quantity is required")
    quantity = parse_int(quantity, "quantity")
    if quantity <= 0:
        raise ValidationError("quantity must be a positive integer")

    if product_id is None or product_id == "":
        raise ValidationError("product_id is required")
    product_id = parse_int(product_id, "product_id")

    if total_cents is not None and total_cents != "":
        total_cents = parse_int(total_cents, "total_cents")
        if total_cents < 0:
            raise ValidationError("total_cents must be >= 0")
    else:
        total_cents = None

    customer_name = _checkout_field(customer_name, "name", "customer_name")
    customer_card_number = _checkout_field(customer_card_number, "card_number", "customer_card_number")

    if missing_customer_policy is None:
        missing_customer_policy = current_app.config.get("MISSING_CUSTOMER_POLICY", "ignore")

    def _op() -> Sale:
        product = lock_for_update(db.session.query(Product).filter_by(id=product_id)).first()
        if not product:
            raise NotFoundError("Product not found")

        if product.quantity < quantity:
            raise _insufficient(product.id, quantity, product.quantity)

        final_customer_id = _resolve_customer_id(customer_id, missing_customer_policy)

        unit_price_cents = product.price_cents
        sale_total_cents = unit_price_cents * quantity

        points = Decimal("0")
        spend_cents = 0
        loyalty_customer = None

        if customer_name:
            settings = load_settings()
            if settings.loyalty_points_enabled:
                loyalty_customer = _checkout_customer(customer_name, customer_card_number)
                final_customer_id = loyalty_customer.id
                spend_cents = total_cents or sale_total_cents
                points = compute_points(spend_cents, settings.loyalty_points_per_dollar)

        sale = Sale(
            product_id=product.id,
            customer_id=final_customer_id,
            quantity=quantity,
            unit_price_cents=unit_price_cents,
            total_cents=sale_total_cents,
            points_awarded=points,
        )
        db.session.add(sale)
        db.session.flush()

        if not decrement_if_available(Product, product.id, "quantity", quantity):
            # Another settlement consumed the stock after our read
            db.session.refresh(product)
            raise _insufficient(product.id, quantity, product.quantity)

        if loyalty_customer is not None:
            increment_columns(
                Customer,
                loyalty_customer.id,
                loyalty_points=points,
                total_spent_cents=spend_cents,
            )

        db.session.commit()
        return sale

    sale = run_with_retry(_op)
    current_app.logger.info(
        "Settled sale %s: product=%s quantity=%s total_cents=%s customer=%s points=%s",
        sale.id, sale.product_id, sale.quantity, sale.total_cents, sale.customer_id, sale.points_awarded,
    )
    return sale


def resolve_period(period: str | None) -> str:
    return period if period in SALES_PERIODS else DEFAULT_SALES_PERIOD


def list_sales(*, period: str | None = None, limit: int | None = None) -> dict:
    """Sales newest first within the period window (week, month or year)."""
    period = resolve_period(period)
    start, now = window_bounds(SALES_PERIODS[period])

    query = (
        db.session.query(Sale)
        .filter(Sale.created_at >= start)
        .order_by(Sale.created_at.desc(), Sale.id.desc())
    )
    if limit:
        query = query.limit(limit)
    sales = query.all()

    return {
        "period": period,
        "start": to_utc_z(start),
        "end": to_utc_z(now),
        "items": [s.to_dict() for s in sales],
        "count": len(sales),
    }


def get_sale(sale_id: int) -> Sale:
    sale = db.session.get(Sale, sale_id)
    if not sale:
        raise NotFoundError("Sale not found")
    return sale
