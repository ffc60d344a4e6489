# Overview: Service-layer operations for purchase orders; encapsulates business logic and database work.

"""
Purchase Order Service

A purchase order is a header with a JSON-encoded list of line items:
    {"product_id": int | None, "product_name": str, "quantity": int, "unit_price_cents": int}

Order numbers come from the PURCHASE_ORDER document sequence ("PO-000001").
Orders are rendered to printable HTML; binary PDF output is left to the
browser's print dialog.
"""

from __future__ import annotations

import json

from flask import render_template

from ..extensions import db
from ..models import PurchaseOrder, Product
from ..validation import ValidationError, NotFoundError, parse_int
from retailpos.time_utils import parse_iso_datetime
from .document_service import next_document_number
from .supplier_service import get_supplier

PO_STATUSES = ("pending", "ordered", "received", "cancelled")


def _clean_item(raw, index: int) -> dict:
    if not isinstance(raw, dict):
        raise ValidationError(f"items[{index}] must be an object")

    product_id = raw.get("product_id")
    if product_id is not None:
        product_id = parse_int(product_id, f"items[{index}].product_id")

    product_name = str(raw.get("product_name") or "").strip()
    if not product_name and product_id is not None:
        product = db.session.get(Product, product_id)
        if product is None:
            raise NotFoundError(f"items[{index}]: product {product_id} not found")
        product_name = product.name
    if not product_name:
        raise ValidationError(f"items[{index}].product_name is required")

    if raw.get("quantity") is None:
        raise ValidationError(f"items[{index}].quantity is required")
    quantity = parse_int(raw["quantity"], f"items[{index}].quantity")
    if quantity <= 0:
        raise ValidationError(f"items[{index}].quantity must be > 0")

    unit_price_cents = parse_int(raw.get("unit_price_cents", 0), f"items[{index}].unit_price_cents")
    if unit_price_cents < 0:
        raise ValidationError(f"items[{index}].unit_price_cents must be >= 0")

    return {
        "product_id": product_id,
        "product_name": product_name,
        "quantity": quantity,
        "unit_price_cents": unit_price_cents,
    }


def items_total_cents(items: list[dict]) -> int:
    return sum(item["quantity"] * item["unit_price_cents"] for item in items)


def list_purchase_orders(*, supplier_id: int | None = None, status: str | None = None) -> list[PurchaseOrder]:
    query = db.session.query(PurchaseOrder)
    if supplier_id is not None:
        query = query.filter(PurchaseOrder.supplier_id == supplier_id)
    if status:
        query = query.filter(PurchaseOrder.status == status)
    return query.order_by(PurchaseOrder.created_at.desc(), PurchaseOrder.id.desc()).all()


def get_purchase_order(order_id: int) -> PurchaseOrder:
    order = db.session.get(PurchaseOrder, order_id)
    if not order:
        raise NotFoundError("Purchase order not found")
    return order


def create_purchase_order(
    *,
    supplier_id,
    items,
    total_cents=None,
    notes: str | None = None,
    expected_arrival_date: str | None = None,
) -> PurchaseOrder:
    """
    Create a pending purchase order.

    Raises:
        ValidationError: missing supplier, empty or malformed items, bad date
        NotFoundError: supplier (or a referenced product) does not exist
    """
    if supplier_id is None or supplier_id == "":
        raise ValidationError("supplier_id is required")
    supplier_id = parse_int(supplier_id, "supplier_id")

    if not isinstance(items, list) or not items:
        raise ValidationError("items must be a non-empty list")

    try:
        expected_arrival_at = parse_iso_datetime(expected_arrival_date) if expected_arrival_date else None
    except ValueError:
        raise ValidationError("expected_arrival_date must be an ISO-8601 date")

    def _create() -> PurchaseOrder:
        supplier = get_supplier(supplier_id)
        cleaned = [_clean_item(raw, i) for i, raw in enumerate(items)]

        if total_cents is None or total_cents == "":
            order_total = items_total_cents(cleaned)
        else:
            order_total = parse_int(total_cents, "total_cents")
            if order_total < 0:
                raise ValidationError("total_cents must be >= 0")

        order = PurchaseOrder(
            supplier_id=supplier.id,
            order_number=next_document_number(document_type="PURCHASE_ORDER", prefix="PO"),
            status="pending",
            items=json.dumps(cleaned),
            total_cents=order_total,
            notes=(notes or "").strip() or None,
            expected_arrival_at=expected_arrival_at,
        )
        db.session.add(order)
        db.session.commit()
        return order

    try:
        return _create()
    except Exception:
        db.session.rollback()
        raise


def update_purchase_order_status(*, order_id: int, status: str) -> PurchaseOrder:
    if status not in PO_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(PO_STATUSES)}")
    order = get_purchase_order(order_id)
    order.status = status
    db.session.commit()
    return order


def render_purchase_order_html(order_id: int) -> str:
    """Printable HTML for a purchase order (autoescaped Jinja template)."""
    order = get_purchase_order(order_id)
    items = [
        dict(item, line_total_cents=item["quantity"] * item["unit_price_cents"])
        for item in order.item_list
    ]
    return render_template(
        "purchase_order.html",
        order=order,
        supplier=order.supplier,
        items=items,
    )
