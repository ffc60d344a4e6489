# Overview: Flask API routes for purchase orders; parses input and returns JSON or HTML responses.

from flask import Blueprint, request, jsonify, make_response

from ..services import purchase_order_service
from .errors import json_error


purchase_orders_bp = Blueprint("purchase_orders", __name__, url_prefix="/api/purchase-orders")


@purchase_orders_bp.get("")
def list_purchase_orders_route():
    """
    Query params:
    - supplier_id: int (optional)
    - status: pending | ordered | received | cancelled (optional)
    """
    supplier_id = request.args.get("supplier_id", type=int)
    status = request.args.get("status")
    try:
        orders = purchase_order_service.list_purchase_orders(supplier_id=supplier_id, status=status)
        return jsonify({
            "items": [o.to_dict() for o in orders],
            "count": len(orders),
        })
    except Exception as e:
        return json_error(e, action="fetch purchase orders")


@purchase_orders_bp.post("")
def create_purchase_order_route():
    """
    Create a pending purchase order.

    Request body:
    {
        "supplier_id": 1,                        // required
        "items": [                               // required, non-empty
            {"product_id": 4, "product_name": "Widget", "quantity": 10, "unit_price_cents": 250}
        ],
        "total_cents": 2500,                     // optional, computed from items if omitted
        "notes": "...",                          // optional
        "expected_arrival_date": "2026-11-01"    // optional, ISO-8601
    }
    """
    data = request.get_json(silent=True) or {}

    try:
        order = purchase_order_service.create_purchase_order(
            supplier_id=data.get("supplier_id"),
            items=data.get("items"),
            total_cents=data.get("total_cents"),
            notes=data.get("notes"),
            expected_arrival_date=data.get("expected_arrival_date"),
        )
        return jsonify(order.to_dict()), 201
    except Exception as e:
        return json_error(e, action="create purchase order")


@purchase_orders_bp.get("/<int:order_id>")
def get_purchase_order_route(order_id: int):
    try:
        return jsonify(purchase_order_service.get_purchase_order(order_id).to_dict())
    except Exception as e:
        return json_error(e, action="fetch purchase order")


@purchase_orders_bp.put("/<int:order_id>/status")
def update_purchase_order_status_route(order_id: int):
    data = request.get_json(silent=True) or {}
    try:
        order = purchase_order_service.update_purchase_order_status(
            order_id=order_id,
            status=data.get("status"),
        )
        return jsonify(order.to_dict())
    except Exception as e:
        return json_error(e, action="update purchase order")


@purchase_orders_bp.get("/<int:order_id>/html")
def purchase_order_html_route(order_id: int):
    """Printable HTML rendering of a purchase order."""
    try:
        html = purchase_order_service.render_purchase_order_html(order_id)
    except Exception as e:
        return json_error(e, action="generate purchase order document")

    response = make_response(html)
    response.headers["Content-Type"] = "text/html; charset=utf-8"
    return response
