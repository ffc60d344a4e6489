# Overview: Flask API routes for sales operations; parses input and returns JSON responses.

# backend/retailpos/routes/sales.py
"""Sales API routes"""

from flask import Blueprint, request, jsonify

from ..services import sales_service
from .errors import json_error


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.post("")
def settle_sale_route():
    """
    Record a sale: decrements stock and accrues loyalty points.

    Request body:
    {
        "product_id": 1,               // required
        "quantity": 2,                 // required, > 0
        "customer_id": 3,              // optional
        "customer_name": "Alice",      // optional, loyalty lookup/create
        "customer_card_number": "C1",  // optional
        "total_cents": 1800            // optional, discounted total for points
    }
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid sale data"}), 400

    try:
        sale = sales_service.settle_sale(
            product_id=data.get("product_id"),
            quantity=data.get("quantity"),
            customer_id=data.get("customer_id"),
            customer_name=data.get("customer_name"),
            customer_card_number=data.get("customer_card_number"),
            total_cents=data.get("total_cents"),
        )
        return jsonify(sale.to_dict()), 201
    except Exception as e:
        return json_error(e, action="record sale")


@sales_bp.get("")
def list_sales_route():
    """
    Recent sales.

    Query params:
    - period: week | month | year (default week)
    - limit: int (optional)
    """
    period = request.args.get("period")
    limit = request.args.get("limit", type=int)
    try:
        return jsonify(sales_service.list_sales(period=period, limit=limit))
    except Exception as e:
        return json_error(e, action="list sales")


@sales_bp.get("/<int:sale_id>")
def get_sale_route(sale_id: int):
    try:
        return jsonify(sales_service.get_sale(sale_id).to_dict())
    except Exception as e:
        return json_error(e, action="get sale")
