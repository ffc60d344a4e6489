# Overview: Flask API routes for products operations; parses input and returns JSON responses.

# backend/retailpos/routes/products.py
"""Product (inventory ledger) routes."""
from flask import Blueprint, request, jsonify

from ..models import Product
from ..services import products_service
from ..services.stock_service import stock_notifications
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_product,
)
from .errors import json_error

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={"name", "barcode", "price_cents", "quantity"},
    required_on_create={"name", "price_cents"},
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
def list_products():
    """
    List products with their stock level.

    Query params:
    - search: str (optional) - name substring or exact barcode
    - page: int (optional) - page number (1-indexed). If omitted, returns all items.
    - per_page: int (optional) - items per page (default 20, max 100)
    """
    search = request.args.get("search")
    page = request.args.get("page", type=int)
    per_page = request.args.get("per_page", type=int)

    try:
        return products_service.list_products(search=search, page=page, per_page=per_page)
    except Exception as e:
        return json_error(e, action="list products")


@products_bp.get("/notifications")
def product_notifications():
    """Out-of-stock and low-stock products."""
    try:
        return stock_notifications()
    except Exception as e:
        return json_error(e, action="load stock notifications")


@products_bp.get("/barcode/<string:barcode>")
def get_product_by_barcode_route(barcode: str):
    try:
        p = products_service.get_product_by_barcode(barcode)
        return products_service.product_payload(p)
    except Exception as e:
        return json_error(e, action="look up product")


@products_bp.get("/<int:product_id>")
def get_product_route(product_id: int):
    try:
        p = products_service.get_product(product_id)
        return products_service.product_payload(p)
    except Exception as e:
        return json_error(e, action="load product")


@products_bp.post("")
def create_product_route():
    """Create a new product. Requires name and price_cents."""
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
        enforce_rules_product(patch)
        created = products_service.create_product(patch=patch)
        return jsonify(products_service.product_payload(created)), 201
    except Exception as e:
        return json_error(e, action="create product")


@products_bp.put("/<int:product_id>")
def update_product_route(product_id: int):
    """Update a product; omitted fields are left unchanged."""
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)
        enforce_rules_product(patch)
        updated = products_service.update_product(product_id=product_id, patch=patch)
        return products_service.product_payload(updated), 200
    except Exception as e:
        return json_error(e, action="update product")


@products_bp.delete("/<int:product_id>")
def delete_product_route(product_id: int):
    try:
        products_service.delete_product(product_id=product_id)
    except Exception as e:
        return json_error(e, action="delete product")

    return {"ok": True}, 200
