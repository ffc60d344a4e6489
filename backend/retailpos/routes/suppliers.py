# Overview: Flask API routes for supplier operations; parses input and returns JSON responses.

"""
Supplier Routes

- /api/suppliers            supplier CRUD
- /api/supplier-products    per-supplier product prices (upsert by supplier + product)
"""

from flask import Blueprint, request, jsonify

from ..models import Supplier, SupplierProduct
from ..services import supplier_service
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_supplier_price,
    ValidationError,
    parse_int,
)
from .errors import json_error

SUPPLIER_POLICY = ModelValidationPolicy(
    writable_fields={"name", "email", "phone", "address", "contact_name"},
    required_on_create={"name", "email"},
)

SUPPLIER_PRICE_POLICY = ModelValidationPolicy(
    writable_fields={"supplier_id", "product_id", "price_cents"},
    required_on_create={"supplier_id", "product_id", "price_cents"},
)


suppliers_bp = Blueprint("suppliers", __name__, url_prefix="/api")


@suppliers_bp.get("/suppliers")
def list_suppliers_route():
    try:
        suppliers = supplier_service.list_suppliers()
        return jsonify({
            "items": [s.to_dict() for s in suppliers],
            "count": len(suppliers),
        })
    except Exception as e:
        return json_error(e, action="fetch suppliers")


@suppliers_bp.get("/suppliers/<int:supplier_id>")
def get_supplier_route(supplier_id: int):
    try:
        return jsonify(supplier_service.get_supplier(supplier_id).to_dict())
    except Exception as e:
        return json_error(e, action="fetch supplier")


@suppliers_bp.post("/suppliers")
def create_supplier_route():
    """
    Create a new supplier.

    Request body:
    {
        "name": "Acme Wholesale",     // required
        "email": "orders@acme.test",  // required
        "phone": "...",               // optional
        "address": "...",             // optional
        "contact_name": "..."         // optional
    }
    """
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Supplier, payload=payload, policy=SUPPLIER_POLICY, partial=False)
        supplier = supplier_service.create_supplier(patch=patch)
        return jsonify(supplier.to_dict()), 201
    except Exception as e:
        return json_error(e, action="create supplier")


@suppliers_bp.put("/suppliers/<int:supplier_id>")
def update_supplier_route(supplier_id: int):
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Supplier, payload=payload, policy=SUPPLIER_POLICY, partial=True)
        supplier = supplier_service.update_supplier(supplier_id=supplier_id, patch=patch)
        return jsonify(supplier.to_dict())
    except Exception as e:
        return json_error(e, action="update supplier")


@suppliers_bp.delete("/suppliers/<int:supplier_id>")
def delete_supplier_route(supplier_id: int):
    try:
        supplier_service.delete_supplier(supplier_id=supplier_id)
        return jsonify({"message": "Supplier deleted"})
    except Exception as e:
        return json_error(e, action="delete supplier")


def _required_int_arg(name: str) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        raise ValidationError(f"{name} is required")
    return parse_int(raw, name)


@suppliers_bp.get("/supplier-products")
def list_supplier_prices_route():
    """
    Query params:
    - supplier_id: int (required)
    - product_id: int (optional)
    """
    try:
        supplier_id = _required_int_arg("supplier_id")
        product_id = request.args.get("product_id")
        prices = supplier_service.list_supplier_prices(
            supplier_id=supplier_id,
            product_id=parse_int(product_id, "product_id") if product_id else None,
        )
        return jsonify({
            "items": [sp.to_dict() for sp in prices],
            "count": len(prices),
        })
    except Exception as e:
        return json_error(e, action="fetch supplier products")


@suppliers_bp.post("/supplier-products")
def set_supplier_price_route():
    """Create or update a supplier's price for a product."""
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=SupplierProduct, payload=payload, policy=SUPPLIER_PRICE_POLICY, partial=False)
        enforce_rules_supplier_price(patch)
        sp = supplier_service.set_supplier_price(
            supplier_id=patch["supplier_id"],
            product_id=patch["product_id"],
            price_cents=patch["price_cents"],
        )
        return jsonify(sp.to_dict()), 201
    except Exception as e:
        return json_error(e, action="save supplier product")


@suppliers_bp.delete("/supplier-products")
def delete_supplier_price_route():
    try:
        supplier_service.delete_supplier_price(
            supplier_id=_required_int_arg("supplier_id"),
            product_id=_required_int_arg("product_id"),
        )
        return jsonify({"message": "Supplier product price deleted"})
    except Exception as e:
        return json_error(e, action="delete supplier product price")
