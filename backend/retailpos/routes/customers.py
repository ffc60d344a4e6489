# Overview: Flask API routes for customer operations; parses input and returns JSON responses.

"""
Customer Routes

GET /api/customers supports two lookups besides the full listing:
- ?card_number=X  exact card number match, returns the customer or null
- ?search=text    case-insensitive name substring, at most 10 results
"""

from flask import Blueprint, request, jsonify

from ..models import Customer
from ..services import customers_service
from ..validation import ModelValidationPolicy, validate_payload, enforce_rules_customer
from .errors import json_error

CUSTOMER_CREATE_POLICY = ModelValidationPolicy(
    writable_fields={"name", "card_number"},
    required_on_create={"name"},
)

CUSTOMER_UPDATE_POLICY = ModelValidationPolicy(
    writable_fields={"name", "card_number", "loyalty_points", "total_spent_cents"},
)


customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")


@customers_bp.get("")
def list_customers_route():
    card_number = request.args.get("card_number")
    search = request.args.get("search")

    try:
        if card_number:
            c = customers_service.find_by_card_number(card_number)
            return jsonify(c.to_dict() if c else None)

        customers = customers_service.list_customers(search=search)
        return jsonify({
            "items": [c.to_dict() for c in customers],
            "count": len(customers),
        })
    except Exception as e:
        return json_error(e, action="get customers")


@customers_bp.get("/<int:customer_id>")
def get_customer_route(customer_id: int):
    try:
        return jsonify(customers_service.get_customer(customer_id).to_dict())
    except Exception as e:
        return json_error(e, action="get customer")


@customers_bp.post("")
def create_customer_route():
    """
    Create a new customer.

    Request body:
    {
        "name": "Alice",        // required
        "card_number": "C-100"  // optional, unique
    }
    """
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Customer, payload=payload, policy=CUSTOMER_CREATE_POLICY, partial=False)
        customer = customers_service.create_customer(patch=patch)
        return jsonify(customer.to_dict()), 201
    except Exception as e:
        return json_error(e, action="create customer")


@customers_bp.put("/<int:customer_id>")
def update_customer_route(customer_id: int):
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Customer, payload=payload, policy=CUSTOMER_UPDATE_POLICY, partial=True)
        enforce_rules_customer(patch)
        customer = customers_service.update_customer(customer_id=customer_id, patch=patch)
        return jsonify(customer.to_dict())
    except Exception as e:
        return json_error(e, action="update customer")


@customers_bp.delete("/<int:customer_id>")
def delete_customer_route(customer_id: int):
    try:
        customers_service.delete_customer(customer_id=customer_id)
        return jsonify({"message": "Customer deleted"})
    except Exception as e:
        return json_error(e, action="delete customer")
