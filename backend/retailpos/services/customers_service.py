# Overview: Service-layer operations for customers; encapsulates business logic and database work.

"""
Customer Service

Customers carry the loyalty ledger: accumulated points and lifetime spend.
Card numbers are an optional alternate lookup key and are unique when set.
"""

from __future__ import annotations

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import Customer, Sale
from ..validation import ConflictError, NotFoundError

CUSTOMER_MUTABLE_FIELDS = {"name", "card_number", "loyalty_points", "total_spent_cents"}

SEARCH_RESULT_LIMIT = 10


def apply_customer_patch(c: Customer, patch: dict) -> None:
    for k, v in patch.items():
        if k not in CUSTOMER_MUTABLE_FIELDS:
            continue
        setattr(c, k, v)


def _ensure_card_number_free(card_number: str | None, customer_id: int | None = None) -> None:
    if not card_number:
        return
    query = db.session.query(Customer).filter(Customer.card_number == card_number)
    if customer_id is not None:
        query = query.filter(Customer.id != customer_id)
    if query.first():
        raise ConflictError("Card number already exists")


def list_customers(*, search: str | None = None) -> list[Customer]:
    """
    All customers by name, or at most SEARCH_RESULT_LIMIT whose name
    contains `search` (case-insensitive).
    """
    query = db.session.query(Customer).order_by(Customer.name.asc(), Customer.id.asc())
    if search:
        term = search.strip().lower()
        query = query.filter(
            func.lower(Customer.name).contains(term, autoescape=True)
        ).limit(SEARCH_RESULT_LIMIT)
    return query.all()


def find_by_card_number(card_number: str) -> Customer | None:
    card_number = (card_number or "").strip()
    if not card_number:
        return None
    return db.session.query(Customer).filter(Customer.card_number == card_number).first()


def find_by_name(name: str) -> Customer | None:
    """
    Case-insensitive exact name match.

    Names are not unique; when several customers share a name the one
    with the lowest id wins.
    """
    name = (name or "").strip()
    if not name:
        return None
    return (
        db.session.query(Customer)
        .filter(func.lower(Customer.name) == name.lower())
        .order_by(Customer.id.asc())
        .first()
    )


def find_customer_for_checkout(name: str | None, card_number: str | None) -> Customer | None:
    """Card number first, then name."""
    customer = None
    if card_number:
        customer = find_by_card_number(card_number)
    if customer is None and name:
        customer = find_by_name(name)
    return customer


def get_customer(customer_id: int) -> Customer:
    c = db.session.get(Customer, customer_id)
    if not c:
        raise NotFoundError("Customer not found")
    return c


def create_customer(*, patch: dict, commit: bool = True) -> Customer:
    """
    Create a customer with zero points and zero spend unless the patch
    says otherwise.

    Raises:
        ConflictError: If the card number is already assigned
    """
    _ensure_card_number_free(patch.get("card_number"))

    c = Customer(loyalty_points=0, total_spent_cents=0)
    apply_customer_patch(c, patch)
    db.session.add(c)

    if not commit:
        # Caller owns the transaction and rolls it back on failure
        try:
            db.session.flush()
        except IntegrityError:
            raise ConflictError("Card number already exists")
        return c

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Card number already exists")
    return c


def update_customer(*, customer_id: int, patch: dict) -> Customer:
    """
    Partial update of a customer.

    Raises:
        NotFoundError: If the customer does not exist
        ConflictError: If the new card number belongs to another customer
    """
    c = get_customer(customer_id)

    if "card_number" in patch and patch["card_number"] != c.card_number:
        _ensure_card_number_free(patch["card_number"], customer_id=c.id)

    apply_customer_patch(c, patch)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Card number already exists")
    return c


def delete_customer(*, customer_id: int) -> None:
    """Delete a customer; their past sales stay on the log without a customer."""
    c = get_customer(customer_id)

    db.session.execute(
        update(Sale).where(Sale.customer_id == c.id).values(customer_id=None)
    )
    db.session.delete(c)
    db.session.commit()
