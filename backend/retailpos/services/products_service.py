# backend/retailpos/services/products_service.py
"""
Products Service

Product CRUD for the inventory ledger. On-hand quantity is a stored
column here; settlement is the only writer that decrements it, edits
through this module set it directly.
"""
from __future__ import annotations
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import Product, Sale, SupplierProduct
from ..validation import ConflictError, NotFoundError
from .settings_service import load_settings
from .stock_service import product_payload

PRODUCT_MUTABLE_FIELDS = {"name", "barcode", "price_cents", "quantity"}


def apply_product_patch(p: Product, patch: dict) -> None:
    for k, v in patch.items():
        if k not in PRODUCT_MUTABLE_FIELDS:
            continue
        setattr(p, k, v)


def _ensure_barcode_free(barcode: str | None, product_id: int | None = None) -> None:
    if not barcode:
        return
    query = db.session.query(Product).filter(Product.barcode == barcode)
    if product_id is not None:
        query = query.filter(Product.id != product_id)
    if query.first():
        raise ConflictError("Barcode already exists.")


def list_products(
    search: str | None = None,
    page: int | None = None,
    per_page: int | None = None,
) -> dict:
    """
    Product listing with optional search and pagination.

    Args:
        search: case-insensitive name substring, or an exact barcode
        page: Page number (1-indexed). If None, returns all items.
        per_page: Items per page (default 20, max 100)

    Returns:
        Dict with 'items', 'count', and pagination metadata if paginated.
    """
    base_query = db.session.query(Product)

    if search:
        term = search.strip()
        base_query = base_query.filter(
            or_(
                func.lower(Product.name).contains(term.lower(), autoescape=True),
                Product.barcode == term,
            )
        )

    base_query = base_query.order_by(Product.name.asc(), Product.id.asc())
    settings = load_settings()

    # If no pagination requested, return all items
    if page is None:
        products = base_query.all()
        result = {
            "items": [product_payload(p, settings) for p in products],
            "count": len(products),
        }
        db.session.commit()
        return result

    # Pagination logic
    per_page = min(per_page or 20, 100)  # Default 20, max 100
    page = max(page, 1)  # Ensure page >= 1

    total = base_query.count()
    total_pages = (total + per_page - 1) // per_page if total > 0 else 1

    products = base_query.offset((page - 1) * per_page).limit(per_page).all()

    result = {
        "items": [product_payload(p, settings) for p in products],
        "count": len(products),
        "pagination": {
            "page": page,
            "per_page": per_page,
            "total": total,
            "total_pages": total_pages,
            "has_next": page < total_pages,
            "has_prev": page > 1,
        },
    }
    db.session.commit()
    return result


def get_product(product_id: int) -> Product:
    p = db.session.get(Product, product_id)
    if not p:
        raise NotFoundError("Product not found")
    return p


def get_product_by_barcode(barcode: str) -> Product:
    p = db.session.query(Product).filter(Product.barcode == barcode.strip()).first()
    if not p:
        raise NotFoundError("Product not found")
    return p


def create_product(*, patch: dict) -> Product:
    """
    Create product using a validated patch dict.

    Raises:
        ConflictError: If the barcode is already assigned
    """
    _ensure_barcode_free(patch.get("barcode"))

    p = Product(quantity=0)
    apply_product_patch(p, patch)

    db.session.add(p)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Barcode already exists.")
    return p


def update_product(*, product_id: int, patch: dict) -> Product:
    """
    Update a product.

    Raises:
        NotFoundError: If the product does not exist
        ConflictError: If the new barcode belongs to another product
    """
    p = get_product(product_id)

    if "barcode" in patch and patch["barcode"] != p.barcode:
        _ensure_barcode_free(patch["barcode"], product_id=p.id)

    apply_product_patch(p, patch)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Barcode already exists.")
    return p


def delete_product(*, product_id: int) -> None:
    """
    Delete a product and its supplier prices.

    Products with recorded sales cannot be deleted: the sale log is
    append-only and keeps its product reference.
    """
    p = get_product(product_id)

    sale_count = db.session.query(func.count(Sale.id)).filter(Sale.product_id == p.id).scalar()
    if sale_count:
        raise ConflictError(f"Product has {sale_count} recorded sale(s) and cannot be deleted.")

    db.session.query(SupplierProduct).filter(SupplierProduct.product_id == p.id).delete(
        synchronize_session=False
    )
    db.session.delete(p)
    db.session.commit()
