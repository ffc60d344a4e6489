# Overview: Service-layer operations for suppliers and supplier prices.

"""
Supplier Service

Suppliers are contact records. A supplier price (SupplierProduct) is what
one supplier charges for one product; writes are upserts keyed by
(supplier_id, product_id).
"""

from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import Supplier, SupplierProduct, PurchaseOrder, Product
from ..validation import ConflictError, NotFoundError

SUPPLIER_MUTABLE_FIELDS = {"name", "email", "phone", "address", "contact_name"}


def apply_supplier_patch(s: Supplier, patch: dict) -> None:
    for k, v in patch.items():
        if k not in SUPPLIER_MUTABLE_FIELDS:
            continue
        setattr(s, k, v)


def list_suppliers() -> list[Supplier]:
    return db.session.query(Supplier).order_by(Supplier.name.asc(), Supplier.id.asc()).all()


def get_supplier(supplier_id: int) -> Supplier:
    s = db.session.get(Supplier, supplier_id)
    if not s:
        raise NotFoundError("Supplier not found")
    return s


def create_supplier(*, patch: dict) -> Supplier:
    s = Supplier()
    apply_supplier_patch(s, patch)
    db.session.add(s)
    db.session.commit()
    return s


def update_supplier(*, supplier_id: int, patch: dict) -> Supplier:
    s = get_supplier(supplier_id)
    apply_supplier_patch(s, patch)
    db.session.commit()
    return s


def delete_supplier(*, supplier_id: int) -> None:
    """
    Delete a supplier together with its prices.

    Raises:
        NotFoundError: If the supplier does not exist
        ConflictError: If purchase orders reference the supplier
    """
    s = get_supplier(supplier_id)

    order_count = (
        db.session.query(func.count(PurchaseOrder.id))
        .filter(PurchaseOrder.supplier_id == s.id)
        .scalar()
    )
    if order_count:
        raise ConflictError(f"Supplier has {order_count} purchase order(s) and cannot be deleted.")

    db.session.query(SupplierProduct).filter(SupplierProduct.supplier_id == s.id).delete(
        synchronize_session=False
    )
    db.session.delete(s)
    db.session.commit()


def list_supplier_prices(*, supplier_id: int, product_id: int | None = None) -> list[SupplierProduct]:
    query = db.session.query(SupplierProduct).filter(SupplierProduct.supplier_id == supplier_id)
    if product_id is not None:
        query = query.filter(SupplierProduct.product_id == product_id)
    return query.order_by(SupplierProduct.product_id.asc()).all()


def set_supplier_price(*, supplier_id: int, product_id: int, price_cents: int) -> SupplierProduct:
    """
    Create or update the price `supplier_id` charges for `product_id`.

    Raises:
        NotFoundError: If the supplier or product does not exist
    """
    get_supplier(supplier_id)
    if db.session.get(Product, product_id) is None:
        raise NotFoundError("Product not found")

    def _find():
        return (
            db.session.query(SupplierProduct)
            .filter_by(supplier_id=supplier_id, product_id=product_id)
            .first()
        )

    sp = _find()
    if sp is None:
        try:
            with db.session.begin_nested():
                sp = SupplierProduct(supplier_id=supplier_id, product_id=product_id, price_cents=price_cents)
                db.session.add(sp)
        except IntegrityError:
            # Concurrent upsert inserted the row first; fall through to update
            sp = _find()
            if sp is None:
                raise ConflictError("Supplier price could not be saved")
    sp.price_cents = price_cents
    db.session.commit()
    return sp


def delete_supplier_price(*, supplier_id: int, product_id: int) -> None:
    deleted = (
        db.session.query(SupplierProduct)
        .filter_by(supplier_id=supplier_id, product_id=product_id)
        .delete(synchronize_session=False)
    )
    if not deleted:
        db.session.rollback()
        raise NotFoundError("Supplier price not found")
    db.session.commit()
