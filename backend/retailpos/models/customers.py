from __future__ import annotations

from ..extensions import db
from retailpos.time_utils import to_utc_z


class Customer(db.Model):
    """
    Customer master data for loyalty tracking.

    Customers are created explicitly through the API or lazily at checkout
    when a name is given and loyalty is enabled.

    Denormalized aggregates (loyalty_points, total_spent_cents) are only
    ever incremented SQL-side by settlement, or set directly by an edit.
    """
    __tablename__ = "customers"
    __table_args__ = (
        db.UniqueConstraint("card_number", name="uq_customers_card_number"),
        db.CheckConstraint("loyalty_points >= 0", name="ck_customers_points_non_negative"),
        db.CheckConstraint("total_spent_cents >= 0", name="ck_customers_spent_non_negative"),
        db.Index("ix_customers_name", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(255), nullable=False)
    card_number = db.Column(db.String(64), nullable=True)

    loyalty_points = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    total_spent_cents = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())
    version_id = db.Column(db.Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<Customer id={self.id} name={self.name!r} card_number={self.card_number!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "card_number": self.card_number,
            "loyalty_points": float(self.loyalty_points or 0),
            "total_spent_cents": self.total_spent_cents,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
            "version_id": self.version_id,
        }
