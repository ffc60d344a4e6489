from __future__ import annotations

from ..extensions import db


class DocumentSequence(db.Model):
    """
    Per-document-type counter used to allocate human-readable numbers.

    Incremented with a single UPDATE ... SET next_number = next_number + 1
    so concurrent allocations never hand out the same number.
    """
    __tablename__ = "document_sequences"
    __table_args__ = (
        db.UniqueConstraint("document_type", name="uq_document_sequences_type"),
    )

    id = db.Column(db.Integer, primary_key=True)
    document_type = db.Column(db.String(32), nullable=False)
    next_number = db.Column(db.Integer, nullable=False, default=1)
