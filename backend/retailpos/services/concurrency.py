# Overview: Race-safe write primitives for settlement and retries for contended transactions.

"""
Row-level write helpers.

Stock and loyalty balances are read-modify-write hazards: two checkouts
can read the same quantity and both decrement it. The helpers here push
the arithmetic into a single UPDATE statement so the database applies it
atomically, and `run_with_retry` re-runs a unit of work when the engine
reports lock contention or an optimistic version conflict.
"""

from __future__ import annotations

import time

from flask import current_app
from sqlalchemy import update
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.exc import StaleDataError

from ..extensions import db

RETRYABLE_ERRORS = (OperationalError, StaleDataError)


def lock_for_update(query):
    """
    SELECT ... FOR UPDATE on engines that support it.

    SQLite ignores the clause; the conditional UPDATEs below keep writes
    correct there.
    """
    return query.with_for_update()


def decrement_if_available(model, row_id: int, column: str, amount: int) -> bool:
    """
    UPDATE model SET column = column - amount WHERE id = row_id AND column >= amount.

    Returns False when the row no longer holds `amount`; nothing is changed
    in that case. Bumps version_id so stale ORM copies are detected.
    """
    col = getattr(model, column)
    result = db.session.execute(
        update(model)
        .where(model.id == row_id, col >= amount)
        .values({column: col - amount, "version_id": model.version_id + 1})
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def increment_columns(model, row_id: int, **deltas) -> None:
    """UPDATE model SET col = col + delta, ... WHERE id = row_id (SQL-side arithmetic)."""
    values = {name: getattr(model, name) + delta for name, delta in deltas.items()}
    values["version_id"] = model.version_id + 1
    db.session.execute(
        update(model)
        .where(model.id == row_id)
        .values(values)
        .execution_options(synchronize_session=False)
    )


def run_with_retry(func, *, attempts: int = 3, backoff_base: float = 0.1):
    """
    Call `func` until it succeeds, retrying lock and version conflicts.

    The session is rolled back after every failure. Non-retryable errors
    propagate immediately; a retryable one propagates after `attempts`.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return func()
        except RETRYABLE_ERRORS as exc:
            db.session.rollback()
            if attempt >= attempts:
                raise
            current_app.logger.warning(
                "Retrying contended write (attempt %s of %s): %s", attempt, attempts, exc
            )
            time.sleep(backoff_base * (2 ** (attempt - 1)))
        except Exception:
            db.session.rollback()
            raise
