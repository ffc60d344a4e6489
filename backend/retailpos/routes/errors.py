# Overview: Shared mapping from service exceptions to JSON error responses.

from flask import jsonify, current_app

from ..validation import ValidationError, ConflictError, NotFoundError
from ..services.sales_service import SaleError


def json_error(exc: Exception, *, action: str):
    """
    Translate a service exception into ({"error", "details"?}, status).

    Unexpected exceptions are logged with their traceback and reported as a
    generic failure of `action` with the exception text as details.
    """
    if isinstance(exc, ValidationError):
        return jsonify({"error": str(exc)}), 400
    if isinstance(exc, NotFoundError):
        return jsonify({"error": str(exc)}), 404
    if isinstance(exc, ConflictError):
        return jsonify({"error": str(exc)}), 409
    if isinstance(exc, SaleError):
        return jsonify({"error": str(exc), "details": exc.details}), 400

    current_app.logger.exception("Failed to %s", action)
    return jsonify({"error": f"Failed to {action}", "details": str(exc)}), 500
