# Overview: Flask API routes for sales reporting and threshold recommendations.

from flask import Blueprint, request, jsonify

from ..services import reporting_service
from .errors import json_error


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/sales")
def sales_report_route():
    """Per-product sales totals. Query param period: week | month | year."""
    try:
        return jsonify(reporting_service.sales_analytics(period=request.args.get("period")))
    except Exception as e:
        return json_error(e, action="get analytics")


@reports_bp.get("/threshold-recommendations")
def threshold_recommendations_route():
    try:
        return jsonify(reporting_service.threshold_recommendations())
    except Exception as e:
        return json_error(e, action="get recommendations")
