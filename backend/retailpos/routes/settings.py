# Overview: Flask API routes for the store settings singleton.

from __future__ import annotations

from flask import Blueprint, jsonify, request

from ..services import settings_service
from .errors import json_error


settings_bp = Blueprint("settings", __name__, url_prefix="/api")


@settings_bp.get("/settings")
def get_settings_route():
    try:
        return jsonify(settings_service.get_settings().to_dict())
    except Exception as e:
        return json_error(e, action="get settings")


@settings_bp.put("/settings")
def update_settings_route():
    """
    Update stock thresholds and loyalty configuration.

    Any subset of low_stock_threshold, moderate_stock_threshold,
    high_stock_threshold, loyalty_points_enabled, loyalty_points_per_dollar;
    omitted fields keep their stored values.
    """
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}

    try:
        settings = settings_service.update_settings(payload)
        return jsonify(settings.to_dict())
    except Exception as e:
        return json_error(e, action="update settings")
