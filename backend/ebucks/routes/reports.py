# Overview: Flask API routes for financial reports and economy stats.

from flask import Blueprint, request, jsonify

from ..services import reporting_service
from ebucks.time_utils import parse_iso_datetime


reports_bp = Blueprint("reports", __name__, url_prefix="/api")


@reports_bp.get("/financials")
def financials_route():
    """
    Transaction history, newest first, with item names.

    Query params:
    - from: ISO-8601 lower bound (inclusive, optional)
    - to: ISO-8601 upper bound (inclusive, optional)
    """
    try:
        start = parse_iso_datetime(request.args.get("from"))
        end = parse_iso_datetime(request.args.get("to"))
    except ValueError:
        return jsonify({"error": "from/to must be ISO-8601 datetimes"}), 400

    return jsonify(reporting_service.financials(start, end))


@reports_bp.get("/stats")
def stats_route():
    return jsonify(reporting_service.stats())
