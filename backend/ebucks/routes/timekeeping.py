# Overview: Flask API routes for the PIN time clock.

from flask import Blueprint, request, jsonify, current_app

from ..services import timekeeping_service, auth_service
from ..services.auth_service import InvalidPinError
from ..services.timekeeping_service import TimekeepingError
from ..validation import NotFoundError


timekeeping_bp = Blueprint("timekeeping", __name__, url_prefix="/api/clock")


@timekeeping_bp.post("")
def clock_route():
    """
    Toggle the PIN holder's shift.

    Returns:
        {"success": true, "action": "IN", "user": "Ada"}
        {"success": true, "action": "OUT", "user": "Ada", "hours": "3.50"}
    """
    data = request.get_json(silent=True) or {}
    pin = data.get("pin")
    if not pin:
        return jsonify({"error": "pin is required"}), 400

    try:
        action, user, entry = timekeeping_service.toggle_clock(pin)
    except InvalidPinError as e:
        return jsonify({"error": str(e)}), 401
    except TimekeepingError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to toggle clock")
        return jsonify({"error": "Internal server error"}), 500

    body = {"success": True, "action": action, "user": user.name, "entry": entry.to_dict()}
    if action == "OUT":
        body["hours"] = f"{(entry.total_minutes or 0) / 60:.2f}"
    return jsonify(body)


@timekeeping_bp.get("/status/<int:user_id>")
def clock_status_route(user_id: int):
    try:
        auth_service.get_user(user_id)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    return jsonify(timekeeping_service.get_current_status(user_id))
