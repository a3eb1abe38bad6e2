# Overview: Flask API routes for PIN identification.

from flask import Blueprint, request, jsonify, current_app

from ..services import auth_service


auth_bp = Blueprint("auth", __name__, url_prefix="/api")


@auth_bp.post("/login")
def login_pin_route():
    """
    Identify a user by PIN.

    Request body:
    {
        "pin": "1234"
    }

    Returns:
        200: {success, user}
        401: Invalid PIN
    """
    try:
        data = request.get_json(silent=True) or {}
        pin = data.get("pin")
        if not pin:
            return jsonify({"error": "pin is required"}), 400

        user = auth_service.authenticate_by_pin(pin)
        if not user:
            return jsonify({"error": "Invalid PIN"}), 401

        return jsonify({"success": True, "user": user.to_dict()}), 200

    except Exception:
        current_app.logger.exception("Failed to login user by PIN")
        return jsonify({"error": "Internal server error"}), 500
