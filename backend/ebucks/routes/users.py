# Overview: Flask API routes for user management; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, current_app

from ..services import auth_service
from ..validation import ValidationError, ConflictError, NotFoundError


users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.get("")
def list_users_route():
    include_inactive = request.args.get("include_inactive", "false").lower() == "true"
    users = auth_service.list_users(include_inactive=include_inactive)
    return jsonify([u.to_dict() for u in users])


@users_bp.post("")
def create_user_route():
    """
    Create a user.

    Request body:
    {
        "name": "Ada",
        "role": "Employee",       (Admin | Employee)
        "pin": "4821",
        "hourly_rate": 15.00      (optional)
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        user = auth_service.create_user(
            name=data.get("name"),
            role=data.get("role", "Employee"),
            pin=data.get("pin"),
            hourly_rate=data.get("hourly_rate"),
        )
        return jsonify({"success": True, "user": user.to_dict()}), 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except Exception:
        current_app.logger.exception("Failed to create user")
        return jsonify({"error": "Internal server error"}), 500


@users_bp.delete("/<int:user_id>")
def deactivate_user_route(user_id: int):
    try:
        auth_service.deactivate_user(user_id)
        return jsonify({"success": True})
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to deactivate user")
        return jsonify({"error": "Internal server error"}), 500


@users_bp.get("/<int:user_id>/details")
def user_details_route(user_id: int):
    """Active/used vouchers, last 20 timesheets, and spendable balance."""
    try:
        return jsonify(auth_service.get_user_details(user_id))
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to load user details")
        return jsonify({"error": "Internal server error"}), 500
