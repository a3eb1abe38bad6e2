# Overview: Flask API routes for minting vouchers and running payroll.

from flask import Blueprint, request, jsonify, current_app

from ..services import payroll_service
from ..validation import ValidationError, NotFoundError, require_fields, to_cents, to_int


payroll_bp = Blueprint("payroll", __name__, url_prefix="/api")


@payroll_bp.post("/mint")
def mint_route():
    """
    Mint a voucher.

    Request body:
    {
        "amount": 10.00,
        "userId": 3      (optional; omitted or null prints a bearer note)
    }
    """
    try:
        data = require_fields(request.get_json(silent=True), "amount")
        user_id = data.get("userId")
        result = payroll_service.mint(
            amount_cents=to_cents(data["amount"], "amount"),
            user_id=to_int(user_id, "userId", minimum=1) if user_id is not None else None,
        )
        return jsonify({
            "success": True,
            "voucher": result.voucher.to_dict(),
            "printWindow": result.print_window,
        }), 200

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to mint voucher")
        return jsonify({"error": "Internal server error"}), 500


@payroll_bp.post("/payroll/process")
def process_payroll_route():
    """
    Pay every closed, unpaid timesheet.

    Returns count of users paid; users whose payment failed are listed
    in "failed" and can be retried by running payroll again.
    """
    try:
        run = payroll_service.process_payroll()
        return jsonify({
            "success": True,
            "count": run.count,
            "paid": [d.to_dict() for d in run.paid],
            "failed": run.failed,
            "printWindow": run.print_window,
        }), 200
    except Exception:
        current_app.logger.exception("Failed to process payroll")
        return jsonify({"error": "Internal server error"}), 500


@payroll_bp.get("/payroll/unpaid")
def unpaid_timesheets_route():
    return jsonify(payroll_service.list_unpaid_timesheets())
