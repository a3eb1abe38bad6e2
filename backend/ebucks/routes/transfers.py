# Overview: Flask API routes for user-to-user transfers.

"""
Transfer API Route

Request body:
{
    "senderId": 4,
    "receiverId": 7,
    "amount": 18.00
}

The sender pays amount + the flat transfer fee. Change from the
sender's last voucher comes back as a new voucher.
"""

from flask import Blueprint, request, jsonify, current_app

from ..money import cents_to_amount
from ..services import transfer_service
from ..services.ledger_service import LedgerError
from ..validation import ValidationError, NotFoundError, require_fields, to_cents, to_int


transfers_bp = Blueprint("transfers", __name__, url_prefix="/api")


@transfers_bp.post("/transfer")
def transfer_route():
    try:
        data = require_fields(request.get_json(silent=True), "senderId", "receiverId", "amount")
        result = transfer_service.transfer(
            sender_id=to_int(data["senderId"], "senderId", minimum=1),
            receiver_id=to_int(data["receiverId"], "receiverId", minimum=1),
            amount_cents=to_cents(data["amount"], "amount"),
        )

        return jsonify({
            "success": True,
            "voucherId": result.receiver_voucher_id,
            "amount": cents_to_amount(result.amount_cents),
            "fee": cents_to_amount(result.fee_cents),
            "change": cents_to_amount(result.change_cents),
            "changeId": result.change_voucher_id,
            "printWindow": result.print_window,
        }), 200

    except (LedgerError, ValidationError) as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to process transfer")
        return jsonify({"error": "Internal server error"}), 500
