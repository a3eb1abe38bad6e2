# Overview: Flask API routes for register purchases; parses input and returns JSON responses.

# backend/ebucks/routes/sales.py
"""
Purchase API Route

Request body:
{
    "voucherIds": ["K3J9X2QA", "P0LM4BZT"],
    "totalCost": 12.50,
    "cartItems": [{"id": 1, "name": "Snacks", "price": 12.50}]
}

Returns:
    200: {success, transactionId, change, changeId, printWindow}
    400: Invalid vouchers, insufficient funds, bad cart or total
    404: Cart references an unknown item
    409: Out of stock
"""

from flask import Blueprint, request, jsonify, current_app

from ..money import cents_to_amount
from ..services import sales_service
from ..services.ledger_service import LedgerError
from ..services.sales_service import OutOfStock, SaleError
from ..validation import ValidationError, NotFoundError, require_fields, to_cents, to_id_list


sales_bp = Blueprint("sales", __name__, url_prefix="/api")


@sales_bp.post("/purchase")
def purchase_route():
    try:
        data = require_fields(request.get_json(silent=True), "voucherIds", "totalCost", "cartItems")
        voucher_ids = to_id_list(data["voucherIds"])
        total_cost_cents = to_cents(data["totalCost"], "totalCost", allow_zero=True)
        cart_items = data["cartItems"]
        if not isinstance(cart_items, list):
            return jsonify({"error": "cartItems must be a list"}), 400

        result = sales_service.purchase(
            voucher_ids=voucher_ids,
            total_cost_cents=total_cost_cents,
            cart_items=cart_items,
        )

        return jsonify({
            "success": True,
            "transactionId": result.transaction_id,
            "change": cents_to_amount(result.change_cents),
            "change_cents": result.change_cents,
            "changeId": result.change_voucher_id,
            "printWindow": result.print_window,
        }), 200

    except OutOfStock as e:
        return jsonify({"error": str(e)}), 409
    except (LedgerError, SaleError, ValidationError) as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to process purchase")
        return jsonify({"error": "Internal server error"}), 500
