# Overview: Flask API routes for voucher lookup.

from flask import Blueprint, jsonify

from ..services import ledger_service


vouchers_bp = Blueprint("vouchers", __name__, url_prefix="/api/vouchers")


@vouchers_bp.get("/<string:voucher_id>")
def get_voucher_route(voucher_id: str):
    """Look up a scanned voucher (amount, used flag, owner)."""
    voucher = ledger_service.get_voucher(voucher_id)
    if not voucher:
        return jsonify({"error": "Voucher not found"}), 404

    d = voucher.to_dict()
    d["owner_name"] = voucher.owner.name if voucher.owner else None
    return jsonify({"voucher": d})
