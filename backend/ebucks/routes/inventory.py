# Overview: Flask API routes for inventory operations; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, current_app

from ..services import inventory_service
from ..validation import ValidationError, NotFoundError


inventory_bp = Blueprint("inventory", __name__, url_prefix="/api/inventory")


@inventory_bp.get("")
def list_items_route():
    return jsonify([i.to_dict() for i in inventory_service.list_items()])


@inventory_bp.post("")
def create_item_route():
    """
    Add an item to the shelf.

    Request body:
    {
        "name": "Golden Apple",
        "price": 2.50,
        "stock": 10,
        "barcode": "0123456789"   (optional)
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        item = inventory_service.create_item(
            name=data.get("name"),
            price=data.get("price"),
            stock=data.get("stock", 0),
            barcode=data.get("barcode"),
        )
        return jsonify({"id": item.id, "item": item.to_dict()}), 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create inventory item")
        return jsonify({"error": "Internal server error"}), 500


@inventory_bp.get("/barcode/<string:barcode>")
def find_by_barcode_route(barcode: str):
    try:
        return jsonify({"item": inventory_service.find_by_barcode(barcode).to_dict()})
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to look up barcode")
        return jsonify({"error": "Internal server error"}), 500


@inventory_bp.post("/<int:item_id>/restock")
def restock_route(item_id: int):
    data = request.get_json(silent=True) or {}
    try:
        item = inventory_service.restock_item(item_id, data.get("quantity"))
        return jsonify({"item": item.to_dict()})
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to restock inventory item")
        return jsonify({"error": "Internal server error"}), 500


@inventory_bp.delete("/<int:item_id>")
def delete_item_route(item_id: int):
    try:
        inventory_service.deactivate_item(item_id)
        return jsonify({"success": True})
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to deactivate inventory item")
        return jsonify({"error": "Internal server error"}), 500
