# Overview: Flask API routes for the printer registry and test prints.

from flask import Blueprint, request, jsonify, current_app

from ..services import printer_service, print_service
from ..validation import ValidationError, NotFoundError


printers_bp = Blueprint("printers", __name__, url_prefix="/api/printers")


@printers_bp.get("")
def list_printers_route():
    return jsonify([p.to_dict() for p in printer_service.list_printers()])


@printers_bp.post("")
def create_printer_route():
    """
    Register a printer.

    Request body:
    {
        "name": "Front Counter",
        "ip_address": "192.168.0.123",
        "assignment": "POS"      (POS | PAYROLL)
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        printer = printer_service.create_printer(
            name=data.get("name"),
            ip_address=data.get("ip_address"),
            assignment=data.get("assignment"),
        )
        return jsonify({"success": True, "id": printer.id, "printer": printer.to_dict()}), 201
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create printer")
        return jsonify({"error": "Internal server error"}), 500


@printers_bp.delete("/<int:printer_id>")
def delete_printer_route(printer_id: int):
    try:
        printer_service.delete_printer(printer_id)
        return jsonify({"success": True})
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to delete printer")
        return jsonify({"error": "Internal server error"}), 500


@printers_bp.post("/test")
def test_print_route():
    """Render a test page, optionally labelled with a target IP."""
    data = request.get_json(silent=True) or {}
    ip = data.get("ip")
    assignment = (data.get("assignment") or "POS").upper()

    html = print_service.safe_print_job(
        assignment,
        lambda: [print_service.render_test_page(
            printer=printer_service.printer_for_assignment(assignment),
            ip=ip,
        )],
    )
    return jsonify({"success": html is not None, "printWindow": html})
