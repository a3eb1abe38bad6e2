# Overview: Service-layer operations for the printer registry.

from ..extensions import db
from ..models import Printer
from ..models.registers import VALID_ASSIGNMENTS
from ..validation import ValidationError, NotFoundError, to_text


def create_printer(*, name: str, ip_address: str | None, assignment: str) -> Printer:
    name = to_text(name, "name", max_length=128)

    assignment = to_text(assignment, "assignment").upper()
    if assignment not in VALID_ASSIGNMENTS:
        raise ValidationError(f"Invalid assignment: {assignment}. Must be one of {VALID_ASSIGNMENTS}")

    printer = Printer(
        name=name,
        ip_address=to_text(ip_address, "ip_address", max_length=64, required=False),
        assignment=assignment,
    )
    db.session.add(printer)
    db.session.commit()
    return printer


def list_printers() -> list[Printer]:
    return db.session.query(Printer).order_by(Printer.id).all()


def delete_printer(printer_id: int) -> None:
    printer = db.session.get(Printer, printer_id)
    if not printer:
        raise NotFoundError(f"Printer {printer_id} not found")
    db.session.delete(printer)
    db.session.commit()


def printer_for_assignment(assignment: str) -> Printer | None:
    """First registered printer for a station, or None when none is set up."""
    return (
        db.session.query(Printer)
        .filter_by(assignment=assignment)
        .order_by(Printer.id)
        .first()
    )
