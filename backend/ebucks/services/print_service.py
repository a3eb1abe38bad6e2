# Overview: Renders receipts and vouchers into printable HTML.

"""
Print Artifact Service

WHY: Every settlement hands the customer paper: change vouchers,
receipts, payroll slips. The browser opens the returned HTML in a
window and prints it on the station's thermal printer.

DESIGN PRINCIPLES:
- Callers pass plain records (VoucherSlip, Receipt), never models
- The result is an opaque HTML string the API forwards verbatim
- Printing runs after the ledger commit and can never fail a
  settlement: safe_print_job logs and returns None instead of raising
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from flask import current_app, render_template
from markupsafe import Markup

from .printer_service import printer_for_assignment
from ebucks.time_utils import utcnow


@dataclass(frozen=True)
class VoucherSlip:
    id: str
    amount_cents: int
    owner_name: Optional[str] = None
    title: str = "OFFICIAL CURRENCY"


@dataclass(frozen=True)
class ReceiptLine:
    name: str
    price_cents: int


@dataclass(frozen=True)
class Receipt:
    lines: list[ReceiptLine] = field(default_factory=list)
    total_cents: int = 0
    change_cents: int = 0
    transaction_id: Optional[str] = None


def _printed_at() -> str:
    return utcnow().strftime("%Y-%m-%d %H:%M UTC")


def render_voucher(slip: VoucherSlip) -> Markup:
    return Markup(render_template("print/voucher.html", slip=slip))


def render_receipt(receipt: Receipt) -> Markup:
    return Markup(render_template(
        "print/receipt.html",
        receipt=receipt,
        store_name=current_app.config["EBUCKS_STORE_NAME"],
        printed_at=_printed_at(),
    ))


def render_test_page(*, printer=None, ip: str | None = None) -> Markup:
    return Markup(render_template(
        "print/test.html",
        printer=printer,
        ip=ip,
        store_name=current_app.config["EBUCKS_STORE_NAME"],
        printed_at=_printed_at(),
    ))


def combine_prints(slips: Iterable[Markup], printer=None) -> str:
    """Join rendered slips into one printable page (one cut per slip)."""
    return render_template("print/page.html", slips=list(slips), printer=printer)


def safe_print_job(assignment: str, build: Callable[[], list[Markup]]) -> str | None:
    """
    Build a print job for a station without ever raising.

    Args:
        assignment: POS or PAYROLL; picks the registered printer
        build: Returns the rendered slips in print order

    Returns:
        Full HTML page, or None when rendering failed
    """
    try:
        printer = printer_for_assignment(assignment)
        slips = build()
        if not slips:
            return None
        html = combine_prints(slips, printer=printer)
    except Exception:
        current_app.logger.exception("Print job failed for %s", assignment)
        return None

    if printer is None:
        current_app.logger.warning("No printer assigned to %s; returning artifact only", assignment)
    else:
        current_app.logger.info("print_job assignment=%s printer=%s slips=%s", assignment, printer.name, len(slips))
    return html
