# Overview: Purchase settlement; charges vouchers for a cart and records the sale.

"""
Purchase Service

WHY: A student scans vouchers at the register to pay for a cart. The
ledger consumes the vouchers and makes change; this layer prices the
cart, moves stock, and writes the sale audit rows.

DESIGN PRINCIPLES:
- Validate everything that can be validated before the first write
  (items exist, total matches, stock available)
- One database transaction: settle + transaction row + stock + sales
  log commit together or not at all
- Stock decrement is conditional (stock > 0); losing a race raises
  OutOfStock and rolls the whole purchase back, vouchers included
- Printing happens after commit and cannot fail the purchase
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Optional

from flask import current_app

from ..extensions import db
from ..models import InventoryItem, Transaction, SalesLogEntry, User
from ..models.registers import ASSIGNMENT_POS
from ..validation import ValidationError, NotFoundError, to_int
from . import ledger_service, print_service
from .concurrency import run_in_transaction
from .identifier_service import new_transaction_id
from ebucks.time_utils import utcnow

log = logging.getLogger(__name__)


class SaleError(Exception):
    """Raised for purchase failures the caller can correct."""
    pass


class OutOfStock(SaleError):
    pass


class CartTotalMismatch(SaleError):
    """Declared cart total disagrees with inventory prices."""
    pass


@dataclass(frozen=True)
class PurchaseResult:
    transaction_id: str
    total_cents: int
    change_cents: int
    change_voucher_id: Optional[str]
    consumed_ids: list[str]
    print_window: Optional[str] = None


def _resolve_cart(cart_items: Iterable[dict]) -> list[InventoryItem]:
    """Map cart lines onto active inventory rows, one row per line."""
    resolved = []
    for line in cart_items:
        if not isinstance(line, dict) or line.get("id") is None:
            raise ValidationError("Each cart item needs an id")
        item_id = to_int(line["id"], "cartItems.id", minimum=1)
        item = db.session.get(InventoryItem, item_id)
        if not item or not item.is_active:
            raise NotFoundError(f"Item {item_id} not found")
        resolved.append(item)
    return resolved


def _check_stock(items: list[InventoryItem]) -> None:
    # Aggregate repeated lines so two of the last unit are caught
    wanted = Counter(item.id for item in items)
    by_id = {item.id: item for item in items}
    for item_id, qty in wanted.items():
        item = by_id[item_id]
        if qty > item.stock:
            raise OutOfStock(f"Out of stock: {item.name} (available: {max(item.stock, 0)})")


def _decrement_stock(item: InventoryItem) -> None:
    updated = (
        db.session.query(InventoryItem)
        .filter(InventoryItem.id == item.id, InventoryItem.stock > 0)
        .update({InventoryItem.stock: InventoryItem.stock - 1}, synchronize_session=False)
    )
    if updated != 1:
        raise OutOfStock(f"Out of stock: {item.name}")


def purchase(*, voucher_ids: list[str], total_cost_cents: int, cart_items: list[dict]) -> PurchaseResult:
    """
    Pay for a cart with vouchers.

    Args:
        voucher_ids: Vouchers handed over, in order (first decides change owner)
        total_cost_cents: Total the register declared
        cart_items: [{id, name, price}], one entry per unit

    Returns:
        PurchaseResult (print_window is None if printing failed)

    Raises:
        ValidationError: Empty cart or malformed line
        NotFoundError: Cart references an unknown/inactive item
        CartTotalMismatch: Declared total != inventory prices (when verifying)
        OutOfStock: Not enough stock for a line
        InvalidVoucherSet / InsufficientFunds: From the ledger
    """
    cart_items = list(cart_items or [])
    if not cart_items:
        raise ValidationError("Cart is empty")

    items = _resolve_cart(cart_items)
    priced_cents = sum(item.price_cents for item in items)

    if current_app.config.get("EBUCKS_VERIFY_CART_TOTAL", True):
        if priced_cents != total_cost_cents:
            raise CartTotalMismatch(
                f"Cart total {total_cost_cents / 100:.2f} does not match item prices {priced_cents / 100:.2f}"
            )
        charge_cents = priced_cents
    else:
        charge_cents = total_cost_cents

    _check_stock(items)

    def _op():
        settlement = ledger_service.settle(voucher_ids, charge_cents)

        now = utcnow()
        txn = Transaction(
            id=new_transaction_id(),
            total_cost_cents=charge_cents,
            tendered_cents=settlement.supplied_cents,
            change_cents=settlement.change_cents,
            change_voucher_id=settlement.change_voucher_id,
            item_count=len(items),
            created_at=now,
        )
        db.session.add(txn)
        db.session.flush()

        for item in items:
            _decrement_stock(item)
            db.session.add(SalesLogEntry(
                transaction_id=txn.id,
                inventory_item_id=item.id,
                item_name=item.name,
                price_cents=item.price_cents,
                sold_at=now,
            ))

        return txn.id, settlement

    transaction_id, settlement = run_in_transaction(_op)

    log.info(
        "purchase_completed transaction_id=%s total_cents=%s change_cents=%s items=%s",
        transaction_id, charge_cents, settlement.change_cents, len(items),
    )

    receipt = print_service.Receipt(
        lines=[print_service.ReceiptLine(name=i.name, price_cents=i.price_cents) for i in items],
        total_cents=charge_cents,
        change_cents=settlement.change_cents,
        transaction_id=transaction_id,
    )

    def _build():
        slips = []
        if settlement.change_voucher_id:
            owner = db.session.get(User, settlement.owner_id) if settlement.owner_id else None
            slips.append(print_service.render_voucher(print_service.VoucherSlip(
                id=settlement.change_voucher_id,
                amount_cents=settlement.change_cents,
                owner_name=owner.name if owner else None,
                title="OFFICIAL CHANGE",
            )))
        slips.append(print_service.render_receipt(receipt))
        return slips

    return PurchaseResult(
        transaction_id=transaction_id,
        total_cents=charge_cents,
        change_cents=settlement.change_cents,
        change_voucher_id=settlement.change_voucher_id,
        consumed_ids=settlement.consumed_ids,
        print_window=print_service.safe_print_job(ASSIGNMENT_POS, _build),
    )
