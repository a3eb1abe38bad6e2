# Overview: User-to-user transfers paid from the sender's vouchers, minus a flat fee.

"""
Transfer Service

WHY: Students can pay each other without handing over paper. The
sender's vouchers are gathered, consumed by the ledger, and the
receiver gets one fresh voucher.

FEE: A flat EBUCKS_TRANSFER_FEE_CENTS is added to the amount. It is not
credited anywhere; it is the gap between consumed and re-minted value.

GATHERING: Oldest voucher first (created_at, then id), stopping as soon
as the running sum covers amount + fee. The last voucher may overshoot;
the ledger returns the excess to the sender as change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from flask import current_app

from ..extensions import db
from ..models import User
from ..models.registers import ASSIGNMENT_POS
from ..models.vouchers import SOURCE_TRANSFER
from ..validation import ValidationError, NotFoundError
from . import ledger_service, print_service
from .concurrency import run_in_transaction
from .ledger_service import InsufficientFunds

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferResult:
    receiver_voucher_id: str
    amount_cents: int
    fee_cents: int
    change_cents: int
    change_voucher_id: Optional[str]
    consumed_ids: list[str]
    print_window: Optional[str] = None


def transfer_fee_cents() -> int:
    return int(current_app.config.get("EBUCKS_TRANSFER_FEE_CENTS", 500))


def _active_user(user_id: int, label: str) -> User:
    user = db.session.get(User, user_id)
    if not user or not user.is_active:
        raise NotFoundError(f"{label} {user_id} not found")
    return user


def gather_vouchers(sender_id: int, total_needed_cents: int) -> list[str]:
    """Oldest-first voucher ids whose sum first reaches total_needed_cents."""
    gathered = []
    running = 0
    for voucher in ledger_service.unused_vouchers_for(sender_id):
        if running >= total_needed_cents:
            break
        gathered.append(voucher.id)
        running += voucher.amount_cents
    return gathered


def transfer(*, sender_id: int, receiver_id: int, amount_cents: int) -> TransferResult:
    """
    Move amount_cents from sender to receiver, charging the transfer fee.

    Raises:
        ValidationError: Non-positive amount or sender == receiver
        NotFoundError: Unknown sender or receiver
        InsufficientFunds: Sender balance < amount + fee
        InvalidVoucherSet: Sender's vouchers were spent concurrently
    """
    if amount_cents <= 0:
        raise ValidationError("amount must be greater than 0")
    if sender_id == receiver_id:
        raise ValidationError("Sender and receiver must be different users")

    sender = _active_user(sender_id, "Sender")
    receiver = _active_user(receiver_id, "Receiver")
    sender_name = sender.name
    receiver_name = receiver.name

    fee_cents = transfer_fee_cents()
    total_needed = amount_cents + fee_cents

    def _op():
        balance = ledger_service.voucher_balance(sender_id)
        if balance < total_needed:
            raise InsufficientFunds(
                "Insufficient Funds",
                required_cents=total_needed,
                supplied_cents=balance,
            )

        gathered = gather_vouchers(sender_id, total_needed)
        settlement = ledger_service.settle(gathered, total_needed, owner_id=sender_id)
        received = ledger_service.mint_voucher(amount_cents, owner_id=receiver_id, source=SOURCE_TRANSFER)
        return received.id, settlement

    receiver_voucher_id, settlement = run_in_transaction(_op)

    log.info(
        "transfer_completed sender_id=%s receiver_id=%s amount_cents=%s fee_cents=%s change_cents=%s",
        sender_id, receiver_id, amount_cents, fee_cents, settlement.change_cents,
    )

    def _build():
        slips = [print_service.render_voucher(print_service.VoucherSlip(
            id=receiver_voucher_id,
            amount_cents=amount_cents,
            owner_name=receiver_name,
            title=f"TRANSFER FROM {sender_name}",
        ))]
        if settlement.change_voucher_id:
            slips.append(print_service.render_voucher(print_service.VoucherSlip(
                id=settlement.change_voucher_id,
                amount_cents=settlement.change_cents,
                owner_name=sender_name,
                title="OFFICIAL CHANGE",
            )))
        return slips

    return TransferResult(
        receiver_voucher_id=receiver_voucher_id,
        amount_cents=amount_cents,
        fee_cents=fee_cents,
        change_cents=settlement.change_cents,
        change_voucher_id=settlement.change_voucher_id,
        consumed_ids=settlement.consumed_ids,
        print_window=print_service.safe_print_job(ASSIGNMENT_POS, _build),
    )
