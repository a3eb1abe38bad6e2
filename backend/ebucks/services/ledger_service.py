# Overview: Voucher ledger engine; validates, consumes, and re-mints vouchers.

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..extensions import db
from ..models import Voucher
from ..models.vouchers import SOURCE_CHANGE, SOURCE_MINT, VALID_SOURCES
from ebucks.time_utils import utcnow
from .concurrency import lock_for_update
from .identifier_service import new_voucher_id

"""
Voucher Ledger Invariants (authoritative)

- A voucher is an atomic unit of value: consumed whole or not at all.
- is_used flips False -> True exactly once. The flip is a conditional
  UPDATE (WHERE is_used = 0) whose row count must equal the requested
  set size; anything else means another settlement got there first.
- Consumed value >= required value. Any excess reappears as exactly one
  new CHANGE voucher for the exact remainder.
- The engine never commits. The calling operation owns the transaction
  and rolls it back if anything after settlement fails.
"""

log = logging.getLogger(__name__)


class LedgerError(Exception):
    """Raised for settlement failures the caller can correct."""
    pass


class InvalidVoucherSet(LedgerError):
    """Unknown id, already used id, repeated id, or empty set."""
    pass


class InsufficientFunds(LedgerError):
    """Supplied vouchers are worth less than the amount required."""

    def __init__(self, message: str, *, required_cents: int = 0, supplied_cents: int = 0):
        super().__init__(message)
        self.required_cents = required_cents
        self.supplied_cents = supplied_cents

    @property
    def shortfall_cents(self) -> int:
        return max(self.required_cents - self.supplied_cents, 0)


@dataclass(frozen=True)
class SettlementResult:
    consumed_ids: list[str]
    supplied_cents: int
    required_cents: int
    change_cents: int
    change_voucher_id: Optional[str]
    owner_id: Optional[int]
    change_voucher: Optional[Voucher] = field(default=None, compare=False, repr=False)


# =============================================================================
# MINTING
# =============================================================================

def mint_voucher(amount_cents: int, owner_id: int | None = None, source: str = SOURCE_MINT) -> Voucher:
    """
    Create one unused voucher. No funding source is checked.

    Flushes so the id is reserved, does not commit.
    """
    if amount_cents <= 0:
        raise LedgerError("Voucher amount must be positive")
    if source not in VALID_SOURCES:
        raise LedgerError(f"Invalid voucher source: {source}. Must be one of {VALID_SOURCES}")

    voucher = Voucher(
        id=new_voucher_id(),
        amount_cents=amount_cents,
        is_used=False,
        owner_id=owner_id,
        source=source,
        created_at=utcnow(),
    )
    db.session.add(voucher)
    db.session.flush()
    return voucher


# =============================================================================
# SETTLEMENT
# =============================================================================

def settle(voucher_ids: Iterable[str], required_cents: int, owner_id: int | None = None) -> SettlementResult:
    """
    Consume a voucher set against a required amount and make change.

    The payer chooses which vouchers to hand over; the ledger verifies
    them and makes change. No coin selection happens here.

    Args:
        voucher_ids: Ids as presented, in order. The first one decides the
            change owner unless owner_id is given.
        required_cents: Amount owed (>= 0)
        owner_id: Owner for the change voucher, overriding the first voucher's owner

    Returns:
        SettlementResult

    Raises:
        InvalidVoucherSet: Empty set, unknown/used/repeated id, or lost a race
        InsufficientFunds: Sum of vouchers < required_cents
    """
    ids = list(voucher_ids)
    if required_cents < 0:
        raise LedgerError("Required amount cannot be negative")
    if not ids:
        raise InvalidVoucherSet("No vouchers supplied")

    vouchers = lock_for_update(
        db.session.query(Voucher)
        .filter(Voucher.id.in_(ids), Voucher.is_used.is_(False))
    ).all()
    # Repeated ids collapse in the IN clause, so they fail this check too
    if len(vouchers) != len(ids):
        raise InvalidVoucherSet("Invalid Vouchers")

    by_id = {v.id: v for v in vouchers}
    supplied_cents = sum(v.amount_cents for v in vouchers)
    if supplied_cents < required_cents:
        raise InsufficientFunds(
            "Insufficient Funds",
            required_cents=required_cents,
            supplied_cents=supplied_cents,
        )

    resolved_owner = owner_id if owner_id is not None else by_id[ids[0]].owner_id

    consumed = _consume(ids)
    if consumed != len(ids):
        raise InvalidVoucherSet("Vouchers were spent by another transaction")

    change_cents = supplied_cents - required_cents
    change_voucher = None
    if change_cents > 0:
        change_voucher = mint_voucher(change_cents, owner_id=resolved_owner, source=SOURCE_CHANGE)

    log.info(
        "voucher_settled ids=%s supplied_cents=%s required_cents=%s change_cents=%s change_id=%s",
        ",".join(ids), supplied_cents, required_cents, change_cents,
        change_voucher.id if change_voucher else None,
    )

    return SettlementResult(
        consumed_ids=ids,
        supplied_cents=supplied_cents,
        required_cents=required_cents,
        change_cents=change_cents,
        change_voucher_id=change_voucher.id if change_voucher else None,
        owner_id=resolved_owner,
        change_voucher=change_voucher,
    )


def _consume(ids: list[str]) -> int:
    """Compare-and-swap every id from unused to used; returns rows flipped."""
    return (
        db.session.query(Voucher)
        .filter(Voucher.id.in_(ids), Voucher.is_used.is_(False))
        .update(
            {Voucher.is_used: True, Voucher.used_at: utcnow()},
            synchronize_session=False,
        )
    )


# =============================================================================
# QUERIES
# =============================================================================

def get_voucher(voucher_id: str) -> Voucher | None:
    return db.session.get(Voucher, voucher_id.strip().upper())


def unused_vouchers_for(user_id: int) -> list[Voucher]:
    """
    A user's spendable vouchers, oldest first.

    Oldest-first is the deterministic gathering order for transfers.
    """
    return (
        db.session.query(Voucher)
        .filter(Voucher.owner_id == user_id, Voucher.is_used.is_(False))
        .order_by(Voucher.created_at.asc(), Voucher.id.asc())
        .all()
    )


def used_vouchers_for(user_id: int) -> list[Voucher]:
    return (
        db.session.query(Voucher)
        .filter(Voucher.owner_id == user_id, Voucher.is_used.is_(True))
        .order_by(Voucher.created_at.desc())
        .all()
    )


def voucher_balance(user_id: int) -> int:
    """Sum of a user's unused vouchers, in cents."""
    total = db.session.query(
        db.func.coalesce(db.func.sum(Voucher.amount_cents), 0)
    ).filter(
        Voucher.owner_id == user_id,
        Voucher.is_used.is_(False),
    ).scalar()
    return int(total or 0)


def circulation_cents() -> int:
    """Total value of every unused voucher in existence."""
    total = db.session.query(
        db.func.coalesce(db.func.sum(Voucher.amount_cents), 0)
    ).filter(Voucher.is_used.is_(False)).scalar()
    return int(total or 0)
