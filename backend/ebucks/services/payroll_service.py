# Overview: Administrative money creation: direct mints and payroll runs.

"""
Payroll Service

WHY: New money enters the economy two ways: a teacher mints a voucher
by hand, or a payroll run pays closed shifts at each user's hourly rate.

DESIGN:
- Neither path checks a funding source; both are money creation
- Payroll is a fan-out: each user is paid in their own transaction, so
  one user's failure is logged and reported without undoing the others
- Pay = round_half_up(worked_minutes * hourly_rate_cents / 60)
- Timesheets are flipped to paid with a conditional update so two
  overlapping runs cannot pay the same shift twice
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..extensions import db
from ..models import Timesheet, User, Voucher
from ..models.registers import ASSIGNMENT_PAYROLL
from ..models.vouchers import SOURCE_MINT, SOURCE_PAYROLL
from ..validation import ValidationError, NotFoundError
from . import ledger_service, print_service
from .concurrency import run_in_transaction
from ebucks.money import prorate_cents

log = logging.getLogger(__name__)


class PayrollError(Exception):
    """Raised when a user's payroll could not be applied."""
    pass


@dataclass(frozen=True)
class MintResult:
    voucher: Voucher
    print_window: Optional[str] = None


@dataclass(frozen=True)
class PayrollDisbursement:
    user_id: int
    user_name: str
    total_minutes: int
    hourly_rate_cents: int
    amount_cents: int
    voucher_id: Optional[str]
    timesheet_ids: list[int]

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "name": self.user_name,
            "hours": round(self.total_minutes / 60, 2),
            "amount": self.amount_cents / 100,
            "amount_cents": self.amount_cents,
            "voucher_id": self.voucher_id,
            "timesheet_ids": self.timesheet_ids,
        }


@dataclass(frozen=True)
class PayrollRun:
    paid: list[PayrollDisbursement] = field(default_factory=list)
    failed: list[dict] = field(default_factory=list)
    print_window: Optional[str] = None

    @property
    def count(self) -> int:
        return len(self.paid)


# =============================================================================
# MINT
# =============================================================================

def mint(*, amount_cents: int, user_id: int | None = None) -> MintResult:
    """
    Create a voucher out of thin air.

    Args:
        amount_cents: Face value (> 0)
        user_id: Owner; None prints a bearer note

    Raises:
        ValidationError: Non-positive amount
        NotFoundError: Unknown user
    """
    if amount_cents <= 0:
        raise ValidationError("amount must be greater than 0")

    owner_name = None
    if user_id is not None:
        user = db.session.get(User, user_id)
        if not user or not user.is_active:
            raise NotFoundError(f"User {user_id} not found")
        owner_name = user.name

    voucher = run_in_transaction(
        lambda: ledger_service.mint_voucher(amount_cents, owner_id=user_id, source=SOURCE_MINT)
    )
    log.info("voucher_minted voucher_id=%s amount_cents=%s owner_id=%s", voucher.id, amount_cents, user_id)

    def _build():
        return [print_service.render_voucher(print_service.VoucherSlip(
            id=voucher.id,
            amount_cents=amount_cents,
            owner_name=owner_name,
        ))]

    return MintResult(
        voucher=voucher,
        print_window=print_service.safe_print_job(ASSIGNMENT_PAYROLL, _build),
    )


# =============================================================================
# PAYROLL
# =============================================================================

def _closed_unpaid_query():
    return db.session.query(Timesheet).filter(
        Timesheet.is_paid.is_(False),
        Timesheet.clock_out.isnot(None),
    )


def list_unpaid_timesheets() -> list[dict]:
    """Closed, unpaid shifts with the user's name and rate (payroll preview)."""
    rows = (
        _closed_unpaid_query()
        .join(User, Timesheet.user_id == User.id)
        .with_entities(Timesheet, User.name, User.hourly_rate_cents)
        .order_by(User.name.asc(), Timesheet.clock_in.asc())
        .all()
    )
    result = []
    for sheet, name, rate_cents in rows:
        d = sheet.to_dict()
        d["name"] = name
        d["hourly_rate"] = rate_cents / 100
        d["hourly_rate_cents"] = rate_cents
        result.append(d)
    return result


def _pay_user(user_id: int) -> PayrollDisbursement:
    user = db.session.get(User, user_id)
    if not user:
        raise PayrollError(f"User {user_id} not found")

    sheets = _closed_unpaid_query().filter(Timesheet.user_id == user_id).order_by(Timesheet.id).all()
    if not sheets:
        raise PayrollError(f"No unpaid timesheets for user {user_id}")

    sheet_ids = [s.id for s in sheets]
    total_minutes = sum(s.total_minutes or 0 for s in sheets)
    amount_cents = prorate_cents(total_minutes, user.hourly_rate_cents)

    voucher_id = None
    if amount_cents > 0:
        voucher_id = ledger_service.mint_voucher(amount_cents, owner_id=user.id, source=SOURCE_PAYROLL).id

    flipped = (
        db.session.query(Timesheet)
        .filter(Timesheet.id.in_(sheet_ids), Timesheet.is_paid.is_(False))
        .update(
            {Timesheet.is_paid: True, Timesheet.paid_voucher_id: voucher_id},
            synchronize_session=False,
        )
    )
    if flipped != len(sheet_ids):
        raise PayrollError(f"Timesheets for user {user_id} were paid by another run")

    return PayrollDisbursement(
        user_id=user.id,
        user_name=user.name,
        total_minutes=total_minutes,
        hourly_rate_cents=user.hourly_rate_cents,
        amount_cents=amount_cents,
        voucher_id=voucher_id,
        timesheet_ids=sheet_ids,
    )


def process_payroll() -> PayrollRun:
    """
    Pay every user with closed, unpaid timesheets.

    Returns:
        PayrollRun with one disbursement per paid user and a failed list
        of {"user_id", "error"} for users whose transaction rolled back
    """
    user_ids = [
        row[0]
        for row in _closed_unpaid_query()
        .with_entities(Timesheet.user_id)
        .distinct()
        .order_by(Timesheet.user_id)
        .all()
    ]

    paid: list[PayrollDisbursement] = []
    failed: list[dict] = []
    for user_id in user_ids:
        try:
            disbursement = run_in_transaction(lambda uid=user_id: _pay_user(uid))
        except Exception as exc:
            log.exception("payroll_failed user_id=%s", user_id)
            failed.append({"user_id": user_id, "error": str(exc)})
            continue
        log.info(
            "payroll_disbursed user_id=%s minutes=%s amount_cents=%s voucher_id=%s",
            disbursement.user_id, disbursement.total_minutes,
            disbursement.amount_cents, disbursement.voucher_id,
        )
        paid.append(disbursement)

    def _build():
        return [
            print_service.render_voucher(print_service.VoucherSlip(
                id=d.voucher_id,
                amount_cents=d.amount_cents,
                owner_name=f"{d.user_name} (PAYROLL)",
                title="PAYROLL",
            ))
            for d in paid
            if d.voucher_id
        ]

    print_window = print_service.safe_print_job(ASSIGNMENT_PAYROLL, _build) if paid else None
    return PayrollRun(paid=paid, failed=failed, print_window=print_window)
