# Overview: Read-only reports over the sales log and the voucher ledger.

from __future__ import annotations

from datetime import datetime

from ..extensions import db
from ..models import Transaction, SalesLogEntry, User
from . import ledger_service

TOP_ITEMS_LIMIT = 5


def financials(start: datetime | None = None, end: datetime | None = None) -> list[dict]:
    """
    Transactions newest first, each with the names of the items sold.

    start/end are inclusive bounds on created_at (UTC-naive).
    """
    query = db.session.query(Transaction)
    if start is not None:
        query = query.filter(Transaction.created_at >= start)
    if end is not None:
        query = query.filter(Transaction.created_at <= end)
    transactions = query.order_by(Transaction.created_at.desc()).all()
    return [t.to_dict(include_items=True) for t in transactions]


def top_items(limit: int = TOP_ITEMS_LIMIT) -> list[dict]:
    rows = (
        db.session.query(SalesLogEntry.item_name, db.func.count(SalesLogEntry.id).label("count"))
        .group_by(SalesLogEntry.item_name)
        .order_by(db.desc("count"), SalesLogEntry.item_name.asc())
        .limit(limit)
        .all()
    )
    return [{"item_name": name, "count": count} for name, count in rows]


def stats() -> dict:
    """
    Economy dashboard numbers.

    - circulation: value of all unused vouchers
    - avgPerPerson: circulation / active users (at least 1)
    - lifetimeRevenue: sum of every purchase total
    """
    circulation_cents = ledger_service.circulation_cents()
    user_count = db.session.query(User).filter_by(is_active=True).count() or 1
    revenue_cents = db.session.query(
        db.func.coalesce(db.func.sum(Transaction.total_cost_cents), 0)
    ).scalar() or 0

    return {
        "circulation": circulation_cents / 100,
        "circulation_cents": circulation_cents,
        "userCount": user_count,
        "avgPerPerson": round(circulation_cents / user_count / 100, 2),
        "topItems": top_items(),
        "lifetimeRevenue": int(revenue_cents) / 100,
        "lifetime_revenue_cents": int(revenue_cents),
    }
