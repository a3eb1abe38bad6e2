from __future__ import annotations

from ..extensions import db
from ebucks.money import cents_to_amount
from ebucks.time_utils import to_utc_z


class Transaction(db.Model):
    """
    One completed purchase.

    IMMUTABLE: Written once inside the purchase transaction, never updated.
    """
    __tablename__ = "transactions"

    # 8-char uppercase token, printed on receipts
    id = db.Column(db.String(16), primary_key=True)

    total_cost_cents = db.Column(db.Integer, nullable=False)
    tendered_cents = db.Column(db.Integer, nullable=False)
    change_cents = db.Column(db.Integer, nullable=False, default=0)
    change_voucher_id = db.Column(db.String(16), db.ForeignKey("vouchers.id"), nullable=True)
    item_count = db.Column(db.Integer, nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, index=True)

    lines = db.relationship(
        "SalesLogEntry",
        backref=db.backref("transaction", lazy=True),
        lazy=True,
        order_by="SalesLogEntry.id",
    )

    def to_dict(self, include_items: bool = False) -> dict:
        d = {
            "id": self.id,
            "total_cost": cents_to_amount(self.total_cost_cents),
            "total_cost_cents": self.total_cost_cents,
            "tendered_cents": self.tendered_cents,
            "change_cents": self.change_cents,
            "change_voucher_id": self.change_voucher_id,
            "item_count": self.item_count,
            "created_at": to_utc_z(self.created_at),
        }
        if include_items:
            d["items"] = [line.item_name for line in self.lines]
        return d


class SalesLogEntry(db.Model):
    """
    One sold unit, tagged with its transaction.

    IMMUTABLE: Name and price are copied from inventory at sale time so
    later edits or deactivation do not rewrite history.
    """
    __tablename__ = "sales_log"
    __table_args__ = (
        db.Index("ix_sales_log_item_name", "item_name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    transaction_id = db.Column(db.String(16), db.ForeignKey("transactions.id"), nullable=False, index=True)
    inventory_item_id = db.Column(db.Integer, db.ForeignKey("inventory.id"), nullable=True)
    item_name = db.Column(db.String(255), nullable=False)
    price_cents = db.Column(db.Integer, nullable=False)
    sold_at = db.Column(db.DateTime(timezone=True), nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "transaction_id": self.transaction_id,
            "inventory_item_id": self.inventory_item_id,
            "item_name": self.item_name,
            "price": cents_to_amount(self.price_cents),
            "price_cents": self.price_cents,
            "sold_at": to_utc_z(self.sold_at),
        }
