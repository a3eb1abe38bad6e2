from __future__ import annotations

from ..extensions import db
from ebucks.money import cents_to_amount
from ebucks.time_utils import to_utc_z

SOURCE_MINT = "MINT"
SOURCE_CHANGE = "CHANGE"
SOURCE_TRANSFER = "TRANSFER"
SOURCE_PAYROLL = "PAYROLL"

VALID_SOURCES = [SOURCE_MINT, SOURCE_CHANGE, SOURCE_TRANSFER, SOURCE_PAYROLL]


class Voucher(db.Model):
    """
    Single-use bearer money.

    WHY: The classroom currency is printed paper. Each slip carries an
    opaque id and a fixed amount; whoever presents the id can spend it.

    LIFECYCLE:
    - Created unused by a mint, purchase change, transfer, or payroll run
    - Flipped to is_used exactly once, by a settlement
    - Never deleted, never partially consumed, never reused

    owner_id is informational (reprints, balances). It does not gate
    redemption.
    """
    __tablename__ = "vouchers"
    __table_args__ = (
        db.Index("ix_vouchers_owner_used", "owner_id", "is_used"),
        db.CheckConstraint("amount_cents > 0", name="ck_vouchers_amount_positive"),
    )

    # 8-char uppercase base36 token, CODE39 printable
    id = db.Column(db.String(16), primary_key=True)

    amount_cents = db.Column(db.Integer, nullable=False)
    is_used = db.Column(db.Boolean, nullable=False, default=False, index=True)

    owner_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)

    # How the voucher came into existence: MINT, CHANGE, TRANSFER, PAYROLL
    source = db.Column(db.String(16), nullable=False, default=SOURCE_MINT)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    used_at = db.Column(db.DateTime(timezone=True), nullable=True)

    owner = db.relationship("User", backref=db.backref("vouchers", lazy=True))

    def __repr__(self) -> str:
        return f"<Voucher id={self.id} amount_cents={self.amount_cents} used={self.is_used}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "amount": cents_to_amount(self.amount_cents),
            "amount_cents": self.amount_cents,
            "is_used": self.is_used,
            "owner_id": self.owner_id,
            "source": self.source,
            "created_at": to_utc_z(self.created_at),
            "used_at": to_utc_z(self.used_at) if self.used_at else None,
        }
