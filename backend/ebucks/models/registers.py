from __future__ import annotations

from ..extensions import db
from ebucks.time_utils import to_utc_z

ASSIGNMENT_POS = "POS"
ASSIGNMENT_PAYROLL = "PAYROLL"
VALID_ASSIGNMENTS = [ASSIGNMENT_POS, ASSIGNMENT_PAYROLL]


class Printer(db.Model):
    """
    Receipt printer registered for a station.

    WHY: Purchase and transfer slips go to the register (POS) printer;
    minted and payroll vouchers go to the office (PAYROLL) printer.
    The first printer registered for an assignment wins.
    """
    __tablename__ = "printers"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    ip_address = db.Column(db.String(64), nullable=True)

    # POS | PAYROLL
    assignment = db.Column(db.String(16), nullable=False, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "ip_address": self.ip_address,
            "assignment": self.assignment,
            "created_at": to_utc_z(self.created_at),
        }
