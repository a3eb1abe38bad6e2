from __future__ import annotations

from ..extensions import db
from ebucks.time_utils import to_utc_z


class Timesheet(db.Model):
    """
    One clock-in/clock-out shift.

    LIFECYCLE:
    - Open: clock_out is NULL, shift in progress
    - Closed: clock_out set, total_minutes calculated (eligible for payroll)
    - Paid: is_paid set by a payroll run, permanently

    DESIGN: Worked time is stored in whole minutes so pay can be computed
    exactly in cents. total_hours is derived for display.
    """
    __tablename__ = "timesheets"
    __table_args__ = (
        db.Index("ix_timesheets_user_paid", "user_id", "is_paid"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    clock_in = db.Column(db.DateTime(timezone=True), nullable=False)
    clock_out = db.Column(db.DateTime(timezone=True), nullable=True)

    # Calculated on clock-out
    total_minutes = db.Column(db.Integer, nullable=True)

    is_paid = db.Column(db.Boolean, nullable=False, default=False)
    paid_voucher_id = db.Column(db.String(16), db.ForeignKey("vouchers.id"), nullable=True)

    user = db.relationship("User", backref=db.backref("timesheets", lazy=True))

    @property
    def is_open(self) -> bool:
        return self.clock_out is None

    @property
    def total_hours(self) -> float | None:
        if self.total_minutes is None:
            return None
        return round(self.total_minutes / 60, 4)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "clock_in": to_utc_z(self.clock_in),
            "clock_out": to_utc_z(self.clock_out) if self.clock_out else None,
            "total_minutes": self.total_minutes,
            "total_hours": self.total_hours,
            "is_paid": self.is_paid,
            "paid_voucher_id": self.paid_voucher_id,
        }
