from __future__ import annotations

from ..extensions import db
from ebucks.money import cents_to_amount
from ebucks.time_utils import to_utc_z

ROLE_ADMIN = "Admin"
ROLE_EMPLOYEE = "Employee"
VALID_ROLES = [ROLE_ADMIN, ROLE_EMPLOYEE]


class User(db.Model):
    """
    Classroom participant (staff or student).

    WHY: Vouchers, timesheets and payroll are attributed to a user.
    The PIN is the only credential; it identifies the user at the
    register and the time clock.

    DESIGN:
    - PIN stored bcrypt hashed, unique among active users (checked in auth_service)
    - Users are deactivated, never deleted, so voucher ownership and
      timesheets keep their attribution
    """
    __tablename__ = "users"
    __table_args__ = (
        db.Index("ix_users_active_name", "is_active", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)

    # Admin | Employee
    role = db.Column(db.String(16), nullable=False, default=ROLE_EMPLOYEE)

    pin_hash = db.Column(db.String(255), nullable=False)

    # Pay rate in cents per hour
    hourly_rate_cents = db.Column(db.Integer, nullable=False, default=1500)

    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def __repr__(self) -> str:
        return f"<User id={self.id} name={self.name!r} role={self.role}>"

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "hourly_rate": cents_to_amount(self.hourly_rate_cents),
            "hourly_rate_cents": self.hourly_rate_cents,
            "is_active": self.is_active,
            "created_at": to_utc_z(self.created_at),
        }
