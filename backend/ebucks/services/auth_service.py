# Overview: Service-layer operations for users and PIN identification.

"""
User & PIN Service

WHY: Every voucher, shift and paycheck is attributed to a user. The
classroom identifies people by PIN at the register and the time clock.

SECURITY:
- PINs hashed with bcrypt (cost from BCRYPT_ROUNDS)
- PIN lookup is a scan over active users with bcrypt.checkpw, since a
  salted hash cannot be searched; classroom-sized tables keep this cheap
- PINs are unique among active users, otherwise a PIN would not
  identify anyone
"""

import bcrypt
from flask import current_app

from ..extensions import db
from ..models import User, Timesheet
from ..models.auth import ROLE_ADMIN, VALID_ROLES
from ..validation import ValidationError, ConflictError, NotFoundError, to_cents, to_text
from . import ledger_service

PIN_MIN_LENGTH = 4
PIN_MAX_LENGTH = 8

BOOTSTRAP_ADMIN_NAME = "TEACHER"
BOOTSTRAP_ADMIN_PIN = "0000"
BOOTSTRAP_ADMIN_RATE_CENTS = 5000


class InvalidPinError(Exception):
    """Raised when a PIN does not identify an active user."""
    pass


def validate_pin(pin) -> str:
    pin = str(pin or "").strip()
    if not pin.isdigit() or not (PIN_MIN_LENGTH <= len(pin) <= PIN_MAX_LENGTH):
        raise ValidationError(f"PIN must be {PIN_MIN_LENGTH}-{PIN_MAX_LENGTH} digits")
    return pin


def hash_pin(pin: str) -> str:
    rounds = current_app.config.get("BCRYPT_ROUNDS", 12)
    hashed = bcrypt.hashpw(pin.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_pin(pin: str, pin_hash: str) -> bool:
    try:
        return bcrypt.checkpw(pin.encode("utf-8"), pin_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in the table
        return False


def authenticate_by_pin(pin) -> User | None:
    """Return the active user holding this PIN, or None."""
    pin = str(pin or "").strip()
    if not pin:
        return None
    for user in db.session.query(User).filter_by(is_active=True).order_by(User.id).all():
        if verify_pin(pin, user.pin_hash):
            return user
    return None


def require_user_by_pin(pin) -> User:
    user = authenticate_by_pin(pin)
    if not user:
        raise InvalidPinError("Invalid PIN")
    return user


def create_user(*, name: str, role: str, pin, hourly_rate=None) -> User:
    """
    Create a user.

    Args:
        name: Display name (printed on vouchers)
        role: Admin or Employee
        pin: 4-8 digit PIN, unique among active users
        hourly_rate: Currency amount per hour; defaults to
            EBUCKS_DEFAULT_HOURLY_RATE_CENTS

    Raises:
        ValidationError: Bad name, role, PIN or rate
        ConflictError: PIN already in use
    """
    name = to_text(name, "name", max_length=128)

    role = to_text(role, "role").capitalize()
    if role not in VALID_ROLES:
        raise ValidationError(f"Invalid role: {role}. Must be one of {VALID_ROLES}")

    pin = validate_pin(pin)
    if authenticate_by_pin(pin):
        raise ConflictError("PIN already in use")

    if hourly_rate is None:
        rate_cents = current_app.config["EBUCKS_DEFAULT_HOURLY_RATE_CENTS"]
    else:
        rate_cents = to_cents(hourly_rate, "hourly_rate", allow_zero=True)

    user = User(
        name=name,
        role=role,
        pin_hash=hash_pin(pin),
        hourly_rate_cents=rate_cents,
        is_active=True,
    )
    db.session.add(user)
    db.session.commit()
    return user


def ensure_bootstrap_admin() -> User | None:
    """Create the default admin when the users table is empty."""
    if db.session.query(User).count() > 0:
        return None
    return create_user(
        name=BOOTSTRAP_ADMIN_NAME,
        role=ROLE_ADMIN,
        pin=BOOTSTRAP_ADMIN_PIN,
        hourly_rate=BOOTSTRAP_ADMIN_RATE_CENTS / 100,
    )


def get_user(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if not user:
        raise NotFoundError(f"User {user_id} not found")
    return user


def list_users(include_inactive: bool = False) -> list[User]:
    query = db.session.query(User)
    if not include_inactive:
        query = query.filter_by(is_active=True)
    return query.order_by(User.name.asc()).all()


def deactivate_user(user_id: int) -> User:
    user = get_user(user_id)
    user.is_active = False
    db.session.commit()
    return user


def get_user_details(user_id: int) -> dict:
    """Vouchers, recent shifts and balance for the user detail screen."""
    user = get_user(user_id)
    active = ledger_service.unused_vouchers_for(user.id)
    used = ledger_service.used_vouchers_for(user.id)
    timesheets = (
        db.session.query(Timesheet)
        .filter_by(user_id=user.id)
        .order_by(Timesheet.clock_in.desc())
        .limit(20)
        .all()
    )
    balance_cents = sum(v.amount_cents for v in active)
    return {
        "user": user.to_dict(),
        "activeVouchers": [v.to_dict() for v in active],
        "usedVouchers": [v.to_dict() for v in used],
        "timesheets": [t.to_dict() for t in timesheets],
        "balance": balance_cents / 100,
        "balance_cents": balance_cents,
    }
