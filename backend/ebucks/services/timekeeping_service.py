# Overview: Service-layer operations for timekeeping; encapsulates business logic.

"""
Timekeeping Service

WHY: Students clock in/out with their PIN. Closed shifts feed payroll.
A closed shift is never edited here; payroll only flips is_paid.
"""

from ..extensions import db
from ..models import Timesheet, User
from . import auth_service
from ebucks.time_utils import utcnow, minutes_between


class TimekeepingError(ValueError):
    """Raised for invalid timekeeping operations."""
    pass


def _get_open_entry(user_id: int) -> Timesheet | None:
    return (
        db.session.query(Timesheet)
        .filter(Timesheet.user_id == user_id, Timesheet.clock_out.is_(None))
        .first()
    )


def clock_in(*, user_id: int) -> Timesheet:
    if _get_open_entry(user_id):
        raise TimekeepingError("User is already clocked in")

    entry = Timesheet(
        user_id=user_id,
        clock_in=utcnow(),
        is_paid=False,
    )
    db.session.add(entry)
    db.session.commit()
    return entry


def clock_out(*, user_id: int) -> Timesheet:
    entry = _get_open_entry(user_id)
    if not entry:
        raise TimekeepingError("User is not clocked in")

    entry.clock_out = utcnow()
    entry.total_minutes = minutes_between(entry.clock_in, entry.clock_out)

    db.session.commit()
    return entry


def toggle_clock(pin) -> tuple[str, User, Timesheet]:
    """
    Clock the PIN holder out if a shift is open, otherwise in.

    Returns:
        ("IN" | "OUT", user, timesheet)

    Raises:
        auth_service.InvalidPinError: Unknown PIN
    """
    user = auth_service.require_user_by_pin(pin)
    if _get_open_entry(user.id):
        return "OUT", user, clock_out(user_id=user.id)
    return "IN", user, clock_in(user_id=user.id)


def get_current_status(user_id: int) -> dict:
    entry = _get_open_entry(user_id)
    if not entry:
        return {"status": "CLOCKED_OUT", "entry": None}
    return {"status": "CLOCKED_IN", "entry": entry.to_dict()}
