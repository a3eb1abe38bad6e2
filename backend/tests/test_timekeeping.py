# Overview: Pytest coverage for PIN identification and the time clock.

from datetime import timedelta

import pytest

from ebucks.models import Timesheet, User
from ebucks.services import auth_service, timekeeping_service
from ebucks.services.auth_service import InvalidPinError
from ebucks.services.timekeeping_service import TimekeepingError
from ebucks.time_utils import minutes_between, utcnow
from ebucks.validation import ConflictError, ValidationError


class TestUsers:

    def test_pin_is_hashed_and_identifies_user(self, db_session, make_user):
        ada = make_user("Ada", pin="4821")

        assert db_session.get(User, ada.id).pin_hash != "4821"
        assert auth_service.authenticate_by_pin("4821").id == ada.id
        assert auth_service.authenticate_by_pin("9999") is None

    def test_duplicate_pin_is_rejected(self, db_session, make_user):
        make_user("Ada", pin="4821")
        with pytest.raises(ConflictError):
            make_user("Bob", pin="4821")

    def test_pin_format(self, db_session, make_user):
        with pytest.raises(ValidationError):
            make_user("Ada", pin="12")
        with pytest.raises(ValidationError):
            make_user("Ada", pin="12ab")

    def test_role_is_normalized(self, db_session, make_user):
        assert make_user("Ada", role="admin").role == "Admin"
        with pytest.raises(ValidationError):
            make_user("Bob", role="Janitor")

    def test_name_must_be_text(self, db_session):
        with pytest.raises(ValidationError):
            auth_service.create_user(name=123, role="Employee", pin="4821")
        with pytest.raises(ValidationError):
            auth_service.create_user(name="Ada", role=["Admin"], pin="4821")
        assert auth_service.list_users(include_inactive=True) == []

    def test_default_hourly_rate(self, db_session):
        user = auth_service.create_user(name="Ada", role="Employee", pin="4821")
        assert user.hourly_rate_cents == 1500

    def test_deactivated_user_cannot_identify(self, db_session, make_user):
        ada = make_user("Ada", pin="4821")
        auth_service.deactivate_user(ada.id)

        assert auth_service.authenticate_by_pin("4821") is None
        assert [u.id for u in auth_service.list_users()] == []
        assert [u.id for u in auth_service.list_users(include_inactive=True)] == [ada.id]

    def test_bootstrap_admin_only_on_empty_table(self, db_session):
        admin = auth_service.ensure_bootstrap_admin()

        assert admin.name == "TEACHER"
        assert admin.is_admin
        assert admin.hourly_rate_cents == 5000
        assert auth_service.authenticate_by_pin("0000").id == admin.id
        assert auth_service.ensure_bootstrap_admin() is None


class TestClock:

    def test_toggle_clocks_in_then_out(self, db_session, make_user):
        make_user("Ada", pin="4821")

        action, user, entry = timekeeping_service.toggle_clock("4821")
        assert action == "IN"
        assert entry.clock_out is None
        assert timekeeping_service.get_current_status(user.id)["status"] == "CLOCKED_IN"

        action, _, entry = timekeeping_service.toggle_clock("4821")
        assert action == "OUT"
        assert entry.clock_out is not None
        assert entry.total_minutes == 0
        assert timekeeping_service.get_current_status(user.id)["status"] == "CLOCKED_OUT"

    def test_worked_minutes_are_recorded(self, db_session, make_user):
        ada = make_user("Ada")
        entry = timekeeping_service.clock_in(user_id=ada.id)
        entry.clock_in = utcnow() - timedelta(hours=3, minutes=30, seconds=20)
        db_session.commit()

        closed = timekeeping_service.clock_out(user_id=ada.id)

        assert closed.total_minutes == 210
        assert closed.total_hours == 3.5

    def test_unknown_pin(self, db_session):
        with pytest.raises(InvalidPinError):
            timekeeping_service.toggle_clock("0001")

    def test_double_clock_in_is_rejected(self, db_session, make_user):
        ada = make_user("Ada")
        timekeeping_service.clock_in(user_id=ada.id)
        with pytest.raises(TimekeepingError):
            timekeeping_service.clock_in(user_id=ada.id)
        assert db_session.query(Timesheet).count() == 1

    def test_clock_out_without_shift(self, db_session, make_user):
        ada = make_user("Ada")
        with pytest.raises(TimekeepingError):
            timekeeping_service.clock_out(user_id=ada.id)


def test_minutes_between_floors_and_clamps():
    start = utcnow()
    assert minutes_between(start, start + timedelta(seconds=119)) == 1
    assert minutes_between(start, start - timedelta(minutes=5)) == 0
