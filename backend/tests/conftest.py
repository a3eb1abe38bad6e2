"""
Pytest fixtures for E-Bucks backend tests.

Provides test database setup, the test client, and small factories for
users, vouchers, inventory and timesheets.
"""

from datetime import timedelta

import pytest
from ebucks import create_app
from ebucks.config import TestConfig
from ebucks.extensions import db
from ebucks.models import InventoryItem, Timesheet
from ebucks.models.vouchers import SOURCE_MINT
from ebucks.services import auth_service, ledger_service
from ebucks.time_utils import utcnow


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def make_user(db_session):
    """Create an active user: make_user("Ada", pin="4821", rate=15)."""
    counter = {"n": 0}

    def _make(name=None, *, pin=None, rate=15, role="Employee"):
        counter["n"] += 1
        return auth_service.create_user(
            name=name or f"User {counter['n']}",
            role=role,
            pin=pin or f"{1000 + counter['n']}",
            hourly_rate=rate,
        )

    return _make


@pytest.fixture(scope='function')
def make_voucher(db_session):
    """Mint and commit a voucher: make_voucher(1000, owner=user)."""

    def _make(amount_cents, owner=None, source=SOURCE_MINT):
        voucher = ledger_service.mint_voucher(
            amount_cents,
            owner_id=owner.id if owner is not None else None,
            source=source,
        )
        db_session.commit()
        return voucher

    return _make


@pytest.fixture(scope='function')
def make_item(db_session):
    """Create a shelf item: make_item("Snacks", 1250, stock=3)."""

    def _make(name, price_cents, stock=10, barcode=None):
        item = InventoryItem(name=name, price_cents=price_cents, stock=stock, barcode=barcode, is_active=True)
        db_session.add(item)
        db_session.commit()
        return item

    return _make


@pytest.fixture(scope='function')
def make_timesheet(db_session):
    """Create a shift of a given length: make_timesheet(user, minutes=210)."""

    def _make(user, minutes, closed=True, paid=False):
        end = utcnow()
        sheet = Timesheet(
            user_id=user.id,
            clock_in=end - timedelta(minutes=minutes),
            clock_out=end if closed else None,
            total_minutes=minutes if closed else None,
            is_paid=paid,
        )
        db_session.add(sheet)
        db_session.commit()
        return sheet

    return _make
