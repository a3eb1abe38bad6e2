# Overview: Generates the short opaque ids printed on vouchers and receipts.

"""
Identifier Service

WHY: Voucher and transaction ids are typed in by hand and scanned as
CODE39 barcodes, so they are short, uppercase, and alphanumeric.

DESIGN:
- 8 characters of base36 drawn from secrets (not random.random)
- Ids are not credentials; they only need to be unguessable enough
  that nobody stumbles onto somebody else's voucher
- Collisions are checked against the table before use
"""

import secrets
import string

from ..extensions import db
from ..models import Voucher, Transaction

ID_ALPHABET = string.ascii_uppercase + string.digits
ID_LENGTH = 8
MAX_ATTEMPTS = 10


class IdentifierError(RuntimeError):
    """Raised when no free id could be found."""
    pass


def generate_token(length: int = ID_LENGTH) -> str:
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(length))


def _unique_id(model) -> str:
    for _ in range(MAX_ATTEMPTS):
        candidate = generate_token()
        if db.session.get(model, candidate) is None:
            return candidate
    raise IdentifierError(f"Could not allocate a unique {model.__tablename__} id")


def new_voucher_id() -> str:
    return _unique_id(Voucher)


def new_transaction_id() -> str:
    return _unique_id(Transaction)
