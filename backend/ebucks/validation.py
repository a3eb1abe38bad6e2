from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any


# Maximum single amount: $9,999,999.99 (999,999,999 cents)
# Keeps voucher and price values inside a sane integer range
MAX_AMOUNT_CENTS = 999_999_999

# Largest value a SQLite INTEGER column holds
MAX_DB_INT = 2**63 - 1

# Largest stock count or restock quantity accepted in one request
MAX_QUANTITY = 1_000_000


class ValidationError(ValueError):
    """400-level input problem."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate PIN)."""


class NotFoundError(LookupError):
    """404-level lookup miss (unknown user, voucher, item, printer)."""


def require_fields(payload: Any, *fields: str) -> dict:
    """Ensure payload is a JSON object carrying every named key."""
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    missing = [f for f in fields if payload.get(f) is None]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    return payload


def to_cents(value: Any, field: str = "amount", *, allow_zero: bool = False) -> int:
    """
    Convert a JSON currency amount (12.5, "12.50", 12) into integer cents.

    Rejects booleans, more than two decimal places, negatives, and values
    above MAX_AMOUNT_CENTS. Zero is rejected unless allow_zero is set.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValidationError(f"{field} must be a number")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number")

    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number")

    cents = amount * 100
    if cents != cents.to_integral_value():
        raise ValidationError(f"{field} cannot have more than two decimal places")

    cents = int(cents)
    if cents < 0:
        raise ValidationError(f"{field} must be >= 0")
    if cents == 0 and not allow_zero:
        raise ValidationError(f"{field} must be greater than 0")
    if cents > MAX_AMOUNT_CENTS:
        raise ValidationError(f"{field} cannot exceed {MAX_AMOUNT_CENTS / 100:,.2f}")
    return cents


def to_int(value: Any, field: str, *, minimum: int | None = None, maximum: int = MAX_DB_INT) -> int:
    """Strict integer coercion (no floats, no scientific notation), capped at maximum."""
    if isinstance(value, int) and not isinstance(value, bool):
        result = value
    elif isinstance(value, str):
        stripped = value.strip()
        if not stripped or not stripped.lstrip("-").isdigit():
            raise ValidationError(f"{field} must be an integer")
        try:
            result = int(stripped)
        except ValueError:
            # past the interpreter's digit limit
            raise ValidationError(f"{field} must be <= {maximum}")
    else:
        raise ValidationError(f"{field} must be an integer")

    if minimum is not None and result < minimum:
        raise ValidationError(f"{field} must be >= {minimum}")
    if result > maximum:
        raise ValidationError(f"{field} must be <= {maximum}")
    return result


def to_text(value: Any, field: str, *, max_length: int | None = None, required: bool = True) -> str | None:
    """
    Stripped string field. None or blank is an error when required,
    otherwise None. Non-string JSON values are rejected.
    """
    if value is None:
        if required:
            raise ValidationError(f"{field} is required")
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    value = value.strip()
    if not value:
        if required:
            raise ValidationError(f"{field} is required")
        return None
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f"{field} exceeds max length {max_length}")
    return value


def to_id_list(value: Any, field: str = "voucherIds") -> list[str]:
    """
    Normalize a list of opaque voucher ids.

    Ids are stripped and upper-cased (scanners and hand entry vary in case).
    Order is preserved and duplicates are kept so the ledger can reject them.
    """
    if not isinstance(value, list):
        raise ValidationError(f"{field} must be a list")
    ids = []
    for raw in value:
        if not isinstance(raw, (str, int)) or isinstance(raw, bool):
            raise ValidationError(f"{field} entries must be strings")
        s = str(raw).strip().upper()
        if not s:
            raise ValidationError(f"{field} entries cannot be blank")
        ids.append(s)
    return ids
