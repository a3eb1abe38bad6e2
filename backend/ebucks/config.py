# backend/ebucks/config.py
from __future__ import annotations
import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/ebucks.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///ebucks.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Frontend origins allowed to call the API from a browser
    CORS_ORIGINS = [
        o.strip()
        for o in os.environ.get(
            "CORS_ORIGINS",
            "http://localhost:3535,http://127.0.0.1:3535,http://localhost:5173",
        ).split(",")
        if o.strip()
    ]

    # bcrypt cost factor for PIN hashes
    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

    # Ledger rules (money in cents)
    EBUCKS_TRANSFER_FEE_CENTS = int(os.environ.get("EBUCKS_TRANSFER_FEE_CENTS", "500"))
    EBUCKS_DEFAULT_HOURLY_RATE_CENTS = int(os.environ.get("EBUCKS_DEFAULT_HOURLY_RATE_CENTS", "1500"))

    # When off, the client-declared cart total is charged as given
    EBUCKS_VERIFY_CART_TOTAL = _env_bool("EBUCKS_VERIFY_CART_TOTAL", True)

    # Printed at the top of receipts
    EBUCKS_STORE_NAME = os.environ.get("EBUCKS_STORE_NAME", "E-BUCKS STORE")


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    BCRYPT_ROUNDS = 4
    EBUCKS_TRANSFER_FEE_CENTS = 500
    EBUCKS_VERIFY_CART_TOTAL = True
