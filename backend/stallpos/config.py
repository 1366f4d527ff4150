from __future__ import annotations
import os


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/stallpos.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///stallpos.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Create the snapshots table on startup (no migration step needed for a single device)
    AUTO_CREATE_TABLES = _env_flag("STALL_AUTO_CREATE_TABLES", True)

    # Vendor name that marks the stall's own goods
    INTERNAL_VENDOR_TAG = os.environ.get("STALL_INTERNAL_VENDOR_TAG", "ZZ")

    STALL_NAME = os.environ.get("STALL_NAME", "Pisang Goreng ZZ")

    # IANA zone for the till's calendar day (None = host local time)
    STALL_TIMEZONE = os.environ.get("STALL_TIMEZONE") or None

    # A food stall never blocks a sale on a stale stock count
    ALLOW_OVERSELL = _env_flag("STALL_ALLOW_OVERSELL", True)

    # When set, every line in a sale must match the POS mode's origin
    STRICT_SALE_ORIGIN = _env_flag("STALL_STRICT_SALE_ORIGIN", False)
