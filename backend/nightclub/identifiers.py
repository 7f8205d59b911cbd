"""Human-readable identifiers for receipts, guest visits and menu entries."""

from __future__ import annotations

import secrets
from datetime import datetime

_SUFFIX_BYTES = 3


def _generate(prefix: str, now: datetime | None) -> str:
    moment = now or datetime.now()
    return f"{prefix}-{moment:%Y%m%d}-{secrets.token_hex(_SUFFIX_BYTES)}"


def generate_receipt_id(now: datetime | None = None) -> str:
    """Return an id such as ``RCPT-20250101-3f9a1c``."""

    return _generate("RCPT", now)


def generate_visit_id(now: datetime | None = None) -> str:
    return _generate("ATD", now)


def generate_menu_id(now: datetime | None = None) -> str:
    return _generate("MENU", now)


__all__ = ["generate_receipt_id", "generate_visit_id", "generate_menu_id"]
