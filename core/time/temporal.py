"""
VOD Core Time — Temporal Helpers
==================================
Pure functions for refund-window arithmetic.
All functions take explicit datetime arguments. No hidden clock access.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional


def expires_at(issued_at: datetime, ttl_seconds: int) -> datetime:
    """Return the instant after which something issued at `issued_at` is expired."""
    return issued_at + timedelta(seconds=ttl_seconds)


def is_expired(issued_at: datetime, ttl_seconds: int, now: datetime) -> bool:
    """
    Check if something issued at `issued_at` has expired given a TTL.

    Expiry is strict: at exactly issued_at + ttl it is still valid.
    """
    return now > expires_at(issued_at, ttl_seconds)


def seconds_until_expiry(
    issued_at: datetime, ttl_seconds: int, now: datetime
) -> Optional[float]:
    """Return seconds remaining before expiry, or None if already expired."""
    remaining = (expires_at(issued_at, ttl_seconds) - now).total_seconds()
    return remaining if remaining >= 0 else None
