"""
VOD Core Config — Admin-Configurable Rules
=============================================
Refund policy values come from configuration data,
not from constants buried in order logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol


SECONDS_PER_DAY = 24 * 60 * 60


# ══════════════════════════════════════════════════════════════
# REFUND RULE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RefundRule:
    """
    How long after completion an order stays refundable.

    refund_window_days: days counted from completed_at (default 14).
    """

    refund_window_days: int = 14

    def __post_init__(self) -> None:
        if not isinstance(self.refund_window_days, int):
            raise TypeError("refund_window_days must be int.")
        if self.refund_window_days < 0:
            raise ValueError(
                f"refund_window_days must be >= 0, got {self.refund_window_days}."
            )

    @property
    def window_seconds(self) -> int:
        return self.refund_window_days * SECONDS_PER_DAY


DEFAULT_REFUND_RULE = RefundRule()


# ══════════════════════════════════════════════════════════════
# CONFIG STORE PROTOCOL
# ══════════════════════════════════════════════════════════════

class ConfigStore(Protocol):
    """
    Protocol for admin-configured rule storage.

    Implementations may back this with a database, file, or in-memory store.
    """

    def get_refund_rule(self) -> RefundRule:
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# IN-MEMORY CONFIG STORE (for testing / bootstrap)
# ══════════════════════════════════════════════════════════════

class InMemoryConfigStore:
    """Simple in-memory config store for testing and bootstrap."""

    def __init__(self, refund_rule: Optional[RefundRule] = None) -> None:
        self._refund_rule = refund_rule

    def set_refund_rule(self, rule: RefundRule) -> None:
        self._refund_rule = rule

    def get_refund_rule(self) -> RefundRule:
        return self._refund_rule or DEFAULT_REFUND_RULE
