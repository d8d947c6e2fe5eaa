"""
VOD Command Layer — Rejection Model
======================================
Structured rejection reasons for denied order commands.

There is exactly ONE exception type for business rejections
(CommandRejected). Callers dispatch on `exc.reason.code`,
never on exception subclasses.

Every rejection must be:
- Raised before any state is mutated
- Machine-readable (code)
- Human-readable (message)
- Auditable (policy_name + details become event payload)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


# ══════════════════════════════════════════════════════════════
# STANDARD REJECTION CODES
# ══════════════════════════════════════════════════════════════

class ReasonCode(Enum):
    """Known rejection codes. None of them are retryable."""

    # ── Creation ──────────────────────────────────────────────
    INVALID_AMOUNT = "INVALID_AMOUNT"
    REWARD_NOT_ENOUGH = "REWARD_NOT_ENOUGH"

    # ── Payment confirmation ──────────────────────────────────
    ORDER_NOT_VALID = "ORDER_NOT_VALID"
    PRICE_MISMATCH = "PRICE_MISMATCH"

    # ── Cancellation ──────────────────────────────────────────
    ALREADY_CANCELED = "ALREADY_CANCELED"


# ══════════════════════════════════════════════════════════════
# REJECTION REASON (frozen explanation structure)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RejectionReason:
    """
    Structured reason for a rejected order operation.

    Fields:
        code:        ReasonCode kind.
        message:     Human-readable explanation.
        policy_name: Name of the check that caused rejection.
        details:     Contextual payload (amounts, ids).

    This is serializable into event payload for audit trail.
    """

    code: ReasonCode
    message: str
    policy_name: str
    details: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.code, ReasonCode):
            raise ValueError("code must be a ReasonCode.")

        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

        if not self.policy_name or not isinstance(self.policy_name, str):
            raise ValueError("policy_name must be a non-empty string.")

    def to_dict(self) -> dict:
        """Serialize for event payload."""
        return {
            "code": self.code.value,
            "message": self.message,
            "policy_name": self.policy_name,
            "details": dict(self.details),
        }


# ══════════════════════════════════════════════════════════════
# REJECTION EXCEPTION
# ══════════════════════════════════════════════════════════════

class CommandRejected(Exception):
    """Raised when an order operation is refused. Carries the reason."""

    def __init__(self, reason: RejectionReason):
        self.reason = reason
        super().__init__(f"[{reason.code.value}] {reason.message}")

    @property
    def code(self) -> ReasonCode:
        return self.reason.code


def reject(
    code: ReasonCode,
    message: str,
    policy_name: str,
    **details: Any,
) -> CommandRejected:
    """Build a CommandRejected ready to raise."""
    return CommandRejected(
        RejectionReason(
            code=code,
            message=message,
            policy_name=policy_name,
            details=details,
        )
    )
