"""
VOD Command Layer — Public API
================================
Rejections are first-class: every refused order operation
raises CommandRejected carrying a RejectionReason.
"""

from core.commands.rejection import (
    CommandRejected,
    ReasonCode,
    RejectionReason,
    reject,
)

__all__ = [
    "CommandRejected",
    "ReasonCode",
    "RejectionReason",
    "reject",
]
