"""
VOD Core Config — Public API
===============================
Admin-configurable rules (refund window).
"""

from core.config.rules import (
    DEFAULT_REFUND_RULE,
    ConfigStore,
    InMemoryConfigStore,
    RefundRule,
)

__all__ = [
    "DEFAULT_REFUND_RULE",
    "RefundRule",
    "ConfigStore",
    "InMemoryConfigStore",
]
