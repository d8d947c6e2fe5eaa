"""
Tests for core.config — Admin-configurable refund rules.
"""

import pytest

from core.config.rules import DEFAULT_REFUND_RULE, InMemoryConfigStore, RefundRule


# ── RefundRule Tests ─────────────────────────────────────────

class TestRefundRule:
    def test_default_window_is_fourteen_days(self):
        assert DEFAULT_REFUND_RULE.refund_window_days == 14
        assert DEFAULT_REFUND_RULE.window_seconds == 14 * 24 * 60 * 60

    def test_custom_window(self):
        rule = RefundRule(refund_window_days=7)
        assert rule.window_seconds == 7 * 86400

    def test_zero_window_allowed(self):
        assert RefundRule(refund_window_days=0).window_seconds == 0

    def test_negative_window_rejected(self):
        with pytest.raises(ValueError, match=">= 0"):
            RefundRule(refund_window_days=-1)

    def test_non_int_window_rejected(self):
        with pytest.raises(TypeError):
            RefundRule(refund_window_days=1.5)

    def test_frozen_immutability(self):
        rule = RefundRule()
        with pytest.raises(AttributeError):
            rule.refund_window_days = 30


# ── InMemoryConfigStore Tests ────────────────────────────────

class TestInMemoryConfigStore:
    def test_falls_back_to_default(self):
        store = InMemoryConfigStore()
        assert store.get_refund_rule() is DEFAULT_REFUND_RULE

    def test_constructor_rule(self):
        rule = RefundRule(refund_window_days=3)
        assert InMemoryConfigStore(rule).get_refund_rule() is rule

    def test_set_refund_rule(self):
        store = InMemoryConfigStore()
        rule = RefundRule(refund_window_days=30)
        store.set_refund_rule(rule)
        assert store.get_refund_rule() == rule
