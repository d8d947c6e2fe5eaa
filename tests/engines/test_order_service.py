"""
VOD Orders Engine — Service Test Suite
========================================
Tests verify:
- Command → aggregate → event → projection
- Rejections are recorded and mutate nothing
- Refund window driven by clock + config store
"""

from datetime import datetime, timezone

import pytest

from core.commands import ReasonCode, RejectionReason
from core.config.rules import InMemoryConfigStore, RefundRule
from core.primitives import Member, Video
from core.time.clock import FixedClock
from engines.orders.refund import Refund
from engines.orders.status import OrderStatus
from engines.orders.events import (
    ORDER_CANCELED_V1,
    ORDER_COMMAND_REJECTED_V1,
    ORDER_COMPLETED_V1,
    ORDER_CREATED_V1,
    ORDER_LINE_CANCELED_V1,
    ORDER_REWARD_CONVERTED_V1,
)
from engines.orders.services import OrderProjectionStore, OrderService

NOW = datetime(2026, 2, 19, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def projection():
    return OrderProjectionStore()


@pytest.fixture
def service(projection, clock):
    return OrderService(projection_store=projection, clock=clock)


def place(service, reward_balance, prices, reward_to_use):
    member = Member(reward=reward_balance)
    videos = [Video(price=p) for p in prices]
    result = service.place_order(member, videos, reward_to_use)
    return member, result


def place_and_pay(service, reward_balance, prices, reward_to_use):
    member, result = place(service, reward_balance, prices, reward_to_use)
    order = result["order"]
    paid = service.confirm_payment(order, order.total_pay_amount, "pk-1")
    assert "rejected" not in paid
    return member, order


class TestPlaceOrder:

    def test_accepted(self, service, projection):
        member, result = place(service, 500, [500, 500], 500)

        order = result["order"]
        assert result["event_type"] == ORDER_CREATED_V1
        assert result["payload"]["total_pay_amount"] == 500
        assert result["payload"]["line_prices"] == [500, 500]
        assert result["payload"]["occurred_at"] == NOW.isoformat()
        assert projection.get_status(order.order_id) == "ORDERED"
        assert member.reward == 0

    def test_rejected(self, service, projection):
        member, result = place(service, 0, [500, 500], 500)

        reason = result["rejected"]
        assert isinstance(reason, RejectionReason)
        assert reason.code is ReasonCode.REWARD_NOT_ENOUGH
        assert projection.event_count == 1
        rejection = projection.get_rejections()[0]
        assert rejection["command"] == "place_order"
        assert rejection["order_id"] is None
        assert rejection["reason"]["code"] == "REWARD_NOT_ENOUGH"


class TestConfirmPayment:

    def test_completes_with_clock_time(self, service, projection):
        _, order = place_and_pay(service, 0, [300, 200], 0)

        assert order.status is OrderStatus.COMPLETED
        assert order.completed_at == NOW
        assert order.payment_key == "pk-1"
        payload = projection.events_of_type(ORDER_COMPLETED_V1)[0]
        assert payload["payment_key"] == "pk-1"
        assert projection.get_remainders(order.order_id) == (500, 0)

    def test_price_mismatch_leaves_order_ordered(self, service, projection):
        _, result = place(service, 0, [300, 200], 0)
        order = result["order"]

        outcome = service.confirm_payment(order, 499, "pk-1")

        assert outcome["rejected"].code is ReasonCode.PRICE_MISMATCH
        assert order.status is OrderStatus.ORDERED
        assert order.payment_key is None
        assert projection.get_status(order.order_id) == "ORDERED"

    def test_double_confirmation_rejected(self, service):
        _, order = place_and_pay(service, 0, [300], 0)

        outcome = service.confirm_payment(order, 300, "pk-2")

        assert outcome["rejected"].code is ReasonCode.ORDER_NOT_VALID
        assert order.payment_key == "pk-1"


class TestCancellation:

    def test_cancel_order(self, service, projection):
        member, order = place_and_pay(service, 500, [500, 500], 500)

        result = service.cancel_order(order)

        assert result["event_type"] == ORDER_CANCELED_V1
        assert result["refund"] == Refund(500, 500)
        assert projection.get_status(order.order_id) == "CANCELED"
        assert projection.get_cash_refunded(member.member_id) == 500
        assert projection.get_reward_credited(member.member_id) == 500

    def test_cancel_twice_rejected(self, service, projection):
        member, order = place_and_pay(service, 500, [500, 500], 500)
        service.cancel_order(order)

        outcome = service.cancel_order(order)

        assert outcome["rejected"].code is ReasonCode.ALREADY_CANCELED
        assert member.reward == 500
        assert projection.get_cash_refunded(member.member_id) == 500

    def test_cancel_lines_until_order_canceled(self, service, projection):
        member, order = place_and_pay(service, 1500, [1000, 1000], 1500)

        first = service.cancel_line(order, order.lines[0])
        second = service.cancel_line(order, order.lines[1])

        assert first["event_type"] == ORDER_LINE_CANCELED_V1
        assert first["refund"] == Refund(500, 500)
        assert first["payload"]["line_price"] == 1000
        assert second["refund"] == Refund(0, 1000)
        assert second["payload"]["status"] == "CANCELED"
        assert projection.get_status(order.order_id) == "CANCELED"
        assert projection.get_cash_refunded(member.member_id) == order.total_pay_amount
        assert projection.get_reward_credited(member.member_id) == order.reward_applied
        assert member.reward == 1500

    def test_cancel_same_line_twice_rejected(self, service):
        member, order = place_and_pay(service, 0, [100, 100, 100], 0)
        service.cancel_line(order, order.lines[0])

        outcome = service.cancel_line(order, order.lines[0])

        assert outcome["rejected"].code is ReasonCode.ALREADY_CANCELED
        assert order.remain_refund_amount == 200

    def test_cancel_line_of_canceled_order_rejected(self, service):
        _, order = place_and_pay(service, 0, [100, 100], 0)
        service.cancel_order(order)

        outcome = service.cancel_line(order, order.lines[0])

        assert outcome["rejected"].code is ReasonCode.ALREADY_CANCELED


class TestConvertToReward:

    def test_accepted(self, service, projection):
        member, order = place_and_pay(service, 500, [500, 200], 500)

        result = service.convert_to_reward(order, 700)

        assert result["event_type"] == ORDER_REWARD_CONVERTED_V1
        assert result["payload"]["from_remain_reward"] == 500
        assert result["payload"]["from_remain_amount"] == 200
        assert projection.get_reward_credited(member.member_id) == 700
        assert projection.get_remainders(order.order_id) == (0, 0)
        assert member.reward == 700

    def test_rejected(self, service, projection):
        member, order = place_and_pay(service, 500, [500, 200], 500)

        outcome = service.convert_to_reward(order, 800)

        assert outcome["rejected"].code is ReasonCode.REWARD_NOT_ENOUGH
        assert (order.remain_refund_amount, order.remain_refund_reward) == (200, 500)
        assert projection.events_of_type(ORDER_COMMAND_REJECTED_V1)[0]["order_id"] == (
            order.order_id
        )


class TestIsRefundable:

    def test_unpaid_order_not_refundable(self, service):
        _, result = place(service, 0, [100], 0)
        assert not service.is_refundable(result["order"])

    def test_window(self, service, clock):
        _, order = place_and_pay(service, 0, [100], 0)
        assert service.is_refundable(order)

        clock.advance(days=14)
        assert service.is_refundable(order)

        clock.advance(seconds=1)
        assert not service.is_refundable(order)

    def test_configured_window(self, projection, clock):
        service = OrderService(
            projection_store=projection,
            clock=clock,
            config_store=InMemoryConfigStore(RefundRule(refund_window_days=1)),
        )
        _, order = place_and_pay(service, 0, [100], 0)

        clock.advance(days=2)
        assert not service.is_refundable(order)


class TestProjection:

    def test_truncate(self, service, projection):
        _, order = place_and_pay(service, 0, [100], 0)
        assert projection.event_count == 2

        projection.truncate()

        assert projection.event_count == 0
        assert projection.get_status(order.order_id) is None


class TestRefundCountdown:

    def test_unpaid_order(self, service):
        _, result = place(service, 0, [100], 0)
        assert service.refund_countdown(result["order"]) is None

    def test_counts_down_with_clock(self, service, clock):
        _, order = place_and_pay(service, 0, [100], 0)
        assert service.refund_countdown(order) == 14 * 86400

        clock.advance(days=10)
        assert service.refund_countdown(order) == 4 * 86400

        clock.advance(days=4, seconds=1)
        assert service.refund_countdown(order) is None
        assert not service.is_refundable(order)

    def test_configured_window(self, projection, clock):
        service = OrderService(
            projection_store=projection,
            clock=clock,
            config_store=InMemoryConfigStore(RefundRule(refund_window_days=2)),
        )
        _, order = place_and_pay(service, 0, [100], 0)

        clock.advance(days=1)
        assert service.refund_countdown(order) == 86400

    def test_canceled_order(self, service):
        _, order = place_and_pay(service, 0, [100], 0)
        service.cancel_order(order)
        assert service.refund_countdown(order) is None
