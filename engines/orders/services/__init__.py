"""
VOD Orders Engine — Service Layer
==================================
Drives the Order aggregate on behalf of the payment / cancellation
orchestration layer and keeps an in-memory projection of what
happened (statuses, cash refunded, reward credited).

Each command returns exactly one result dict:
    accepted → {"event_type", "payload", ...}
    rejected → {"rejected": RejectionReason}
A rejected command mutates nothing; the rejection is still recorded.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from core.commands.rejection import CommandRejected
from core.config.rules import ConfigStore, InMemoryConfigStore
from core.time.clock import Clock, get_default_clock

from engines.orders.events import (
    ORDER_CANCELED_V1,
    ORDER_COMMAND_REJECTED_V1,
    ORDER_COMPLETED_V1,
    ORDER_CREATED_V1,
    ORDER_LINE_CANCELED_V1,
    ORDER_REWARD_CONVERTED_V1,
    build_payload,
    build_rejection_payload,
)
from engines.orders.order import Order
from engines.orders.order_line import OrderLine
from engines.orders.ports import Purchasable, RewardAccount

logger = logging.getLogger("vod.orders.service")


# ── Projection Store ──────────────────────────────────────────

class OrderProjectionStore:
    """In-memory projection of order events, keyed by order and member."""

    def __init__(self):
        self._events: List[dict] = []
        self._order_status: Dict[str, str] = {}
        self._remainders: Dict[str, tuple] = {}
        self._cash_refunded: Dict[str, int] = {}   # member_id → cash
        self._reward_credited: Dict[str, int] = {}  # member_id → reward
        self._rejections: List[dict] = []

    def apply(self, event_type: str, payload: Dict[str, Any]) -> None:
        self._events.append({"event_type": event_type, "payload": payload})

        if event_type == ORDER_COMMAND_REJECTED_V1:
            self._rejections.append(payload)
            return

        oid = payload["order_id"]
        mid = payload.get("member_id")
        self._order_status[oid] = payload["status"]
        self._remainders[oid] = (
            payload["remain_refund_amount"],
            payload["remain_refund_reward"],
        )

        if event_type in (ORDER_CANCELED_V1, ORDER_LINE_CANCELED_V1):
            self._cash_refunded[mid] = (
                self._cash_refunded.get(mid, 0) + payload["refund_amount"]
            )
            self._reward_credited[mid] = (
                self._reward_credited.get(mid, 0) + payload["refund_reward"]
            )

        elif event_type == ORDER_REWARD_CONVERTED_V1:
            self._reward_credited[mid] = (
                self._reward_credited.get(mid, 0) + payload["converted"]
            )

    # ── Queries ───────────────────────────────────────────────

    def get_status(self, order_id: str) -> Optional[str]:
        return self._order_status.get(order_id)

    def get_remainders(self, order_id: str) -> Optional[tuple]:
        """(remain_refund_amount, remain_refund_reward) as last projected."""
        return self._remainders.get(order_id)

    def get_cash_refunded(self, member_id: str) -> int:
        return self._cash_refunded.get(member_id, 0)

    def get_reward_credited(self, member_id: str) -> int:
        return self._reward_credited.get(member_id, 0)

    def get_rejections(self) -> List[dict]:
        return list(self._rejections)

    def events_of_type(self, event_type: str) -> List[dict]:
        return [e["payload"] for e in self._events if e["event_type"] == event_type]

    @property
    def event_count(self) -> int:
        return len(self._events)

    def truncate(self):
        self._events.clear()
        self._order_status.clear()
        self._remainders.clear()
        self._cash_refunded.clear()
        self._reward_credited.clear()
        self._rejections.clear()


# ── Service ───────────────────────────────────────────────────

class OrderService:
    """Order engine service. Every accepted command produces one event."""

    def __init__(
        self,
        *,
        projection_store: OrderProjectionStore,
        clock: Optional[Clock] = None,
        config_store: Optional[ConfigStore] = None,
    ):
        self._projection = projection_store
        self._clock = clock or get_default_clock()
        self._config = config_store or InMemoryConfigStore()

    def _record(self, event_type: str, order: Order, **extra) -> dict:
        payload = build_payload(event_type, order, self._clock.now_utc(), **extra)
        self._projection.apply(event_type, payload)
        logger.info(f"{event_type} ACCEPTED (order: {order.order_id})")
        return {"event_type": event_type, "payload": payload}

    def _execute(
        self,
        command_name: str,
        order: Optional[Order],
        action: Callable[[], dict],
    ) -> dict:
        try:
            return action()
        except CommandRejected as exc:
            payload = build_rejection_payload(
                command_name, exc.reason, self._clock.now_utc(), order
            )
            self._projection.apply(ORDER_COMMAND_REJECTED_V1, payload)
            logger.info(
                f"{command_name} REJECTED "
                f"(order: {payload['order_id']}): {exc.reason.code.value}"
            )
            return {"rejected": exc.reason}

    # ── Commands ──────────────────────────────────────────────

    def place_order(
        self,
        member: RewardAccount,
        items: Sequence[Purchasable],
        reward_to_use: int,
    ) -> dict:
        def action():
            order = Order.create_order(member, items, reward_to_use)
            result = self._record(ORDER_CREATED_V1, order)
            result["order"] = order
            return result

        return self._execute("place_order", None, action)

    def confirm_payment(self, order: Order, amount: int, payment_key: str) -> dict:
        """Validate the gateway-reported amount, then complete the order."""
        def action():
            order.check_valid_order(amount)
            order.complete_order(self._clock.now_utc(), payment_key)
            return self._record(ORDER_COMPLETED_V1, order)

        return self._execute("confirm_payment", order, action)

    def cancel_order(self, order: Order) -> dict:
        def action():
            order.check_already_canceled()
            refund = order.cancel_all_order()
            result = self._record(ORDER_CANCELED_V1, order, refund=refund)
            result["refund"] = refund
            return result

        return self._execute("cancel_order", order, action)

    def cancel_line(self, order: Order, line: OrderLine) -> dict:
        def action():
            order.check_already_canceled()
            line.check_already_canceled()
            refund = order.cancel_video_order(line)
            result = self._record(
                ORDER_LINE_CANCELED_V1, order, refund=refund, line=line
            )
            result["refund"] = refund
            return result

        return self._execute("cancel_line", order, action)

    def convert_to_reward(self, order: Order, amount: int) -> dict:
        def action():
            drained = order.convert_amount_to_reward(amount)
            return self._record(
                ORDER_REWARD_CONVERTED_V1, order, refund=drained, amount=amount
            )

        return self._execute("convert_to_reward", order, action)

    # ── Queries ───────────────────────────────────────────────

    def is_refundable(self, order: Order) -> bool:
        """Completed and still inside the configured refund window."""
        if not order.is_complete:
            return False
        rule = self._config.get_refund_rule()
        return not order.is_expired(now=self._clock.now_utc(), rule=rule)

    def refund_countdown(self, order: Order) -> Optional[float]:
        """Seconds left to request a refund, or None once it is no longer possible."""
        if not order.is_complete:
            return None
        return order.refund_seconds_left(
            now=self._clock.now_utc(), rule=self._config.get_refund_rule()
        )
