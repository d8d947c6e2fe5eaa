"""
VOD Orders Engine — Order Aggregate
=====================================
A member's purchase of one or more videos, paid with a mix of
cash and reward credit.

RULES (NON-NEGOTIABLE):
- 0 <= remain_refund_amount <= total_pay_amount
- 0 <= remain_refund_reward <= reward_applied
- sum(line prices) == total_pay_amount + reward_applied
- Order is CANCELED iff every line is CANCELED
- Every unit taken out of a remainder goes, in the same call, to the
  member's reward balance or to the returned Refund
- Rejections are raised before any state is touched

Draining order:
- Line cancellation refunds CASH first, then reward.
- Conversion to reward drains REWARD first, then cash.

This file contains NO persistence logic.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from core.commands.rejection import ReasonCode, reject
from core.config.rules import DEFAULT_REFUND_RULE, RefundRule
from core.time import clock, temporal
from engines.orders.order_line import OrderLine
from engines.orders.ports import Purchasable, RewardAccount
from engines.orders.refund import Refund
from engines.orders.status import OrderStatus

logger = logging.getLogger("vod.orders")


class Order:
    """
    Aggregate root. Owns its lines exclusively; shares the member.

    Build through Order.create_order(); the constructor only wires state.
    """

    def __init__(
        self,
        *,
        member: RewardAccount,
        total_pay_amount: int,
        reward_applied: int,
        order_id: Optional[str] = None,
        status: OrderStatus = OrderStatus.ORDERED,
    ):
        self.order_id = order_id or str(uuid.uuid4())
        self.payment_key: Optional[str] = None
        self.completed_at: Optional[datetime] = None
        self.status = status
        self.remain_refund_amount = 0
        self.remain_refund_reward = 0
        self._member = member
        self._total_pay_amount = total_pay_amount
        self._reward_applied = reward_applied
        self._lines: List[OrderLine] = []

    # ── Factory ───────────────────────────────────────────────

    @classmethod
    def create_order(
        cls,
        member: RewardAccount,
        items: Sequence[Purchasable],
        reward_to_use: int,
    ) -> "Order":
        """
        Price the items, debit `reward_to_use` from the member and
        open an ORDERED order with one line per item.

        Rejects with INVALID_AMOUNT if the reward is negative or exceeds
        the items' total, and REWARD_NOT_ENOUGH if the member's balance
        cannot cover it. Nothing is debited on rejection.
        """
        if not items:
            raise ValueError("An order needs at least one item.")

        total_price = sum(item.price for item in items)
        total_pay_amount = total_price - reward_to_use

        if reward_to_use < 0 or total_pay_amount < 0:
            raise reject(
                ReasonCode.INVALID_AMOUNT,
                f"Reward {reward_to_use} is out of range for order total {total_price}.",
                "reward_within_order_total",
                total_price=total_price,
                reward_to_use=reward_to_use,
            )

        if member.reward < reward_to_use:
            raise reject(
                ReasonCode.REWARD_NOT_ENOUGH,
                f"Member has {member.reward} reward, needs {reward_to_use}.",
                "member_reward_covers_order",
                requested=reward_to_use,
                available=member.reward,
            )

        order = cls(
            member=member,
            total_pay_amount=total_pay_amount,
            reward_applied=reward_to_use,
        )
        for item in items:
            order.add_order_line(OrderLine.create_order_line(order, item))

        member.debit_reward(reward_to_use)

        logger.debug(
            f"Order {order.order_id} created: {len(items)} line(s), "
            f"pay={total_pay_amount}, reward={reward_to_use}"
        )
        return order

    def add_order_line(self, line: OrderLine) -> None:
        if line.order is not self:
            raise ValueError("OrderLine belongs to a different order.")
        self._lines.append(line)

    # ── Read access ───────────────────────────────────────────

    @property
    def member(self) -> RewardAccount:
        return self._member

    @property
    def total_pay_amount(self) -> int:
        return self._total_pay_amount

    @property
    def reward_applied(self) -> int:
        return self._reward_applied

    @property
    def lines(self) -> Tuple[OrderLine, ...]:
        return tuple(self._lines)

    @property
    def videos(self) -> List[Purchasable]:
        return [line.item for line in self._lines]

    @property
    def is_complete(self) -> bool:
        return self.status is OrderStatus.COMPLETED

    @property
    def is_canceled(self) -> bool:
        return self.status is OrderStatus.CANCELED

    def find_line(self, item: Purchasable) -> Optional[OrderLine]:
        for line in self._lines:
            if line.item is item or line.item == item:
                return line
        return None

    def is_expired(
        self,
        now: Optional[datetime] = None,
        rule: Optional[RefundRule] = None,
    ) -> bool:
        """True once the refund window has fully elapsed since completion."""
        if self.completed_at is None:
            return False
        rule = rule or DEFAULT_REFUND_RULE
        now = now or clock.now_utc()
        return temporal.is_expired(self.completed_at, rule.window_seconds, now)

    def refund_seconds_left(
        self,
        now: Optional[datetime] = None,
        rule: Optional[RefundRule] = None,
    ) -> Optional[float]:
        """Seconds until the refund window closes; None if unpaid or expired."""
        if self.completed_at is None:
            return None
        rule = rule or DEFAULT_REFUND_RULE
        now = now or clock.now_utc()
        return temporal.seconds_until_expiry(self.completed_at, rule.window_seconds, now)

    # ── Validation ────────────────────────────────────────────

    def check_valid_order(self, amount: int) -> None:
        """Payment-confirmation precheck. Mutates nothing."""
        if self.status is not OrderStatus.ORDERED:
            raise reject(
                ReasonCode.ORDER_NOT_VALID,
                f"Order is {self.status.value}, expected ORDERED.",
                "order_must_be_ordered",
                order_id=self.order_id,
                status=self.status.value,
            )
        if amount != self._total_pay_amount:
            raise reject(
                ReasonCode.PRICE_MISMATCH,
                f"Requested {amount} does not match order total {self._total_pay_amount}.",
                "payment_amount_matches",
                order_id=self.order_id,
                requested=amount,
                expected=self._total_pay_amount,
            )

    def check_already_canceled(self) -> None:
        if self.is_canceled:
            raise reject(
                ReasonCode.ALREADY_CANCELED,
                "Order is already canceled.",
                "order_not_canceled",
                order_id=self.order_id,
            )

    # ── Transitions ───────────────────────────────────────────

    def complete_order(self, completed_at: datetime, payment_key: str) -> None:
        """
        Mark the order paid. The whole purchase becomes refundable.
        Callers run check_valid_order() first; it is not repeated here.
        """
        self.completed_at = clock.to_utc(completed_at, "completed_at")
        self.payment_key = payment_key
        self.status = OrderStatus.COMPLETED
        for line in self._lines:
            line.complete()
        self.remain_refund_amount = self._total_pay_amount
        self.remain_refund_reward = self._reward_applied
        logger.debug(f"Order {self.order_id} completed (payment_key={payment_key})")

    def cancel_all_order(self) -> Refund:
        """
        Cancel every line and the order itself. Returns everything
        still refundable; the reward part is credited to the member
        only if the order had been completed.
        """
        for line in self._lines:
            line.cancel()

        if self.is_complete:
            self._member.credit_reward(self.remain_refund_reward)
        elif self.status is OrderStatus.ORDERED and self._reward_applied > 0:
            # reward debited at creation is not returned for unpaid orders
            logger.warning(
                f"Order {self.order_id} canceled before completion; "
                f"{self._reward_applied} reward debited at creation stays held"
            )

        self.status = OrderStatus.CANCELED

        refund = Refund(self.remain_refund_amount, self.remain_refund_reward)
        self.remain_refund_amount = 0
        self.remain_refund_reward = 0

        logger.debug(f"Order {self.order_id} canceled: {refund}")
        return refund

    def cancel_video_order(self, line: OrderLine) -> Refund:
        """
        Cancel one line and refund its price share: cash first, then
        reward, each capped by what the order still has refundable.
        Cancelling the last live line cancels the whole order.
        """
        if line.order is not self:
            raise ValueError("OrderLine belongs to a different order.")

        line.cancel()

        if all(l.is_canceled for l in self._lines):
            return self.cancel_all_order()

        refund_amount = min(line.price, self.remain_refund_amount)
        refund_reward = min(line.price - refund_amount, self.remain_refund_reward)

        self.remain_refund_amount -= refund_amount
        self.remain_refund_reward -= refund_reward
        self._member.credit_reward(refund_reward)

        refund = Refund(refund_amount, refund_reward)
        logger.debug(f"Order {self.order_id} line canceled: {refund}")
        return refund

    def convert_amount_to_reward(self, amount: int) -> Refund:
        """
        Move `amount` of the refundable balance into the member's reward.

        Drains remain_refund_reward first, then remain_refund_amount.
        Returns the split drawn from each remainder. Rejects with
        REWARD_NOT_ENOUGH, touching nothing, if the two cannot cover it.
        """
        if amount < 0:
            raise reject(
                ReasonCode.INVALID_AMOUNT,
                f"Conversion amount must be >= 0, got {amount}.",
                "conversion_amount_non_negative",
                order_id=self.order_id,
                requested=amount,
            )

        from_reward = min(amount, self.remain_refund_reward)
        from_amount = amount - from_reward

        if from_amount > self.remain_refund_amount:
            raise reject(
                ReasonCode.REWARD_NOT_ENOUGH,
                f"Order can convert at most "
                f"{self.remain_refund_reward + self.remain_refund_amount}, "
                f"requested {amount}.",
                "conversion_within_remainders",
                order_id=self.order_id,
                requested=amount,
                remain_refund_reward=self.remain_refund_reward,
                remain_refund_amount=self.remain_refund_amount,
            )

        self.remain_refund_reward -= from_reward
        self.remain_refund_amount -= from_amount
        self._member.credit_reward(amount)

        logger.debug(
            f"Order {self.order_id} converted {amount} to reward "
            f"({from_reward} reward, {from_amount} cash)"
        )
        return Refund(refund_amount=from_amount, refund_reward=from_reward)

    # ── Serialization ─────────────────────────────────────────

    def to_dict(self) -> dict:
        return {
            "order_id": self.order_id,
            "member_id": getattr(self._member, "member_id", None),
            "status": self.status.value,
            "total_pay_amount": self._total_pay_amount,
            "reward_applied": self._reward_applied,
            "remain_refund_amount": self.remain_refund_amount,
            "remain_refund_reward": self.remain_refund_reward,
            "payment_key": self.payment_key,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "lines": [
                {"price": line.price, "status": line.status.value}
                for line in self._lines
            ],
        }

    def __repr__(self) -> str:
        return (
            f"Order({self.order_id}, {self.status.value}, "
            f"pay={self._total_pay_amount}, reward={self._reward_applied})"
        )
