"""
VOD Member Primitive — Reward Holder
======================================
The purchasing party. Orders only touch the reward balance:
read it, debit it at order creation, credit it on refunds
and conversions.

RULES (NON-NEGOTIABLE):
- Reward is an integer balance, never negative
- Debits beyond the balance are REJECTED (REWARD_NOT_ENOUGH)
- Amounts passed in must be >= 0

This file contains NO persistence logic.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from core.commands.rejection import ReasonCode, reject


def _check_non_negative(amount: int) -> None:
    if not isinstance(amount, int):
        raise TypeError(f"Reward amount must be int, got {type(amount).__name__}.")
    if amount < 0:
        raise ValueError(f"Reward amount must be >= 0, got {amount}.")


@dataclass(eq=False)
class Member:
    """
    Mutable reward holder. Identity-compared (two members with
    the same balance are still different members).
    """

    reward: int = 0
    member_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        _check_non_negative(self.reward)

    def check_reward(self, amount: int) -> None:
        """Reject if the balance cannot cover `amount`."""
        _check_non_negative(amount)
        if self.reward < amount:
            raise reject(
                ReasonCode.REWARD_NOT_ENOUGH,
                f"Member has {self.reward} reward, needs {amount}.",
                "member_reward_balance",
                member_id=self.member_id,
                requested=amount,
                available=self.reward,
            )

    def debit_reward(self, amount: int) -> None:
        self.check_reward(amount)
        self.reward -= amount

    def credit_reward(self, amount: int) -> None:
        _check_non_negative(amount)
        self.reward += amount
