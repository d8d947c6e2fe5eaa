"""
VOD Orders Engine — Refund Value Object
=========================================
What an operation took out of an order's refundable remainders.

refund_amount: cash, to be reversed through the payment gateway by the caller.
refund_reward: reward, already credited back to the member.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Refund:
    refund_amount: int = 0
    refund_reward: int = 0

    def __post_init__(self):
        if self.refund_amount < 0 or self.refund_reward < 0:
            raise ValueError(
                f"Refund parts must be >= 0, got "
                f"({self.refund_amount}, {self.refund_reward})."
            )

    @property
    def total(self) -> int:
        return self.refund_amount + self.refund_reward

    def is_zero(self) -> bool:
        return self.total == 0

    def to_dict(self) -> dict:
        return {
            "refund_amount": self.refund_amount,
            "refund_reward": self.refund_reward,
        }
