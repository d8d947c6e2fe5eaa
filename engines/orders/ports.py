"""
VOD Orders Engine — Collaborator Ports
========================================
The order aggregate depends on these protocols only.
core.primitives.Member and core.primitives.Video satisfy them.
"""

from __future__ import annotations

from typing import Protocol


class RewardAccount(Protocol):
    """The purchasing member, as seen by an order."""

    reward: int

    def debit_reward(self, amount: int) -> None:
        """Raise CommandRejected(REWARD_NOT_ENOUGH) if reward < amount."""
        ...  # pragma: no cover

    def credit_reward(self, amount: int) -> None:
        ...  # pragma: no cover


class Purchasable(Protocol):
    """A catalog item. Price is read once, at order creation."""

    price: int
