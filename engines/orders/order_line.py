"""
VOD Orders Engine — Order Line
================================
One purchased video inside an order.

The line keeps its own price copy and a lookup-only reference
to the catalog item. Its `order` back-reference is set once at
construction and never owns anything: the Order's line list is
the source of truth. All invariant checking lives in Order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.commands.rejection import ReasonCode, reject
from engines.orders.ports import Purchasable
from engines.orders.status import OrderStatus, can_transition

if TYPE_CHECKING:
    from engines.orders.order import Order


class OrderLine:

    def __init__(self, order: "Order", item: Purchasable, price: int):
        if not isinstance(price, int):
            raise TypeError(f"price must be int, got {type(price).__name__}.")
        if price < 0:
            raise ValueError(f"price must be >= 0, got {price}.")
        self._order = order
        self._item = item
        self._price = price
        self.status = OrderStatus.ORDERED

    @classmethod
    def create_order_line(cls, order: "Order", item: Purchasable) -> "OrderLine":
        """Snapshot the item's current price into a new line."""
        return cls(order, item, item.price)

    @property
    def order(self) -> "Order":
        return self._order

    @property
    def item(self) -> Purchasable:
        return self._item

    @property
    def price(self) -> int:
        return self._price

    @property
    def is_canceled(self) -> bool:
        return self.status is OrderStatus.CANCELED

    def complete(self) -> None:
        # a canceled line stays canceled
        if can_transition(self.status, OrderStatus.COMPLETED):
            self.status = OrderStatus.COMPLETED

    def cancel(self) -> None:
        self.status = OrderStatus.CANCELED

    def check_already_canceled(self) -> None:
        if self.is_canceled:
            raise reject(
                ReasonCode.ALREADY_CANCELED,
                "Order line is already canceled.",
                "order_line_not_canceled",
                order_id=self._order.order_id,
                price=self._price,
            )

    def __repr__(self) -> str:
        return f"OrderLine(price={self._price}, status={self.status.value})"
