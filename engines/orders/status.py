"""
VOD Orders Engine — Status Machine
====================================
Shared by Order and OrderLine.

    ORDERED ──► COMPLETED ──► CANCELED
       │                         ▲
       └─────────────────────────┘

CANCELED is terminal. Nothing is ever resurrected.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet


class OrderStatus(Enum):
    ORDERED = "ORDERED"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"


TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.ORDERED: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELED}),
    OrderStatus.COMPLETED: frozenset({OrderStatus.CANCELED}),
    OrderStatus.CANCELED: frozenset(),
}


def can_transition(from_status: OrderStatus, to_status: OrderStatus) -> bool:
    return to_status in TRANSITIONS[from_status]


def is_terminal(status: OrderStatus) -> bool:
    return not TRANSITIONS[status]
