"""
VOD Video Primitive — Purchasable Catalog Item
================================================
Orders read `price` once, at creation. Each order line keeps
its own copy afterwards, so later price changes never touch
existing orders.

This file contains NO persistence logic.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Video:
    """Catalog snapshot of a purchasable video. Price in integer units."""

    price: int = 0
    video_name: str = ""
    video_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        if not isinstance(self.price, int):
            raise TypeError(f"price must be int, got {type(self.price).__name__}.")
        if self.price < 0:
            raise ValueError(f"price must be >= 0, got {self.price}.")
