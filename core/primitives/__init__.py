"""
VOD Core Primitives — Order Collaborators
==========================================
Reference implementations of what the orders engine consumes:

    member — reward holder (read, debit, credit)
    video  — purchasable catalog item (price)

Pure Python. No persistence.
"""

from core.primitives.member import Member
from core.primitives.video import Video

__all__ = [
    "Member",
    "Video",
]
