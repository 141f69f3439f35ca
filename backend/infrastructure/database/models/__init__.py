"""
SQLAlchemy database models.
"""

from .base import Base, TimestampMixin
from .content import Content, PurchasedContent
from .profile import InfluencerProfile, Profile
from .subscription import Subscription

__all__ = [
    "Base",
    "TimestampMixin",
    "Profile",
    "InfluencerProfile",
    "Subscription",
    "Content",
    "PurchasedContent",
]
