# Domain Entities
# Pure business objects with no external dependencies
from .content import UNKNOWN_ATTRIBUTION, PurchasedContentItem, extract_attribution
from .subscription import (
    InfluencerPublicProfile,
    Subscription,
    SubscriptionStatus,
    partition_subscriptions,
)
from .user import SESSION_NOT_LOADED, AuthSession, Profile

__all__ = [
    "AuthSession",
    "Profile",
    "SESSION_NOT_LOADED",
    "Subscription",
    "SubscriptionStatus",
    "InfluencerPublicProfile",
    "partition_subscriptions",
    "PurchasedContentItem",
    "extract_attribution",
    "UNKNOWN_ATTRIBUTION",
]
