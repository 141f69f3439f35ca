"""API request/response schemas."""

from .dashboard import DashboardResponse
from .subscription import CancelPromptResponse, SubscriptionListResponse

__all__ = [
    "DashboardResponse",
    "CancelPromptResponse",
    "SubscriptionListResponse",
]
