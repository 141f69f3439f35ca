"""View-models for the subscriber dashboard screens."""

from .dashboard import DashboardTab, DashboardViewModel, ProfileEditorCallbacks
from .subscription_list import SubscriptionListViewModel, SubscriptionNotCancellable

__all__ = [
    "DashboardTab",
    "DashboardViewModel",
    "ProfileEditorCallbacks",
    "SubscriptionListViewModel",
    "SubscriptionNotCancellable",
]
