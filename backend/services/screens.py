"""
Render-ready screen structures produced by the view-models.

Everything here is plain data: labels are already formatted, fallbacks
already applied. The API layer serializes these as-is.
"""

from dataclasses import dataclass, field
from typing import Literal


@dataclass(frozen=True)
class Avatar:
    """Image when ``url`` is set; otherwise a placeholder.

    The placeholder shows ``initial`` when given, an icon when not.
    """

    url: str | None
    initial: str | None = None

    @property
    def is_placeholder(self) -> bool:
        return self.url is None


# -- Subscription list -------------------------------------------------------


@dataclass(frozen=True)
class SubscriptionCard:
    id: str
    influencer_id: str
    title: str
    handle: str
    avatar: Avatar
    muted: bool = False
    price_label: str | None = None
    expires_label: str | None = None
    status_label: str | None = None
    can_cancel: bool = False


@dataclass(frozen=True)
class CardSection:
    title: str
    cards: list[SubscriptionCard]


@dataclass(frozen=True)
class EmptyState:
    title: str
    hint: str


@dataclass(frozen=True)
class CancelPrompt:
    """Pending confirmation for cancelling one subscription."""

    subscription_id: str
    message: str


@dataclass(frozen=True)
class SubscriptionListScreen:
    title: str
    loading: bool
    loading_text: str | None = None
    empty: EmptyState | None = None
    sections: list[CardSection] = field(default_factory=list)
    pending_cancel: CancelPrompt | None = None
    cancel_error: str | None = None


# -- Dashboard ---------------------------------------------------------------


@dataclass(frozen=True)
class ProfileHeader:
    avatar: Avatar
    title: str
    handle: str
    bio: str


@dataclass(frozen=True)
class TabButton:
    tab: str
    label: str
    selected: bool


@dataclass(frozen=True)
class DashboardSubscriptionCard:
    id: str
    influencer_id: str
    handle: str
    avatar: Avatar
    status: str
    status_tone: Literal["success", "warning", "error"]
    since_label: str | None


@dataclass(frozen=True)
class PurchasedContentCard:
    id: str
    title: str
    image_url: str | None
    byline: str
    description: str | None
    views: int
    likes: int


@dataclass(frozen=True)
class SubscriptionsPanel:
    heading: str
    loading: bool
    loading_text: str | None = None
    empty_text: str | None = None
    cards: list[DashboardSubscriptionCard] = field(default_factory=list)
    kind: Literal["subscriptions"] = "subscriptions"


@dataclass(frozen=True)
class PurchasedPanel:
    heading: str
    loading: bool
    loading_text: str | None = None
    empty_text: str | None = None
    cards: list[PurchasedContentCard] = field(default_factory=list)
    kind: Literal["purchased"] = "purchased"


@dataclass(frozen=True)
class DiscoverPanel:
    """Mount point for the external influencer browser; it takes no inputs."""

    component: str = "influencer_browser"
    kind: Literal["discover"] = "discover"


@dataclass(frozen=True)
class DashboardScreen:
    title: str
    error: str | None
    header: ProfileHeader
    tabs: list[TabButton]
    panel: SubscriptionsPanel | PurchasedPanel | DiscoverPanel
    edit_profile_open: bool = False
