"""
Subscriber dashboard view-model.

Holds the dashboard's profile header, tab selection, subscriptions
section and purchased-content section. The two sections load
concurrently and independently: each has its own loading flag and
request generation, and a failure in either writes a prefixed message
into the one shared error slot.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from core.domain import (
    SESSION_NOT_LOADED,
    AuthSession,
    PurchasedContentItem,
    Subscription,
    SubscriptionStatus,
)
from core.interfaces.query import (
    Embed,
    Projection,
    QueryClient,
    QueryClientError,
    QueryError,
    QueryResult,
)
from infrastructure.config.settings import settings
from services.screens import (
    Avatar,
    DashboardScreen,
    DashboardSubscriptionCard,
    DiscoverPanel,
    ProfileHeader,
    PurchasedContentCard,
    PurchasedPanel,
    SubscriptionsPanel,
    TabButton,
)

logger = logging.getLogger(__name__)


class DashboardTab(StrEnum):
    """Dashboard tabs; exactly one is shown at a time."""

    SUBSCRIPTIONS = "subscriptions"
    PURCHASED = "purchased"
    DISCOVER = "discover"


TAB_LABELS = {
    DashboardTab.SUBSCRIPTIONS: "My Subscriptions",
    DashboardTab.PURCHASED: "Purchased Content",
    DashboardTab.DISCOVER: "Discover Influencers",
}

SCREEN_TITLE = "Your Dashboard"
SUBSCRIPTIONS_ERROR_PREFIX = "Failed to load subscriptions: "
PURCHASED_ERROR_PREFIX = "Failed to load purchased content: "

DEFAULT_BIO = "Add a bio to tell people more about you."
UNKNOWN_INFLUENCER = "Unknown influencer"

SUBSCRIPTIONS_HEADING = "Your Subscriptions"
SUBSCRIPTIONS_LOADING_TEXT = "Loading subscriptions..."
SUBSCRIPTIONS_EMPTY_TEXT = "You don't have any active subscriptions."
PURCHASED_HEADING = "Purchased Content"
PURCHASED_LOADING_TEXT = "Loading purchased content..."
PURCHASED_EMPTY_TEXT = "You haven't purchased any content yet."

# subscriptions -> influencer_profiles -> profiles
SUBSCRIPTIONS_WITH_INFLUENCER_PROFILE = Projection(
    columns=("*",),
    embeds=(
        Embed(
            alias="influencer_profiles",
            table="influencer_profiles",
            foreign_key="influencer_id",
            projection=Projection(
                columns=("*",),
                embeds=(
                    Embed(
                        alias="profiles",
                        table="profiles",
                        foreign_key="id",
                        projection=Projection(columns=("username", "avatar_url")),
                    ),
                ),
            ),
        ),
    ),
)

# purchased_content -> content -> influencer_profiles -> profiles
PURCHASES_WITH_CONTENT = Projection(
    columns=(),
    embeds=(
        Embed(
            alias="content",
            table="content",
            foreign_key="content_id",
            projection=Projection(
                columns=("*",),
                embeds=(
                    Embed(
                        alias="influencer_profiles",
                        table="influencer_profiles",
                        foreign_key="influencer_id",
                        projection=Projection(
                            columns=(),
                            embeds=(
                                Embed(
                                    alias="profiles",
                                    table="profiles",
                                    foreign_key="id",
                                    projection=Projection(columns=("username",)),
                                ),
                            ),
                        ),
                    ),
                ),
            ),
        ),
    ),
)

_SUBSCRIPTIONS = "subscriptions"
_PURCHASED = "purchased"


@dataclass(frozen=True)
class ProfileEditorCallbacks:
    """Callbacks handed to the profile-edit modal."""

    on_close: Callable[[], None]
    on_success: Callable[[], None]


class DashboardViewModel:
    """View state for the subscriber dashboard."""

    def __init__(
        self,
        client: QueryClient,
        session: AuthSession = SESSION_NOT_LOADED,
        date_format: str | None = None,
    ):
        self._client = client
        self._session = session
        self._date_format = date_format or settings.date_format

        self.subscriptions: list[Subscription] = []
        self.purchased_content: list[PurchasedContentItem] = []
        self.loading_subscriptions = True
        self.loading_purchased_content = True
        self.error: str | None = None
        self.edit_profile_open = False
        self.active_tab = DashboardTab.SUBSCRIPTIONS

        self._generations = {_SUBSCRIPTIONS: 0, _PURCHASED: 0}

    @property
    def session(self) -> AuthSession:
        return self._session

    async def set_session(self, session: AuthSession) -> None:
        """Swap the session, reloading both sections when the user changed."""
        previous = self._session.user_id
        self._session = session
        if session.user_id != previous:
            await self.load()

    async def load(self) -> None:
        """Fetch both sections concurrently."""
        if not self._session.is_ready:
            return
        await asyncio.gather(self.fetch_subscriptions(), self.fetch_purchased_content())

    async def fetch_subscriptions(self) -> None:
        user_id = self._session.user_id
        if not self._session.is_ready:
            return

        generation = self._next_generation(_SUBSCRIPTIONS)
        self.loading_subscriptions = True
        result = await self._run(
            self._client.select("subscriptions", SUBSCRIPTIONS_WITH_INFLUENCER_PROFILE)
            .eq("subscriber_id", user_id)
            .order("created_at", descending=True)
            .execute()
        )
        if self._is_stale(_SUBSCRIPTIONS, generation):
            return

        if result.ok:
            self.subscriptions = [
                Subscription.from_row(row, influencer_path=("influencer_profiles", "profiles"))
                for row in result.rows
            ]
        else:
            logger.error(
                "Error fetching subscriptions: %s",
                result.error,
                extra={"user_id": user_id, "section": _SUBSCRIPTIONS},
            )
            self.error = f"{SUBSCRIPTIONS_ERROR_PREFIX}{result.error}"
        self.loading_subscriptions = False

    async def fetch_purchased_content(self) -> None:
        user_id = self._session.user_id
        if not self._session.is_ready:
            return

        generation = self._next_generation(_PURCHASED)
        self.loading_purchased_content = True
        result = await self._run(
            self._client.select("purchased_content", PURCHASES_WITH_CONTENT)
            .eq("user_id", user_id)
            .order("created_at", descending=True)
            .execute()
        )
        if self._is_stale(_PURCHASED, generation):
            return

        if result.ok:
            # Purchases whose content row is gone come back with content = null
            self.purchased_content = [
                PurchasedContentItem.from_row(row["content"])
                for row in result.rows
                if isinstance(row.get("content"), dict)
            ]
        else:
            logger.error(
                "Error fetching purchased content: %s",
                result.error,
                extra={"user_id": user_id, "section": _PURCHASED},
            )
            self.error = f"{PURCHASED_ERROR_PREFIX}{result.error}"
        self.loading_purchased_content = False

    def select_tab(self, tab: DashboardTab | str) -> None:
        """Switch tabs. Pure view state; never fetches."""
        self.active_tab = DashboardTab(tab)

    def open_profile_editor(self) -> None:
        self.edit_profile_open = True

    def close_profile_editor(self) -> None:
        self.edit_profile_open = False

    def profile_edit_succeeded(self) -> None:
        # The auth provider refreshes the profile itself; nothing to fetch here
        self.edit_profile_open = False

    @property
    def profile_editor_callbacks(self) -> ProfileEditorCallbacks:
        return ProfileEditorCallbacks(
            on_close=self.close_profile_editor,
            on_success=self.profile_edit_succeeded,
        )

    def render(self) -> DashboardScreen:
        return DashboardScreen(
            title=SCREEN_TITLE,
            error=self.error,
            header=self._header(),
            tabs=[
                TabButton(tab=tab.value, label=TAB_LABELS[tab], selected=tab == self.active_tab)
                for tab in DashboardTab
            ],
            panel=self._panel(),
            edit_profile_open=self.edit_profile_open,
        )

    async def _run(self, pending) -> QueryResult:
        try:
            return await pending
        except QueryClientError as e:
            return QueryResult(error=QueryError(str(e)))

    def _next_generation(self, section: str) -> int:
        self._generations[section] += 1
        return self._generations[section]

    def _is_stale(self, section: str, generation: int) -> bool:
        if generation == self._generations[section]:
            return False
        logger.debug(
            "Discarding stale %s response",
            section,
            extra={"section": section, "generation": generation},
        )
        return True

    def _header(self) -> ProfileHeader:
        profile = self._session.profile
        username = profile.username if profile else None
        full_name = profile.full_name if profile else None
        avatar_url = profile.avatar_url if profile else None
        bio = profile.bio if profile else None
        return ProfileHeader(
            avatar=Avatar(url=avatar_url or None),
            title=full_name or f"@{username or 'User'}",
            handle=f"@{username or 'user'}",
            bio=bio or DEFAULT_BIO,
        )

    def _panel(self) -> SubscriptionsPanel | PurchasedPanel | DiscoverPanel:
        if self.active_tab == DashboardTab.SUBSCRIPTIONS:
            return self._subscriptions_panel()
        if self.active_tab == DashboardTab.PURCHASED:
            return self._purchased_panel()
        return DiscoverPanel()

    def _subscriptions_panel(self) -> SubscriptionsPanel:
        if self.loading_subscriptions:
            return SubscriptionsPanel(
                heading=SUBSCRIPTIONS_HEADING,
                loading=True,
                loading_text=SUBSCRIPTIONS_LOADING_TEXT,
            )
        if not self.subscriptions:
            return SubscriptionsPanel(
                heading=SUBSCRIPTIONS_HEADING,
                loading=False,
                empty_text=SUBSCRIPTIONS_EMPTY_TEXT,
            )
        return SubscriptionsPanel(
            heading=SUBSCRIPTIONS_HEADING,
            loading=False,
            cards=[self._subscription_card(s) for s in self.subscriptions],
        )

    def _subscription_card(self, subscription: Subscription) -> DashboardSubscriptionCard:
        influencer = subscription.influencer
        username = influencer.username if influencer else ""
        avatar_url = influencer.avatar_url if influencer else None
        return DashboardSubscriptionCard(
            id=subscription.id,
            influencer_id=subscription.influencer_id,
            handle=f"@{username or UNKNOWN_INFLUENCER}",
            avatar=Avatar(url=avatar_url or None),
            status=subscription.status,
            status_tone=_status_tone(subscription.status),
            since_label=(
                f"Since: {subscription.started_at.strftime(self._date_format)}"
                if subscription.started_at
                else None
            ),
        )

    def _purchased_panel(self) -> PurchasedPanel:
        if self.loading_purchased_content:
            return PurchasedPanel(
                heading=PURCHASED_HEADING,
                loading=True,
                loading_text=PURCHASED_LOADING_TEXT,
            )
        if not self.purchased_content:
            return PurchasedPanel(
                heading=PURCHASED_HEADING,
                loading=False,
                empty_text=PURCHASED_EMPTY_TEXT,
            )
        return PurchasedPanel(
            heading=PURCHASED_HEADING,
            loading=False,
            cards=[
                PurchasedContentCard(
                    id=item.id,
                    title=item.title,
                    image_url=item.image_url,
                    byline=f"By: @{item.influencer_username}",
                    description=item.description,
                    views=item.total_views,
                    likes=item.likes_count,
                )
                for item in self.purchased_content
            ],
        )


def _status_tone(status: str) -> str:
    if status == SubscriptionStatus.ACTIVE.value:
        return "success"
    if status == "pending":
        return "warning"
    return "error"
