"""
Subscription list view-model.

Loads every subscription of the signed-in subscriber with the target
influencer's public profile embedded, splits them into active and
inactive by status, and runs the two-phase cancel flow
(request -> confirm/decline). Read failures are silent: the list keeps
whatever it had and the loading flag is cleared.
"""

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from decimal import Decimal

from core.domain import (
    SESSION_NOT_LOADED,
    AuthSession,
    InfluencerPublicProfile,
    Subscription,
    SubscriptionStatus,
    partition_subscriptions,
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
    CancelPrompt,
    CardSection,
    EmptyState,
    SubscriptionCard,
    SubscriptionListScreen,
)

logger = logging.getLogger(__name__)

CANCEL_CONFIRMATION_MESSAGE = "Are you sure you want to cancel this subscription?"
CANCEL_ERROR_PREFIX = "Failed to cancel subscription: "

SCREEN_TITLE = "My Subscriptions"
LOADING_TEXT = "Loading..."
EMPTY_TITLE = "No subscriptions yet"
EMPTY_HINT = "Explore influencers and subscribe to access exclusive content"
ACTIVE_SECTION_TITLE = "Active"
INACTIVE_SECTION_TITLE = "Inactive"

SUBSCRIPTIONS_WITH_INFLUENCER = Projection(
    columns=("*",),
    embeds=(
        Embed(
            alias="profiles",
            table="profiles",
            foreign_key="influencer_id",
            projection=Projection(columns=("username", "full_name", "avatar_url")),
        ),
    ),
)


class SubscriptionNotCancellable(Exception):
    """Raised when cancel is requested for a subscription that is not listed as active."""

    def __init__(self, subscription_id: str):
        super().__init__(f"Subscription {subscription_id} is not an active subscription")
        self.subscription_id = subscription_id


ConfirmCallback = Callable[[CancelPrompt], bool | Awaitable[bool]]


class SubscriptionListViewModel:
    """View state for the subscriber's subscription list."""

    def __init__(
        self,
        client: QueryClient,
        session: AuthSession = SESSION_NOT_LOADED,
        on_view_profile: Callable[[str], None] | None = None,
        currency_symbol: str | None = None,
        date_format: str | None = None,
    ):
        self._client = client
        self._session = session
        self._on_view_profile = on_view_profile
        self._currency_symbol = currency_symbol or settings.currency_symbol
        self._date_format = date_format or settings.date_format

        self.subscriptions: list[Subscription] = []
        self.loading = True
        self.pending_cancel: CancelPrompt | None = None
        self.cancel_error: str | None = None

        # Bumped on every load; responses from older loads are dropped
        self._generation = 0

    @property
    def session(self) -> AuthSession:
        return self._session

    async def set_session(self, session: AuthSession) -> None:
        """Swap the session, reloading when the subscriber's profile changed."""
        previous = self._session.profile
        self._session = session
        if session.profile != previous:
            await self.load()

    @property
    def active(self) -> list[Subscription]:
        return partition_subscriptions(self.subscriptions)[0]

    @property
    def inactive(self) -> list[Subscription]:
        return partition_subscriptions(self.subscriptions)[1]

    @property
    def is_empty(self) -> bool:
        return not self.subscriptions

    async def load(self) -> None:
        """Fetch the full subscription history, newest first."""
        profile = self._session.profile
        if self._session.loading or profile is None:
            return

        self._generation += 1
        generation = self._generation

        try:
            result = await (
                self._client.select("subscriptions", SUBSCRIPTIONS_WITH_INFLUENCER)
                .eq("subscriber_id", profile.id)
                .order("created_at", descending=True)
                .execute()
            )
        except QueryClientError as e:
            result = QueryResult(error=QueryError(str(e)))

        if generation != self._generation:
            logger.debug(
                "Discarding stale subscription list response",
                extra={"section": "subscriptions", "generation": generation},
            )
            return

        if result.ok:
            self.subscriptions = [Subscription.from_row(row) for row in result.rows]
        else:
            logger.warning(
                "Failed to load subscriptions for %s: %s",
                profile.id,
                result.error,
                extra={"user_id": profile.id, "section": "subscriptions"},
            )
        self.loading = False

    def request_cancel(self, subscription_id: str) -> CancelPrompt:
        """
        First phase of cancelling: record and return the confirmation prompt.

        Raises:
            SubscriptionNotCancellable: If the id is not in the active partition
        """
        subscription = next((s for s in self.subscriptions if s.id == subscription_id), None)
        if subscription is None or not subscription.is_active:
            raise SubscriptionNotCancellable(subscription_id)

        self.pending_cancel = CancelPrompt(
            subscription_id=subscription_id,
            message=CANCEL_CONFIRMATION_MESSAGE,
        )
        self.cancel_error = None
        return self.pending_cancel

    def decline_cancel(self) -> None:
        """User said no: drop the prompt, write nothing."""
        self.pending_cancel = None

    async def confirm_cancel(self) -> bool:
        """
        Second phase: mark the pending subscription cancelled and reload.

        Returns:
            True when the write succeeded. False when nothing was pending or
            the write failed; on failure the list is left untouched and the
            message is kept in ``cancel_error``.
        """
        prompt = self.pending_cancel
        if prompt is None:
            return False
        self.pending_cancel = None

        try:
            result = await (
                self._client.update("subscriptions", {"status": SubscriptionStatus.CANCELLED.value})
                .eq("id", prompt.subscription_id)
                .execute()
            )
        except QueryClientError as e:
            result = QueryResult(error=QueryError(str(e)))

        if not result.ok:
            self.cancel_error = f"{CANCEL_ERROR_PREFIX}{result.error}"
            logger.warning(
                "Failed to cancel subscription %s: %s",
                prompt.subscription_id,
                result.error,
                extra={"section": "subscriptions"},
            )
            return False

        logger.info("Cancelled subscription %s", prompt.subscription_id)
        await self.load()
        return True

    async def cancel(self, subscription_id: str, confirm: ConfirmCallback) -> bool:
        """Run both phases, asking ``confirm`` in between."""
        prompt = self.request_cancel(subscription_id)
        answer = confirm(prompt)
        if isinstance(answer, Awaitable):
            answer = await answer
        if not answer:
            self.decline_cancel()
            return False
        return await self.confirm_cancel()

    def view_profile(self, influencer_id: str) -> None:
        """Hand navigation to the owner; this view never navigates itself."""
        if self._on_view_profile is not None:
            self._on_view_profile(influencer_id)

    def render(self) -> SubscriptionListScreen:
        if self.loading:
            return SubscriptionListScreen(title=SCREEN_TITLE, loading=True, loading_text=LOADING_TEXT)

        active, inactive = partition_subscriptions(self.subscriptions)
        if not active and not inactive:
            return SubscriptionListScreen(
                title=SCREEN_TITLE,
                loading=False,
                empty=EmptyState(title=EMPTY_TITLE, hint=EMPTY_HINT),
                cancel_error=self.cancel_error,
            )

        sections = []
        if active:
            sections.append(
                CardSection(ACTIVE_SECTION_TITLE, [self._active_card(s) for s in active])
            )
        if inactive:
            sections.append(
                CardSection(INACTIVE_SECTION_TITLE, [self._inactive_card(s) for s in inactive])
            )

        return SubscriptionListScreen(
            title=SCREEN_TITLE,
            loading=False,
            sections=sections,
            pending_cancel=self.pending_cancel,
            cancel_error=self.cancel_error,
        )

    def _active_card(self, subscription: Subscription) -> SubscriptionCard:
        influencer = _influencer_of(subscription)
        return SubscriptionCard(
            id=subscription.id,
            influencer_id=subscription.influencer_id,
            title=influencer.display_name,
            handle=f"@{influencer.username}",
            avatar=_avatar(influencer),
            price_label=self._price_label(subscription.price_paid),
            expires_label=self._expires_label(subscription.expires_at),
            can_cancel=True,
        )

    def _inactive_card(self, subscription: Subscription) -> SubscriptionCard:
        influencer = _influencer_of(subscription)
        return SubscriptionCard(
            id=subscription.id,
            influencer_id=subscription.influencer_id,
            title=influencer.display_name,
            handle=f"@{influencer.username}",
            avatar=_avatar(influencer),
            muted=True,
            status_label=subscription.inactive_label,
        )

    def _price_label(self, amount: Decimal) -> str:
        return f"{self._currency_symbol} {amount:.2f}/month"

    def _expires_label(self, expires_at: datetime | None) -> str | None:
        if expires_at is None:
            return None
        return f"Expires on {expires_at.strftime(self._date_format)}"


def _influencer_of(subscription: Subscription) -> InfluencerPublicProfile:
    return subscription.influencer or InfluencerPublicProfile(username="")


def _avatar(influencer: InfluencerPublicProfile) -> Avatar:
    if influencer.avatar_url:
        return Avatar(url=influencer.avatar_url)
    return Avatar(url=None, initial=influencer.initial)
