"""
Subscription list request/response schemas.
"""

from pydantic import BaseModel, Field


class AvatarSchema(BaseModel):
    """Avatar image or placeholder."""

    url: str | None = Field(None, description="Image URL; null renders a placeholder")
    initial: str | None = Field(
        None, description="Placeholder character; null renders a placeholder icon"
    )


class SubscriptionCardSchema(BaseModel):
    """One subscription card."""

    id: str
    influencer_id: str
    title: str = Field(..., description="Full name, or @username when no full name is set")
    handle: str = Field(..., description="@username")
    avatar: AvatarSchema
    muted: bool = Field(False, description="Inactive cards are rendered muted")
    price_label: str | None = None
    expires_label: str | None = None
    status_label: str | None = Field(None, description="Cancelled or Expired for inactive cards")
    can_cancel: bool = False


class CardSectionSchema(BaseModel):
    title: str
    cards: list[SubscriptionCardSchema]


class EmptyStateSchema(BaseModel):
    title: str
    hint: str


class CancelPromptResponse(BaseModel):
    """Confirmation the user must accept before a subscription is cancelled."""

    subscription_id: str
    message: str = Field(..., description="Confirmation question to show")


class SubscriptionListResponse(BaseModel):
    """Rendered subscription list."""

    title: str
    loading: bool
    loading_text: str | None = None
    empty: EmptyStateSchema | None = Field(
        None, description="Set only when the subscriber has no subscriptions at all"
    )
    sections: list[CardSectionSchema] = Field(
        default_factory=list, description="Active and/or inactive sections, non-empty ones only"
    )
    pending_cancel: CancelPromptResponse | None = None
    cancel_error: str | None = None
