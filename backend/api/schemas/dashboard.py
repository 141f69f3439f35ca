"""
Dashboard response schemas.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from .subscription import AvatarSchema


class ProfileHeaderSchema(BaseModel):
    avatar: AvatarSchema
    title: str
    handle: str
    bio: str


class TabButtonSchema(BaseModel):
    tab: str
    label: str
    selected: bool


class DashboardSubscriptionCardSchema(BaseModel):
    id: str
    influencer_id: str
    handle: str
    avatar: AvatarSchema
    status: str
    status_tone: Literal["success", "warning", "error"]
    since_label: str | None = None


class PurchasedContentCardSchema(BaseModel):
    id: str
    title: str
    image_url: str | None = None
    byline: str = Field(..., description="Attribution, @Unknown when the influencer is missing")
    description: str | None = None
    views: int
    likes: int


class SubscriptionsPanelSchema(BaseModel):
    kind: Literal["subscriptions"]
    heading: str
    loading: bool
    loading_text: str | None = None
    empty_text: str | None = None
    cards: list[DashboardSubscriptionCardSchema] = Field(default_factory=list)


class PurchasedPanelSchema(BaseModel):
    kind: Literal["purchased"]
    heading: str
    loading: bool
    loading_text: str | None = None
    empty_text: str | None = None
    cards: list[PurchasedContentCardSchema] = Field(default_factory=list)


class DiscoverPanelSchema(BaseModel):
    kind: Literal["discover"]
    component: str = Field(..., description="Client-side component to mount")


PanelSchema = Annotated[
    Union[SubscriptionsPanelSchema, PurchasedPanelSchema, DiscoverPanelSchema],
    Field(discriminator="kind"),
]


class DashboardResponse(BaseModel):
    """Rendered dashboard for one tab."""

    title: str
    error: str | None = Field(None, description="Last load failure, shown once at the top")
    header: ProfileHeaderSchema
    tabs: list[TabButtonSchema]
    panel: PanelSchema
    edit_profile_open: bool = False
