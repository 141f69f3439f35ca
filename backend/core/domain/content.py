"""Purchased content domain entities."""

from dataclasses import dataclass
from typing import Any

from .values import parse_count

UNKNOWN_ATTRIBUTION = "Unknown"


def extract_attribution(record: Any) -> str:
    """
    Resolve the influencer username credited for a content record.

    Walks content -> influencer_profiles -> profiles -> username. Every
    level may be absent in the joined payload; any break in the chain
    yields ``UNKNOWN_ATTRIBUTION``.
    """
    if not isinstance(record, dict):
        return UNKNOWN_ATTRIBUTION

    influencer_profile = record.get("influencer_profiles")
    if not isinstance(influencer_profile, dict):
        return UNKNOWN_ATTRIBUTION

    public_profile = influencer_profile.get("profiles")
    if not isinstance(public_profile, dict):
        return UNKNOWN_ATTRIBUTION

    username = public_profile.get("username")
    if not isinstance(username, str) or not username:
        return UNKNOWN_ATTRIBUTION

    return username


@dataclass
class PurchasedContentItem:
    """A standalone content item the subscriber bought."""

    id: str
    title: str
    description: str | None = None
    media_url: str | None = None
    thumbnail_url: str | None = None
    total_views: int = 0
    likes_count: int = 0
    influencer_username: str = UNKNOWN_ATTRIBUTION

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "PurchasedContentItem":
        """Build an item from an embedded ``content`` row."""
        return cls(
            id=str(row["id"]),
            title=row.get("title") or "",
            description=row.get("description"),
            media_url=row.get("media_url"),
            thumbnail_url=row.get("thumbnail_url"),
            total_views=parse_count(row.get("total_views")),
            likes_count=parse_count(row.get("likes_count")),
            influencer_username=extract_attribution(row),
        )

    @property
    def image_url(self) -> str | None:
        """Thumbnail when present, otherwise the media itself."""
        return self.thumbnail_url or self.media_url
