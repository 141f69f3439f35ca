"""Subscription domain entities."""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any, Optional

from .values import parse_decimal, parse_timestamp, resolve_embed


class SubscriptionStatus(StrEnum):
    """Lifecycle states a subscription row can be in."""

    ACTIVE = "active"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


@dataclass(frozen=True)
class InfluencerPublicProfile:
    """Minimal public projection of an influencer, embedded in subscription rows."""

    username: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "InfluencerPublicProfile":
        return cls(
            username=row.get("username") or "",
            full_name=row.get("full_name"),
            avatar_url=row.get("avatar_url"),
        )

    @property
    def display_name(self) -> str:
        """Full name when present, otherwise the @handle."""
        return self.full_name or f"@{self.username}"

    @property
    def initial(self) -> str:
        """Uppercased first character of the username, used by avatar placeholders."""
        return self.username[:1].upper()


@dataclass
class Subscription:
    """A subscriber's access grant to one influencer."""

    id: str
    subscriber_id: str
    influencer_id: str
    status: str = SubscriptionStatus.ACTIVE.value
    price_paid: Decimal = Decimal("0")
    started_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    # Embedded influencer projection (None when the join returned nothing)
    influencer: Optional[InfluencerPublicProfile] = None

    # Raw row as returned by the query client, nested embeds included
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_row(
        cls,
        row: dict[str, Any],
        influencer_path: tuple[str, ...] = ("profiles",),
    ) -> "Subscription":
        """Build a subscription from a query row.

        Args:
            row: Row dict, possibly holding embedded mappings
            influencer_path: Keys leading from ``row`` to the embedded public
                profile, e.g. ``("influencer_profiles", "profiles")``
        """
        embedded = resolve_embed(row, influencer_path)
        return cls(
            id=str(row["id"]),
            subscriber_id=str(row.get("subscriber_id", "")),
            influencer_id=str(row.get("influencer_id", "")),
            status=row.get("status") or "",
            price_paid=parse_decimal(row.get("price_paid")),
            started_at=parse_timestamp(row.get("started_at")),
            expires_at=parse_timestamp(row.get("expires_at")),
            created_at=parse_timestamp(row.get("created_at")),
            influencer=(
                InfluencerPublicProfile.from_row(embedded) if embedded is not None else None
            ),
            raw=row,
        )

    @property
    def is_active(self) -> bool:
        return self.status == SubscriptionStatus.ACTIVE.value

    @property
    def inactive_label(self) -> str:
        """Badge text for the inactive partition."""
        if self.status == SubscriptionStatus.CANCELLED.value:
            return "Cancelled"
        return "Expired"


def partition_subscriptions(
    subscriptions: list[Subscription],
) -> tuple[list[Subscription], list[Subscription]]:
    """Split into (active, inactive), keeping the original order within each."""
    active = [s for s in subscriptions if s.is_active]
    inactive = [s for s in subscriptions if not s.is_active]
    return active, inactive
