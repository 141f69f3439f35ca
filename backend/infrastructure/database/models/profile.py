"""
Profile database models: public profiles and influencer profiles.
"""

from decimal import Decimal
from typing import Optional
from uuid import uuid4

from sqlalchemy import ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class Profile(Base, TimestampMixin):
    """Public profile, one per authenticated account (subscriber or influencer)."""

    __tablename__ = "profiles"

    # Same value as the auth provider's user id
    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        index=True,
    )
    full_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, username={self.username})>"


class InfluencerProfile(Base, TimestampMixin):
    """Influencer-specific data. Shares its primary key with ``profiles``."""

    __tablename__ = "influencer_profiles"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
    )

    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    subscription_price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        default=Decimal("0"),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<InfluencerProfile(id={self.id}, category={self.category})>"
