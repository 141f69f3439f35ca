"""
Content database models: content items and the purchase junction.
"""

from typing import Optional
from uuid import uuid4

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class Content(Base, TimestampMixin):
    """A media item published by an influencer."""

    __tablename__ = "content"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    influencer_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("influencer_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    media_url: Mapped[str] = mapped_column(String(500), nullable=False)
    thumbnail_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Engagement
    total_views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    likes_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def __repr__(self) -> str:
        return f"<Content(id={self.id}, title={self.title[:30]})>"


class PurchasedContent(Base, TimestampMixin):
    """Junction row: a subscriber bought a content item outside any subscription."""

    __tablename__ = "purchased_content"
    __table_args__ = (
        UniqueConstraint("user_id", "content_id", name="uq_purchased_content_user_content"),
    )

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    user_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("content.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<PurchasedContent(user_id={self.user_id}, content_id={self.content_id})>"
