"""Create profile, subscription and content tables

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    # Create profiles table
    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(as_uuid=False), nullable=False),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("avatar_url", sa.String(length=500), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )
    op.create_index("ix_profiles_username", "profiles", ["username"])
    op.create_index("ix_profiles_created_at", "profiles", ["created_at"])

    # Create influencer_profiles table (shares its key with profiles)
    op.create_table(
        "influencer_profiles",
        sa.Column("id", sa.Uuid(as_uuid=False), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column(
            "subscription_price",
            sa.Numeric(precision=10, scale=2),
            nullable=False,
            server_default="0",
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["id"], ["profiles.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_influencer_profiles_created_at", "influencer_profiles", ["created_at"])

    # Create subscriptions table
    op.create_table(
        "subscriptions",
        sa.Column("id", sa.Uuid(as_uuid=False), nullable=False),
        sa.Column("subscriber_id", sa.Uuid(as_uuid=False), nullable=False),
        sa.Column("influencer_id", sa.Uuid(as_uuid=False), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("price_paid", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["subscriber_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["influencer_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "status IN ('active', 'cancelled', 'expired')",
            name="ck_subscriptions_status",
        ),
    )
    op.create_index("ix_subscriptions_subscriber_id", "subscriptions", ["subscriber_id"])
    op.create_index("ix_subscriptions_influencer_id", "subscriptions", ["influencer_id"])
    op.create_index("ix_subscriptions_created_at", "subscriptions", ["created_at"])
    op.create_index(
        "ix_subscriptions_subscriber_created", "subscriptions", ["subscriber_id", "created_at"]
    )

    # Create content table
    op.create_table(
        "content",
        sa.Column("id", sa.Uuid(as_uuid=False), nullable=False),
        sa.Column("influencer_id", sa.Uuid(as_uuid=False), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("media_url", sa.String(length=500), nullable=False),
        sa.Column("thumbnail_url", sa.String(length=500), nullable=True),
        sa.Column("total_views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("likes_count", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["influencer_id"], ["influencer_profiles.id"], ondelete="CASCADE"
        ),
    )
    op.create_index("ix_content_influencer_id", "content", ["influencer_id"])
    op.create_index("ix_content_created_at", "content", ["created_at"])

    # Create purchased_content junction table
    op.create_table(
        "purchased_content",
        sa.Column("id", sa.Uuid(as_uuid=False), nullable=False),
        sa.Column("user_id", sa.Uuid(as_uuid=False), nullable=False),
        sa.Column("content_id", sa.Uuid(as_uuid=False), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["content_id"], ["content.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "content_id", name="uq_purchased_content_user_content"),
    )
    op.create_index("ix_purchased_content_user_id", "purchased_content", ["user_id"])
    op.create_index("ix_purchased_content_content_id", "purchased_content", ["content_id"])
    op.create_index("ix_purchased_content_created_at", "purchased_content", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_purchased_content_created_at", table_name="purchased_content")
    op.drop_index("ix_purchased_content_content_id", table_name="purchased_content")
    op.drop_index("ix_purchased_content_user_id", table_name="purchased_content")
    op.drop_table("purchased_content")

    op.drop_index("ix_content_created_at", table_name="content")
    op.drop_index("ix_content_influencer_id", table_name="content")
    op.drop_table("content")

    op.drop_index("ix_subscriptions_subscriber_created", table_name="subscriptions")
    op.drop_index("ix_subscriptions_created_at", table_name="subscriptions")
    op.drop_index("ix_subscriptions_influencer_id", table_name="subscriptions")
    op.drop_index("ix_subscriptions_subscriber_id", table_name="subscriptions")
    op.drop_table("subscriptions")

    op.drop_index("ix_influencer_profiles_created_at", table_name="influencer_profiles")
    op.drop_table("influencer_profiles")

    op.drop_index("ix_profiles_created_at", table_name="profiles")
    op.drop_index("ix_profiles_username", table_name="profiles")
    op.drop_table("profiles")
