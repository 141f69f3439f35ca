"""Integration tests for the SQLAlchemy query client against SQLite."""

import uuid
from decimal import Decimal

import pytest
from sqlalchemy import select

from core.interfaces.query import Embed, Projection
from infrastructure.database.models import Profile as ProfileModel
from infrastructure.database.models import Subscription as SubscriptionModel
from services.dashboard import PURCHASES_WITH_CONTENT, SUBSCRIPTIONS_WITH_INFLUENCER_PROFILE
from services.subscription_list import SUBSCRIPTIONS_WITH_INFLUENCER
from tests.conftest import (
    CONTENT_BEACH,
    CONTENT_KITCHEN,
    JOAO_ID,
    MARIA_ID,
    SUB_JOAO_ACTIVE,
    SUB_JOAO_CANCELLED,
    SUB_LUCAS_EXPIRED,
    SUB_MARIA_ACTIVE,
    SUBSCRIBER_ID,
)

pytestmark = pytest.mark.asyncio


class TestSelect:
    async def test_filter_and_order(self, seeded_db, sql_client):
        result = await (
            sql_client.select("subscriptions")
            .eq("subscriber_id", SUBSCRIBER_ID)
            .order("created_at", descending=True)
            .execute()
        )

        assert result.ok
        assert [row["id"] for row in result.rows] == [
            SUB_JOAO_ACTIVE,
            SUB_LUCAS_EXPIRED,
            SUB_JOAO_CANCELLED,
            SUB_MARIA_ACTIVE,
        ]

    async def test_to_one_embed(self, seeded_db, sql_client):
        result = await (
            sql_client.select("subscriptions", SUBSCRIPTIONS_WITH_INFLUENCER)
            .eq("id", SUB_JOAO_ACTIVE)
            .execute()
        )

        (row,) = result.rows
        assert row["profiles"] == {
            "username": "joao",
            "full_name": "João Lima",
            "avatar_url": "https://cdn.example.com/joao.png",
        }
        assert row["status"] == "active"
        assert Decimal(row["price_paid"]) == Decimal("9.90")

    async def test_nested_to_one_embeds(self, seeded_db, sql_client):
        result = await (
            sql_client.select("subscriptions", SUBSCRIPTIONS_WITH_INFLUENCER_PROFILE)
            .eq("id", SUB_MARIA_ACTIVE)
            .execute()
        )

        (row,) = result.rows
        influencer = row["influencer_profiles"]
        assert influencer["id"] == MARIA_ID
        assert influencer["category"] == "travel"
        assert influencer["profiles"] == {"username": "maria", "avatar_url": None}

    async def test_embed_only_projection_hides_join_columns(self, seeded_db, sql_client):
        result = await (
            sql_client.select("purchased_content", PURCHASES_WITH_CONTENT)
            .eq("user_id", SUBSCRIBER_ID)
            .order("created_at", descending=True)
            .execute()
        )

        assert [set(row) for row in result.rows] == [{"content"}, {"content"}]
        kitchen, beach = (row["content"] for row in result.rows)
        assert kitchen["id"] == CONTENT_KITCHEN
        assert beach["id"] == CONTENT_BEACH
        assert beach["title"] == "Beach guide"
        assert beach["influencer_profiles"] == {"profiles": {"username": "maria"}}
        assert kitchen["influencer_profiles"] == {"profiles": {"username": "joao"}}

    async def test_to_many_embed(self, seeded_db, sql_client):
        projection = Projection(
            columns=("username",),
            embeds=(
                Embed(
                    alias="subscriptions",
                    table="subscriptions",
                    foreign_key="influencer_id",
                    projection=Projection(columns=("status",)),
                    many=True,
                ),
            ),
        )

        result = await sql_client.select("profiles", projection).eq("id", JOAO_ID).execute()

        (row,) = result.rows
        assert set(row) == {"username", "subscriptions"}
        assert sorted(s["status"] for s in row["subscriptions"]) == ["active", "cancelled"]

    async def test_to_many_embed_without_children(self, seeded_db, sql_client):
        projection = Projection(
            columns=("id",),
            embeds=(Embed("subscriptions", "subscriptions", "influencer_id", many=True),),
        )

        result = await sql_client.select("profiles", projection).eq("id", SUBSCRIBER_ID).execute()

        assert result.rows == [{"id": SUBSCRIBER_ID, "subscriptions": []}]

    async def test_no_match(self, seeded_db, sql_client):
        result = await (
            sql_client.select("subscriptions", SUBSCRIPTIONS_WITH_INFLUENCER)
            .eq("subscriber_id", "99999999-9999-4999-8999-999999999999")
            .execute()
        )
        assert result.ok
        assert result.rows == []

    async def test_unknown_table(self, seeded_db, sql_client):
        result = await sql_client.select("nope").execute()

        assert not result.ok
        assert result.error.code == "invalid_query"
        assert "nope" in str(result.error)

    async def test_unknown_column(self, seeded_db, sql_client):
        result = await sql_client.select("subscriptions").eq("nope", 1).execute()

        assert result.error.code == "invalid_query"


class TestUpdate:
    async def test_patch_one_row(self, seeded_db, sql_client, session_maker):
        result = await (
            sql_client.update("subscriptions", {"status": "cancelled"})
            .eq("id", SUB_MARIA_ACTIVE)
            .execute()
        )

        assert result.ok
        async with session_maker() as session:
            statuses = dict(
                (await session.execute(select(SubscriptionModel.id, SubscriptionModel.status))).all()
            )
        assert statuses[SUB_MARIA_ACTIVE] == "cancelled"
        assert statuses[SUB_JOAO_ACTIVE] == "active"

    async def test_unknown_patch_column(self, seeded_db, sql_client):
        result = await sql_client.update("subscriptions", {"nope": 1}).eq("id", SUB_MARIA_ACTIVE).execute()
        assert result.error.code == "invalid_query"

    async def test_constraint_violation_is_returned(self, seeded_db, sql_client):
        result = await (
            sql_client.update("subscriptions", {"status": "paused"})
            .eq("id", SUB_MARIA_ACTIVE)
            .execute()
        )

        assert not result.ok
        assert result.error.code == "IntegrityError"


class TestIdentifiers:
    async def test_multi_row_flush_with_generated_ids(self, db_session):
        db_session.add_all([ProfileModel(username="carla"), ProfileModel(username="diego")])
        await db_session.flush()

        ids = (
            await db_session.execute(select(ProfileModel.id).order_by(ProfileModel.username))
        ).scalars().all()

        assert len(ids) == 2
        assert all(str(uuid.UUID(value)) == value for value in ids)

    async def test_ids_come_back_dashed(self, seeded_db, sql_client):
        result = await sql_client.select("profiles").eq("id", MARIA_ID).execute()

        (row,) = result.rows
        assert row["id"] == MARIA_ID
