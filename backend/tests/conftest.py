"""
Pytest configuration and shared fixtures for backend tests.
"""

import sys
from pathlib import Path

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

import pytest
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any, AsyncGenerator

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Import after path is set
from core.domain import AuthSession, Profile
from core.interfaces.query import QueryClient, QueryError, QueryResult, SelectQuery, UpdateQuery
from core.security import TokenService
from infrastructure.config import get_settings
from infrastructure.database import SqlAlchemyQueryClient
from infrastructure.database.models import (
    Base,
    Content,
    InfluencerProfile,
    PurchasedContent,
)
from infrastructure.database.models import Profile as ProfileModel
from infrastructure.database.models import Subscription as SubscriptionModel

settings = get_settings()
token_service = TokenService(
    secret_key=settings.jwt_secret_key,
    algorithm=settings.jwt_algorithm,
    audience=settings.jwt_audience,
)


# Database URL for testing (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Fixed ids so assertions can refer to seeded rows by name
SUBSCRIBER_ID = "11111111-1111-4111-8111-111111111111"
OTHER_SUBSCRIBER_ID = "22222222-2222-4222-8222-222222222222"
MARIA_ID = "aaaaaaaa-aaaa-4aaa-8aaa-aaaaaaaaaaaa"
JOAO_ID = "bbbbbbbb-bbbb-4bbb-8bbb-bbbbbbbbbbbb"
LUCAS_ID = "cccccccc-cccc-4ccc-8ccc-cccccccccccc"

SUB_MARIA_ACTIVE = "d0000000-0000-4000-8000-000000000001"
SUB_JOAO_CANCELLED = "d0000000-0000-4000-8000-000000000002"
SUB_LUCAS_EXPIRED = "d0000000-0000-4000-8000-000000000003"
SUB_JOAO_ACTIVE = "d0000000-0000-4000-8000-000000000004"
SUB_OTHER_SUBSCRIBER = "d0000000-0000-4000-8000-000000000005"

CONTENT_BEACH = "e0000000-0000-4000-8000-000000000001"
CONTENT_KITCHEN = "e0000000-0000-4000-8000-000000000002"


@dataclass
class RecordedCall:
    kind: str
    table: str
    filters: list[tuple[str, Any]]
    ordering: tuple[str, bool] | None = None
    patch: dict[str, Any] | None = None


class FakeQueryClient(QueryClient):
    """
    In-memory query client for view-model tests.

    Select results are queued per table; updates succeed unless an error
    was queued for them. Every executed query is recorded.
    """

    def __init__(self):
        self.calls: list[RecordedCall] = []
        self._select_results: dict[str, list[QueryResult]] = {}
        self._update_results: dict[str, list[QueryResult]] = {}

    def queue_rows(self, table: str, rows: list[dict[str, Any]]) -> None:
        self._select_results.setdefault(table, []).append(QueryResult(rows=rows))

    def queue_select_error(self, table: str, message: str) -> None:
        self._select_results.setdefault(table, []).append(
            QueryResult(error=QueryError(message))
        )

    def queue_update_error(self, table: str, message: str) -> None:
        self._update_results.setdefault(table, []).append(
            QueryResult(error=QueryError(message))
        )

    def selects(self, table: str | None = None) -> list[RecordedCall]:
        return [c for c in self.calls if c.kind == "select" and table in (None, c.table)]

    def updates(self, table: str | None = None) -> list[RecordedCall]:
        return [c for c in self.calls if c.kind == "update" and table in (None, c.table)]

    async def run_select(self, query: SelectQuery) -> QueryResult:
        ordering = None
        if query.ordering is not None:
            ordering = (query.ordering.column, query.ordering.descending)
        self.calls.append(
            RecordedCall(
                kind="select",
                table=query.table,
                filters=[(f.column, f.value) for f in query.filters],
                ordering=ordering,
            )
        )
        queued = self._select_results.get(query.table)
        if queued:
            return queued.pop(0)
        return QueryResult(rows=[])

    async def run_update(self, query: UpdateQuery) -> QueryResult:
        self.calls.append(
            RecordedCall(
                kind="update",
                table=query.table,
                filters=[(f.column, f.value) for f in query.filters],
                patch=dict(query.patch),
            )
        )
        queued = self._update_results.get(query.table)
        if queued:
            return queued.pop(0)
        return QueryResult()


@pytest.fixture
def fake_client() -> FakeQueryClient:
    return FakeQueryClient()


@pytest.fixture
def subscriber_profile() -> Profile:
    return Profile(
        id=SUBSCRIBER_ID,
        username="ana",
        full_name="Ana Souza",
        avatar_url=None,
        bio=None,
    )


@pytest.fixture
def subscriber_session(subscriber_profile: Profile) -> AuthSession:
    return AuthSession(user_id=SUBSCRIBER_ID, profile=subscriber_profile)


@pytest.fixture
async def db_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_maker(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def seeded_db(db_session: AsyncSession) -> AsyncSession:
    """
    Seed a subscriber with a mixed subscription history and two purchases.

    Subscriptions of SUBSCRIBER_ID, newest first:
        SUB_JOAO_ACTIVE, SUB_LUCAS_EXPIRED, SUB_JOAO_CANCELLED, SUB_MARIA_ACTIVE
    """
    db_session.add_all(
        [
            ProfileModel(id=SUBSCRIBER_ID, username="ana", full_name="Ana Souza"),
            ProfileModel(id=OTHER_SUBSCRIBER_ID, username="bruno"),
            ProfileModel(id=MARIA_ID, username="maria", full_name=None, avatar_url=None),
            ProfileModel(
                id=JOAO_ID,
                username="joao",
                full_name="João Lima",
                avatar_url="https://cdn.example.com/joao.png",
            ),
            ProfileModel(id=LUCAS_ID, username="lucas", full_name="Lucas Reis"),
        ]
    )
    await db_session.flush()

    db_session.add_all(
        [
            InfluencerProfile(id=MARIA_ID, category="travel", subscription_price=Decimal("19.90")),
            InfluencerProfile(id=JOAO_ID, category="food", subscription_price=Decimal("9.90")),
            InfluencerProfile(id=LUCAS_ID, category="music", subscription_price=Decimal("4.50")),
        ]
    )
    await db_session.flush()

    db_session.add_all(
        [
            SubscriptionModel(
                id=SUB_MARIA_ACTIVE,
                subscriber_id=SUBSCRIBER_ID,
                influencer_id=MARIA_ID,
                status="active",
                price_paid=Decimal("19.90"),
                started_at=datetime(2024, 1, 10, tzinfo=UTC),
                expires_at=datetime(2024, 2, 10, tzinfo=UTC),
                created_at=datetime(2024, 1, 10, tzinfo=UTC),
            ),
            SubscriptionModel(
                id=SUB_JOAO_CANCELLED,
                subscriber_id=SUBSCRIBER_ID,
                influencer_id=JOAO_ID,
                status="cancelled",
                price_paid=Decimal("9.90"),
                started_at=datetime(2024, 2, 1, tzinfo=UTC),
                expires_at=None,
                created_at=datetime(2024, 2, 1, tzinfo=UTC),
            ),
            SubscriptionModel(
                id=SUB_LUCAS_EXPIRED,
                subscriber_id=SUBSCRIBER_ID,
                influencer_id=LUCAS_ID,
                status="expired",
                price_paid=Decimal("4.50"),
                started_at=datetime(2024, 3, 1, tzinfo=UTC),
                expires_at=datetime(2024, 4, 1, tzinfo=UTC),
                created_at=datetime(2024, 3, 1, tzinfo=UTC),
            ),
            SubscriptionModel(
                id=SUB_JOAO_ACTIVE,
                subscriber_id=SUBSCRIBER_ID,
                influencer_id=JOAO_ID,
                status="active",
                price_paid=Decimal("9.90"),
                started_at=datetime(2024, 5, 1, tzinfo=UTC),
                expires_at=None,
                created_at=datetime(2024, 5, 1, tzinfo=UTC),
            ),
            SubscriptionModel(
                id=SUB_OTHER_SUBSCRIBER,
                subscriber_id=OTHER_SUBSCRIBER_ID,
                influencer_id=MARIA_ID,
                status="active",
                price_paid=Decimal("19.90"),
                started_at=datetime(2024, 6, 1, tzinfo=UTC),
                created_at=datetime(2024, 6, 1, tzinfo=UTC),
            ),
            Content(
                id=CONTENT_BEACH,
                influencer_id=MARIA_ID,
                title="Beach guide",
                description="Ten beaches worth the trip",
                media_url="https://cdn.example.com/beach.mp4",
                thumbnail_url="https://cdn.example.com/beach.jpg",
                total_views=120,
                likes_count=14,
            ),
            Content(
                id=CONTENT_KITCHEN,
                influencer_id=JOAO_ID,
                title="Kitchen basics",
                media_url="https://cdn.example.com/kitchen.jpg",
                thumbnail_url=None,
                total_views=0,
                likes_count=0,
            ),
        ]
    )
    await db_session.flush()

    db_session.add_all(
        [
            PurchasedContent(
                user_id=SUBSCRIBER_ID,
                content_id=CONTENT_BEACH,
                created_at=datetime(2024, 4, 1, tzinfo=UTC),
            ),
            PurchasedContent(
                user_id=SUBSCRIBER_ID,
                content_id=CONTENT_KITCHEN,
                created_at=datetime(2024, 5, 1, tzinfo=UTC),
            ),
        ]
    )
    await db_session.commit()
    return db_session


@pytest.fixture
def sql_client(session_maker) -> SqlAlchemyQueryClient:
    return SqlAlchemyQueryClient(session_maker)


@pytest.fixture
def auth_headers() -> dict:
    """Generate authentication headers for the seeded subscriber."""
    access_token = token_service.create_access_token(user_id=SUBSCRIBER_ID)
    return {"Authorization": f"Bearer {access_token}"}


@pytest.fixture
async def async_client(sql_client: SqlAlchemyQueryClient) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing."""
    # Import app here so settings are loaded first
    from api.dependencies import get_query_client
    from main import app

    app.dependency_overrides[get_query_client] = lambda: sql_client

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
