"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator
from pathlib import Path
from types import SimpleNamespace
from typing import Any
from uuid import uuid4

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base
from tests.unit.conftest import RecordingPublisher


# Compile JSONB as JSON for SQLite (used in tests)
@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_: Any, compiler: Any, **kw: Any) -> str:
    return "JSON"


# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Fixed test user ID for consistency
TEST_USER_ID = uuid4()


@pytest.fixture(scope="session")
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine sharing one in-memory connection."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection: Any, _: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    yield engine
    await engine.dispose()


@pytest.fixture(scope="session")
async def setup_database(engine: AsyncEngine) -> AsyncGenerator[None, None]:
    """Create all tables once per session."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(scope="session")
async def session_factory(
    engine: AsyncEngine, setup_database: None
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Create session factory."""
    factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    yield factory


@pytest.fixture
def test_user() -> TokenUser:
    """Create a test user with fixed ID."""
    return TokenUser(
        id=TEST_USER_ID,
        email="test@example.com",
        display_name="Test User",
    )


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def publisher() -> RecordingPublisher:
    """Event publisher that keeps everything it is given."""
    return RecordingPublisher()


@pytest.fixture
def services(
    session_factory: async_sessionmaker[AsyncSession],
    publisher: RecordingPublisher,
) -> SimpleNamespace:
    """Services wired to the test database."""
    from domain.services.attachment_service import AttachmentService
    from domain.services.event_publisher import InvitationNotifier
    from domain.services.member_service import MemberService
    from domain.services.node_rubbish_service import NodeRubbishService
    from domain.services.node_service import NodeService
    from domain.services.space_service import SpaceService
    from domain.services.user_service import UserService
    from infrastructure.cache.space_capacity import InMemorySpaceCapacityCache
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

    def test_uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    cache = InMemorySpaceCapacityCache()
    return SimpleNamespace(
        uow_factory=test_uow_factory,
        capacity_cache=cache,
        spaces=SpaceService(test_uow_factory, capacity_cache=cache),
        members=MemberService(
            test_uow_factory,
            notifier=InvitationNotifier(publisher),
            event_publisher=publisher,
        ),
        nodes=NodeService(test_uow_factory),
        rubbish=NodeRubbishService(
            test_uow_factory,
            retention_days=90,
            capacity_cache=cache,
            event_publisher=publisher,
        ),
        attachments=AttachmentService(
            test_uow_factory, capacity_cache=cache, event_publisher=publisher
        ),
        users=UserService(test_uow_factory, event_publisher=publisher),
    )


class CurrentUserSwitch:
    """Holds the user the test app treats as authenticated."""

    def __init__(self, user: TokenUser) -> None:
        self.user = user

    def set(self, user: TokenUser) -> None:
        self.user = user


@pytest.fixture
def current_user(test_user: TokenUser) -> CurrentUserSwitch:
    return CurrentUserSwitch(test_user)


@pytest.fixture
async def authenticated_client(
    services: SimpleNamespace,
    current_user: CurrentUserSwitch,
    auth_provider: JWTAuthProvider,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create authenticated test client with proper database and auth overrides.

    This client:
    - Uses an in-memory SQLite database
    - Overrides auth dependency to return ``current_user.user``
    - Overrides every service dependency to use the test session factory
    """
    from api.dependencies.auth import get_auth_provider, get_current_user
    from api.v1 import dependencies as deps
    from main import create_app

    app = create_app()

    async def override_get_user() -> TokenUser:
        return current_user.user

    app.dependency_overrides[get_current_user] = override_get_user
    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[deps.get_space_service] = lambda: services.spaces
    app.dependency_overrides[deps.get_member_service] = lambda: services.members
    app.dependency_overrides[deps.get_node_service] = lambda: services.nodes
    app.dependency_overrides[deps.get_node_rubbish_service] = lambda: services.rubbish
    app.dependency_overrides[deps.get_attachment_service] = lambda: services.attachments
    app.dependency_overrides[deps.get_user_service] = lambda: services.users

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


def make_user(name: str = "user") -> TokenUser:
    """A fresh account with a unique email."""
    return TokenUser(id=uuid4(), email=f"{name}-{uuid4().hex[:8]}@example.com", display_name=name)
