"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.api.dependencies import get_remote_catalog
from src.db.database import get_db
from src.main import app
from src.models.base import Base
from src.models.content import Content, ContentCategory
from tests.fakes import FakeCatalog, local_id

# Test database URL (uses SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session on a fresh in-memory database."""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    test_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )
    async with test_session_maker() as session:
        yield session

    await test_engine.dispose()


@pytest.fixture
def fake_catalog() -> FakeCatalog:
    """An empty remote catalogue; tests fill in what they need."""
    return FakeCatalog()


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession, fake_catalog: FakeCatalog
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client bound to the test database and fake catalogue."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_remote_catalog] = lambda: fake_catalog

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def catalogue(db_session: AsyncSession) -> list[Content]:
    """A small stored catalogue with distinct popularity values."""
    rows = [
        Content(id=local_id(1), title="Heat", description="Heist", genre="Action, Crime, Thriller",
                popularity=80.0, likes=12),
        Content(id=local_id(2), title="Alien", description="Space", genre="Horror, Sci-Fi",
                popularity=70.0, likes=30),
        Content(id=local_id(3), title="Airplane!", description="Spoof", genre="Comedy",
                popularity=40.0, likes=5),
        Content(id=local_id(4), title="Die Hard", description="Tower", genre="Action, Thriller",
                popularity=90.0, likes=20, tmdb_id=562),
        Content(id=local_id(5), title="Chernobyl", description="Disaster", genre="Drama, History",
                popularity=60.0, likes=8, category=ContentCategory.SERIES, tmdb_id=87108),
        Content(id=local_id(6), title="Mad Max", description="Desert", genre="action, adventure",
                popularity=50.0, likes=1),
    ]
    db_session.add_all(rows)
    await db_session.commit()
    return rows
