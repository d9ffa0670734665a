import sys
import os

# Ensure src directory is in Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from incident_tracker.database import Base, get_db, register_sqlite_functions
from incident_tracker.main import app
from incident_tracker.models.incident import Incident


# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
register_sqlite_functions(test_engine)
test_session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def override_get_db():
    async with test_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
def session_factory():
    return test_session_factory


@pytest_asyncio.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def insert_incidents(session_factory):
    """Write incidents straight to the store, bypassing the API, so timestamps can be fixed."""

    async def _insert(*incidents: Incident) -> list[str]:
        async with session_factory() as db:
            db.add_all(incidents)
            await db.commit()
        return [i.id for i in incidents]

    return _insert
