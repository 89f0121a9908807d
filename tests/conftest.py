# tests/conftest.py
import os
import tempfile
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio

# Point the app at a throwaway SQLite file before any settings are cached.
_DB_DIR = tempfile.mkdtemp(prefix="slot_recommender_tests_")
os.environ["DB_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/test.db"
os.environ["CALENDAR_PROVIDER"] = "none"

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from slot_recommender.db.session import Base  # noqa: E402
from slot_recommender.main import create_app  # noqa: E402


@pytest.fixture(scope="session")
def client() -> TestClient:
    """
    Shared TestClient fixture for all API tests.

    Entering the client runs the startup hook, which creates the schema in
    the temporary database.
    """
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def db_session(tmp_path) -> AsyncGenerator[AsyncSession, None]:
    """
    AsyncSession bound to a fresh SQLite file with the full schema.

    Independent of the app engine so store/directory tests never share rows
    with the API tests.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/store.db", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)
    async with session_factory() as session:
        yield session

    await engine.dispose()
