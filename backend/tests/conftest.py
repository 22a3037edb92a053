"""
Shared fixtures: a throwaway SQLite database per test, reached through aiosqlite,
plus a TestClient with get_db pointed at it.
"""
import asyncio
import os
import tempfile

_TEST_DIR = tempfile.mkdtemp(prefix="vendor_grading_tests_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/app.db"
os.environ["ENVIRONMENT"] = "test"
os.environ["ADMIN_EMAILS"] = "admin@example.com"
os.environ["DUE_DILIGENCE_EMAILS"] = "dd@example.com"
os.environ["SECRET_KEY"] = "test-secret"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from vendor_grading.models import Base


@pytest.fixture
def session_maker(tmp_path):
    path = tmp_path / "grading.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()
    engine = create_async_engine(f"sqlite+aiosqlite:///{path}", poolclass=NullPool)
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
def run_db(session_maker):
    """Run `fn(db)` in its own session and commit, like one API request."""

    def _run(fn):
        async def _go():
            async with session_maker() as db:
                try:
                    result = await fn(db)
                    await db.commit()
                    return result
                except Exception:
                    await db.rollback()
                    raise

        return asyncio.run(_go())

    return _run


@pytest.fixture
def client(session_maker):
    from fastapi.testclient import TestClient

    from vendor_grading.db.session import get_db
    from vendor_grading.main import app

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def auth():
    from vendor_grading.core.security import create_access_token

    def _headers(email: str) -> dict:
        return {"Authorization": f"Bearer {create_access_token(email)}"}

    return _headers
