import os
import tempfile
from collections.abc import AsyncGenerator
from uuid import UUID

# Settings are read at import time; point them at throwaway resources first.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="socialconnect-uploads-"))
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "true")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import update  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from socialconnect.db.base import Base  # noqa: E402
from socialconnect.db.session import get_db  # noqa: E402
from socialconnect.main import app  # noqa: E402
from socialconnect.models.user import User  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite://"
PASSWORD = "password123"


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    yield factory
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client: AsyncClient):
    """Register an account and return (user, headers)."""

    async def _register(username: str, **extra) -> tuple[dict, dict]:
        payload = {"email": f"{username}@example.com", "username": username, "password": PASSWORD, **extra}
        resp = await client.post("/api/auth/register", json=payload)
        assert resp.status_code == 201, resp.text
        data = resp.json()
        return data["user"], auth(data["access_token"])

    return _register


@pytest.fixture
def make_admin(session_factory):
    async def _make_admin(user_id: str) -> None:
        async with session_factory() as session:
            await session.execute(update(User).where(User.id == UUID(user_id)).values(role="admin"))
            await session.commit()

    return _make_admin
