"""
Pytest fixtures for the content platform tests.

Uses a temp file SQLite DB so the app, the fixtures and concurrent sessions
all share the same database (in-memory SQLite is per-connection).
"""

import os
import tempfile
from contextlib import suppress
from typing import AsyncGenerator, Callable, Dict

_tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
_tmp.close()
TEST_DB_PATH = _tmp.name
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["IDENTITY_SECRET_KEY"] = "test-secret-key-for-testing-only-0123456789"
os.environ["IDENTITY_ISSUER"] = ""
os.environ["OBJECT_STORAGE_URL"] = "http://storage.test/upload"
os.environ["ADMIN_BOOTSTRAP_IDS"] = "[]"

# Force config reload so the app uses the test DB
from thinktank.config import get_settings  # noqa: E402

get_settings.cache_clear()

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from thinktank.database import async_session_maker, engine  # noqa: E402
from thinktank.kernel.identity import Caller, SessionTokenVerifier  # noqa: E402
from thinktank.kernel.models import Base, Profile  # noqa: E402
from thinktank.main import app  # noqa: E402


def pytest_sessionfinish(session, exitstatus):
    """Clean up temp DB file after test run."""
    for suffix in ("", "-wal", "-shm"):
        with suppress(OSError):
            os.unlink(TEST_DB_PATH + suffix)


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Fresh schema for every test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """A session on the shared test database."""
    async with async_session_maker() as session:
        yield session
        await session.rollback()


async def _make_profile(session: AsyncSession, profile_id: str, name: str, **flags) -> Profile:
    profile = Profile(id=profile_id, name=name, email=f"{profile_id}@example.com", **flags)
    session.add(profile)
    await session.commit()
    return profile


@pytest_asyncio.fixture
async def member_profile(db_session: AsyncSession) -> Profile:
    return await _make_profile(db_session, "user_member", "Mira Member")


@pytest_asyncio.fixture
async def other_profile(db_session: AsyncSession) -> Profile:
    return await _make_profile(db_session, "user_other", "Otto Other")


@pytest_asyncio.fixture
async def admin_profile(db_session: AsyncSession) -> Profile:
    """Team members are admins."""
    return await _make_profile(
        db_session, "user_admin", "Ada Admin", is_team_member=True, team_role="Editor"
    )


@pytest.fixture
def member(member_profile: Profile) -> Caller:
    return Caller.member(member_profile.id, name=member_profile.name)


@pytest.fixture
def other_member(other_profile: Profile) -> Caller:
    return Caller.member(other_profile.id, name=other_profile.name)


@pytest.fixture
def admin(admin_profile: Profile) -> Caller:
    return Caller.admin(admin_profile.id, name=admin_profile.name)


@pytest.fixture
def token_verifier() -> SessionTokenVerifier:
    return SessionTokenVerifier()


@pytest.fixture
def auth_headers(token_verifier: SessionTokenVerifier) -> Callable[[str], Dict[str, str]]:
    """Build Authorization headers for an identity-provider user id."""

    def _headers(profile_id: str) -> Dict[str, str]:
        token = token_verifier.issue(profile_id, email=f"{profile_id}@example.com")
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest_asyncio.fixture
async def client(db_engine) -> AsyncGenerator[AsyncClient, None]:
    """Async client against the app, sharing the test database."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def sample_publication() -> dict:
    return {
        "title": "Tax Policy Review",
        "abstract": "A review of the current tax code.",
        "content": "## Findings\n\nThe tax code needs work.",
        "type": "research_paper",
    }
