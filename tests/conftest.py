# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os
from tempfile import mkdtemp

# Settings are read at import time, so the environment is set up first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["ENVIRONMENT"] = "testing"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOG_TO_FILE"] = "false"
os.environ["UPLOADS_DIR"] = mkdtemp(prefix="blog-uploads-")
os.environ["ARGON2_MEMORY_COST"] = "1024"
os.environ["ARGON2_TIME_COST"] = "1"
os.environ["ARGON2_PARALLELISM"] = "1"

from collections.abc import AsyncGenerator, Awaitable, Callable, Iterable  # noqa: E402
from io import BytesIO  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from PIL import Image  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402

from blogapi.auth.identity import Identity, Role  # noqa: E402
from blogapi.db.database import atomic, engine_options, get_session  # noqa: E402
from blogapi.main import app  # noqa: E402
from blogapi.managers.token_manager import create_session_token  # noqa: E402
from blogapi.models import UserDB  # noqa: E402
from blogapi.repositories import UserRepository  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
PASSWORD = "correct-horse-battery"


async def _create_account(
    maker: async_sessionmaker[AsyncSession],
    username: str,
    email: str,
    roles: Iterable[Role] = (Role.USER,),
) -> UserDB:
    """Insert a committed account holding ``roles``."""
    async with maker() as session:
        users = UserRepository(session)
        async with atomic(session):
            user = await users.create(username=username, email=email, password=PASSWORD)
            for role in roles:
                await users.assign_role(user.uuid, role)
        return user


def _identity_for(user: UserDB, *roles: Role, elevated: bool = False) -> Identity:
    return Identity(
        user_id=user.uuid,
        email=user.email,
        roles=frozenset(roles or (Role.USER,)),
        elevated=elevated,
    )


def _bearer(user: UserDB, *roles: Role, elevated: bool = False) -> dict[str, str]:
    """Authorization header carrying a session token for ``user``."""
    token = create_session_token(user.uuid, user.email, roles or (Role.USER,), elevated=elevated)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Fresh in-memory database per test."""
    test_engine = create_async_engine(TEST_DATABASE_URL, **engine_options(TEST_DATABASE_URL))
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_maker(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def session(session_maker: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession]:
    async with session_maker() as db_session:
        yield db_session


@pytest.fixture
async def client(session_maker: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client bound to the test database."""

    async def override_get_session() -> AsyncGenerator[AsyncSession]:
        async with session_maker() as db_session:
            try:
                yield db_session
                await db_session.commit()
            except Exception:
                await db_session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app),
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def alice(session_maker: async_sessionmaker[AsyncSession]) -> UserDB:
    return await _create_account(session_maker, "alice", "alice@example.com")


@pytest.fixture
async def bob(session_maker: async_sessionmaker[AsyncSession]) -> UserDB:
    return await _create_account(session_maker, "bob", "bob@example.com")


@pytest.fixture
async def admin_user(session_maker: async_sessionmaker[AsyncSession]) -> UserDB:
    return await _create_account(session_maker, "admin", "admin@example.com", (Role.USER, Role.ADMIN))


@pytest.fixture
async def owner_user(session_maker: async_sessionmaker[AsyncSession]) -> UserDB:
    return await _create_account(session_maker, "owner", "owner@example.com", (Role.USER, Role.OWNER))


@pytest.fixture
def valid_png_bytes() -> bytes:
    """Create valid PNG image bytes."""
    img = Image.new("RGBA", (64, 64), color="blue")
    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def identity_for() -> Callable[..., Identity]:
    """Build an Identity for a stored user."""
    return _identity_for


@pytest.fixture
def auth_headers() -> Callable[..., dict[str, str]]:
    """Build bearer headers for a stored user."""
    return _bearer


@pytest.fixture
def create_account(
    session_maker: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[UserDB]]:
    """Insert extra accounts from inside a test."""

    async def factory(username: str, email: str, roles: Iterable[Role] = (Role.USER,)) -> UserDB:
        return await _create_account(session_maker, username, email, roles)

    return factory
