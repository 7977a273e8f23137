"""
Foodies Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Unit tests use mock_db_session; integration tests get a real schema
       in an in-memory SQLite database (aiosqlite + StaticPool, so every
       session in a test sees the same data) and an HTTPX client whose
       get_db_session is overridden to use it.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: AsyncMock session (no database)
    ├── db_engine → session_factory → db_session: real schema, in memory
    ├── client: HTTPX AsyncClient bound to the app and session_factory
    ├── make_user / make_recipe / auth_headers: data builders
    ├── temp_storage: temporary directory for file operations
    └── sample_png_bytes: small valid PNG for upload tests
"""

import io
import itertools
import os
import tempfile
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run before the first `foodies` import: settings are read at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["JWT_SECRET"] = "test-secret-key-used-only-by-the-test-suite"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="foodies_test_")
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import foodies.models  # noqa: F401
from foodies.database import Base, get_db_session
from foodies.models.recipe import Recipe, RecipeIngredient
from foodies.models.user import User
from foodies.services.auth_service import auth_service


# ══════════════════════════════════════════════════════════════════════════
# Mocked Database
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession for unit tests.

    Usage:
        result = MagicMock()
        result.scalar_one_or_none.return_value = user
        mock_db_session.execute = AsyncMock(return_value=result)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    session.add_all = MagicMock()
    return session


def query_result(scalar=None, rowcount=None):
    """A stand-in for the Result returned by AsyncSession.execute()."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = scalar
    result.scalar.return_value = scalar
    if rowcount is not None:
        result.rowcount = rowcount
    return result


@pytest.fixture
def make_result():
    return query_result


# ══════════════════════════════════════════════════════════════════════════
# Real Database (in-memory SQLite)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """
    HTTPX AsyncClient talking to the app in-process.

    get_db_session is overridden with the same commit/rollback contract as
    the real one, bound to the test database.
    """
    from foodies.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()


# ══════════════════════════════════════════════════════════════════════════
# Data Builders
# ══════════════════════════════════════════════════════════════════════════

DEFAULT_INGREDIENTS = (
    ("640c2dd963a319ea671e37aa", "200g"),
    ("640c2dd963a319ea671e3796", "2 tbsp"),
)


@pytest.fixture
def make_user():
    """
    Build a user with a valid stored access token.

    Usage:
        user = await make_user(db_session, name="Ana")
    """
    counter = itertools.count(1)

    async def create(session, name=None, email=None, with_token=True) -> User:
        n = next(counter)
        user = User(
            name=name or f"Cook {n}",
            email=email or f"cook{n}@example.com",
            password="$2b$10$not-a-real-hash",
        )
        session.add(user)
        await session.flush()
        if with_token:
            user.token = auth_service.create_token(user.id)
            await session.flush()
        return user

    return create


@pytest.fixture
def make_recipe():
    """
    Insert a recipe row with ingredient lines.

    created_at can be pinned to control newest-first ordering.
    """
    counter = itertools.count(1)

    async def create(
        session,
        owner,
        title=None,
        category="Beef",
        area="Italian",
        ingredients=DEFAULT_INGREDIENTS,
        created_at=None,
        thumb=None,
    ) -> Recipe:
        n = next(counter)
        recipe = Recipe(
            title=title or f"Recipe {n}",
            description="A test recipe",
            category=category,
            area=area,
            time=30,
            instructions="Mix everything. Cook for 30 minutes.",
            thumb=thumb,
            owner_id=owner.id,
            created_at=created_at or datetime.now(timezone.utc),
        )
        session.add(recipe)
        await session.flush()
        session.add_all([
            RecipeIngredient(
                recipe_id=recipe.id,
                position=position,
                ingredient_id=ingredient_id,
                quantity=quantity,
            )
            for position, (ingredient_id, quantity) in enumerate(ingredients)
        ])
        await session.flush()
        return recipe

    return create


@pytest.fixture
def auth_headers():
    def build(user) -> dict:
        return {"Authorization": f"Bearer {user.token}"}

    return build


# ══════════════════════════════════════════════════════════════════════════
# Files
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def temp_storage(tmp_path):
    storage_dir = tmp_path / "storage"
    storage_dir.mkdir()
    return str(storage_dir)


@pytest.fixture
def sample_png_bytes():
    """A real 8x8 PNG; Pillow must be able to decode upload test bytes."""
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=(200, 40, 40)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def sample_jpeg_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=(40, 200, 40)).save(buffer, format="JPEG")
    return buffer.getvalue()
