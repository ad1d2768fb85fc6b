"""
Pytest fixtures shared by the API tests

The app runs in-process through httpx.ASGITransport against a fresh in-memory
SQLite database per test.
"""
import os
import tempfile

# Settings are read at import time, so the environment goes first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["LEADERBOARD_REFRESH_ENABLED"] = "false"
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="gympro-test-logs-")

from decimal import Decimal

import httpx
import pytest
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gympro.core.deps import get_db
from gympro.core.rate_limit import rate_limiter
from gympro.db.base import Base
from gympro.db.session import build_engine
from gympro.main import app
from gympro.models.product import Product, ProductCategory
from gympro.models.user import User
import gympro.models  # noqa: F401

DEFAULT_PASSWORD = "password123"


@pytest.fixture
async def engine():
    engine = build_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    rate_limiter.reset()
    yield
    rate_limiter.reset()


@pytest.fixture
def create_user(client, session_factory):
    """
    Register a user through the API; non-USER roles are set in the database
    and the user logs in again so the token carries the role

    Returns:
        {"id", "email", "headers", "tokens"}
    """
    async def _create(email="user@example.com", role="USER", first_name="Test", last_name="User"):
        resp = await client.post("/api/auth/register", json={
            "email": email,
            "password": DEFAULT_PASSWORD,
            "firstName": first_name,
            "lastName": last_name,
        })
        assert resp.status_code == 201, resp.text
        data = resp.json()["data"]

        if role != "USER":
            async with session_factory() as session:
                await session.execute(update(User).where(User.id == data["user"]["id"]).values(role=role))
                await session.commit()
            resp = await client.post("/api/auth/login", json={"email": email, "password": DEFAULT_PASSWORD})
            assert resp.status_code == 200, resp.text
            data = resp.json()["data"]

        return {
            "id": data["user"]["id"],
            "email": email,
            "headers": {"Authorization": f"Bearer {data['accessToken']}"},
            "tokens": data,
        }

    return _create


@pytest.fixture
async def user(create_user):
    return await create_user("member@example.com")


@pytest.fixture
async def admin(create_user):
    return await create_user("admin@example.com", role="ADMIN", first_name="Ada", last_name="Admin")


@pytest.fixture
def create_product(session_factory):
    """Insert a product (and its category on first use) directly"""
    state = {}

    async def _create(name="Whey Protein", slug=None, price="49.99", stock=10, is_active=True, is_featured=False):
        async with session_factory() as session:
            if "category_id" not in state:
                category = ProductCategory(name="Supplements", slug="supplements")
                session.add(category)
                await session.flush()
                state["category_id"] = category.id
            product = Product(
                name=name,
                slug=slug or name.lower().replace(" ", "-"),
                price=Decimal(price),
                stock=stock,
                is_active=is_active,
                is_featured=is_featured,
                category_id=state["category_id"],
            )
            session.add(product)
            await session.commit()
            return product

    _create.state = state
    return _create
