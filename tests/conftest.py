import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from app.core.database import get_async_session
from app.main import app as fastapi_app
from app.models import Product, PurchaseList

OWNER_ID = "user-owner"
MEMBER_ID = "user-member"
STRANGER_ID = "user-stranger"
TEST_SECRET = "test-secret"


def make_token(user_id, **claims):
    return jwt.encode({"userId": user_id, **claims}, TEST_SECRET, algorithm="HS256")


def auth_headers(user_id):
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
async def session_maker(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'products.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def client(session_maker):
    async def override_session():
        async with session_maker() as session:
            yield session

    fastapi_app.dependency_overrides[get_async_session] = override_session
    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://test") as ac:
        yield ac
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def create_list(session_maker):
    async def _create(**fields):
        data = {"name": "Mercado", "created_by_id": OWNER_ID, "shared_ids": [MEMBER_ID]}
        data.update(fields)
        async with session_maker() as session:
            purchase_list = PurchaseList(**data)
            session.add(purchase_list)
            await session.commit()
            await session.refresh(purchase_list)
            return purchase_list

    return _create


@pytest.fixture
def create_product(session_maker):
    # Explicit, increasing timestamps keep list order deterministic.
    base_time = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
    counter = {"n": 0}

    async def _create(purchase_list_id, **fields):
        counter["n"] += 1
        data = {
            "name": "Leite",
            "quantity": 1,
            "category": "Laticínios",
            "price": 4.5,
            "place": "Geladeira",
            "created_by_id": OWNER_ID,
            "purchase_list_id": purchase_list_id,
            "created_at": base_time + timedelta(seconds=counter["n"]),
        }
        data.update(fields)
        async with session_maker() as session:
            product = Product(**data)
            session.add(product)
            await session.commit()
            await session.refresh(product)
            return product

    return _create


@pytest.fixture
def fetch_product(session_maker):
    async def _fetch(product_id):
        async with session_maker() as session:
            return await session.get(Product, product_id)

    return _fetch
