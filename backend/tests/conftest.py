import asyncio
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from order_finance.core.deps import get_db
from order_finance.db.base import Base
from order_finance.main import app
from order_finance.schemas.finance import CommissionTier, ItemSnapshot


@pytest.fixture
def tiers():
    return [
        CommissionTier(id=1, country="UK", min_value=Decimal("0"), max_value=Decimal("100"),
                       percentage=Decimal("0.20")),
        CommissionTier(id=2, country="UK", min_value=Decimal("100"), max_value=Decimal("1000"),
                       percentage=Decimal("0.15")),
        CommissionTier(id=3, country="UK", min_value=Decimal("1000"), max_value=None,
                       percentage=Decimal("0.10"), fixed_fee=Decimal("5.00")),
        CommissionTier(id=4, country="TR", min_value=Decimal("0"), max_value=None,
                       percentage=Decimal("0.12")),
    ]


@pytest.fixture
def two_items():
    return [
        ItemSnapshot(id=1, product_name="Jacket", quantity=1, unit_price=Decimal("120.00"),
                     markup_profit=Decimal("10.00")),
        ItemSnapshot(id=2, product_name="Shoes", quantity=1, unit_price=Decimal("60.00"),
                     markup_profit=Decimal("15.00")),
    ]


@pytest.fixture
def client(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)

    async def create_tables():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(create_tables())
    TestSession = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with TestSession() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
    asyncio.run(engine.dispose())
