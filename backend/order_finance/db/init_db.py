import asyncio

from order_finance.db.session import engine
from order_finance.db.base import Base

# 导入所有模型，确保表能被创建
from order_finance.models import (  # noqa: F401
    Customer, Order, OrderItem, CommissionRule, ShippingRate, Setting
)


async def init_db() -> None:
    """
    初始化数据库 - 创建所有表
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def ensure_tables_exist() -> None:
    """
    确保数据库表存在（应用启动时调用）
    """
    await init_db()


if __name__ == "__main__":
    asyncio.run(init_db())
