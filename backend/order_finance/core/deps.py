"""依赖注入（认证由外层网关负责）"""
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession

from order_finance.db.session import SessionLocal


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    获取数据库会话依赖
    """
    async with SessionLocal() as session:
        yield session
