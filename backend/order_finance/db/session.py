import os
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from order_finance.core.config import settings


def async_database_uri(uri: str) -> str:
    """sqlite:/// 转为 aiosqlite 驱动"""
    if uri.startswith("sqlite:///"):
        return uri.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return uri


# 创建异步引擎
# 仅在开发环境打印SQL（通过环境变量控制）
engine = create_async_engine(
    async_database_uri(settings.SQLITE_DATABASE_URI),
    echo=os.getenv("SQL_DEBUG", "false").lower() == "true",
    future=True,
)

# 创建异步会话
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)
