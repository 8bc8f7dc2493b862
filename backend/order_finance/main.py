from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from order_finance.api.api import api_router
from order_finance.core.config import settings
from order_finance.core.logging_config import setup_logging, get_logger
from order_finance.db.init_db import ensure_tables_exist

# 初始化日志系统
setup_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    logger.info("🚀 应用启动中...")

    try:
        await ensure_tables_exist()
        logger.info("📊 数据库表已就绪")
    except Exception as e:
        logger.warning(f"数据库表初始化警告: {e}")

    yield
    logger.info("🛑 应用关闭中...")

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    description="订单财务计算 - 佣金、利润、汇率、预付款分配",
    lifespan=lifespan
)

# CORS配置
if settings.BACKEND_CORS_ORIGINS:
    logger.info(f"配置CORS，允许的源: {settings.BACKEND_CORS_ORIGINS}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

logger.info(f"注册API路由，前缀: {settings.API_PREFIX}")
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    return {"message": settings.PROJECT_NAME}


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000, log_level="info")
