from decimal import Decimal
from typing import List, Union
import logging

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

class Settings(BaseSettings):
    PROJECT_NAME: str = "订单财务计算系统"
    API_PREFIX: str = "/api"

    # CORS配置
    BACKEND_CORS_ORIGINS: List[Union[str, AnyHttpUrl]] = [
        "http://localhost:5000",
        "http://127.0.0.1:5000",
    ]

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # 数据库配置
    SQLITE_DATABASE_URI: str = "sqlite:///./order_finance.db"

    # 财务计算配置
    # 找不到佣金档位时使用的默认比例（15%）
    DEFAULT_COMMISSION_RATE: Decimal = Field(
        default=Decimal("0.15"),
        ge=0,
        le=1,
        description="默认佣金比例"
    )
    BASE_CURRENCY: str = "USD"  # 所有持久化金额的基础货币
    DISPLAY_CURRENCY: str = "LYD"  # 配置了汇率时的显示货币
    EXCHANGE_RATE_KEY: str = "lyd_exchange_rate"  # settings 表中的汇率键

    # 日志配置
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    class Config:
        case_sensitive = True
        env_file = ".env"


settings = Settings()
logger.info(f"加载配置: API_PREFIX={settings.API_PREFIX}, 显示货币={settings.DISPLAY_CURRENCY}")
