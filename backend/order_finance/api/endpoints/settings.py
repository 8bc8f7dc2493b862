"""系统设置API（汇率）"""

import logging
from typing import Any, List
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from order_finance.core.config import settings
from order_finance.core.deps import get_db
from order_finance.models.setting import Setting
from order_finance.schemas.setting import SettingResponse, ExchangeRateUpdate, ExchangeRateResponse
from order_finance.services.order_service import load_converter

logger = logging.getLogger(__name__)

router = APIRouter()

def build_rate_response(rate) -> ExchangeRateResponse:
    return ExchangeRateResponse(
        rate=rate,
        base_currency=settings.BASE_CURRENCY,
        display_currency=settings.DISPLAY_CURRENCY if rate > 0 else settings.BASE_CURRENCY,
        configured=rate > 0)

@router.get("/", response_model=List[SettingResponse])
async def list_settings(
    *,
    db: AsyncSession = Depends(get_db)) -> Any:
    """获取全部设置"""
    result = await db.execute(select(Setting).order_by(Setting.key))
    return result.scalars().all()

@router.get("/exchange-rate", response_model=ExchangeRateResponse)
async def get_exchange_rate(
    *,
    db: AsyncSession = Depends(get_db)) -> Any:
    """获取当前汇率（未配置时为 0，按美元显示）"""
    converter = await load_converter(db)
    return build_rate_response(converter.rate)

@router.put("/exchange-rate", response_model=ExchangeRateResponse)
async def update_exchange_rate(
    *,
    db: AsyncSession = Depends(get_db),
    rate_in: ExchangeRateUpdate) -> Any:
    """
    更新汇率

    只影响之后的显示换算，不修改任何订单的持久化金额
    """
    result = await db.execute(select(Setting).where(Setting.key == settings.EXCHANGE_RATE_KEY))
    setting = result.scalar_one_or_none()
    value = str(rate_in.rate)
    if setting:
        setting.value = value
    else:
        setting = Setting(
            key=settings.EXCHANGE_RATE_KEY,
            value=value,
            type="number",
            description="USD → LYD 汇率")
        db.add(setting)
    await db.commit()

    logger.info(f"💱 汇率已更新: 1 {settings.BASE_CURRENCY} = {value} {settings.DISPLAY_CURRENCY}")
    return build_rate_response(rate_in.rate)
