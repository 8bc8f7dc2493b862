"""运费费率管理API"""

from typing import Any, List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from order_finance.core.deps import get_db
from order_finance.core.exceptions import InvalidAmount, NoShippingRate
from order_finance.models.shipping_rate import ShippingRate
from order_finance.schemas.finance import ShippingQuote
from order_finance.schemas.shipping_rate import (
    ShippingRateCreate, ShippingRateResponse, ShippingCalculateRequest
)
from order_finance.services.order_service import load_shipping_calculator

router = APIRouter()

@router.get("/", response_model=List[ShippingRateResponse])
async def list_rates(
    *,
    db: AsyncSession = Depends(get_db)) -> Any:
    """获取运费费率列表"""
    result = await db.execute(select(ShippingRate).order_by(ShippingRate.country, ShippingRate.category))
    return result.scalars().all()

@router.post("/", response_model=ShippingRateResponse)
async def create_rate(
    *,
    db: AsyncSession = Depends(get_db),
    rate_in: ShippingRateCreate) -> Any:
    """创建运费费率（同一国家+类别只能有一条）"""
    existing = await db.execute(
        select(ShippingRate).where(
            ShippingRate.country == rate_in.country,
            ShippingRate.category == rate_in.category
        )
    )
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="该国家和类别的费率已存在")

    rate = ShippingRate(**rate_in.model_dump())
    db.add(rate)
    await db.commit()
    await db.refresh(rate)
    return rate

@router.delete("/{rate_id}")
async def delete_rate(
    *,
    db: AsyncSession = Depends(get_db),
    rate_id: int) -> Any:
    """删除运费费率"""
    rate = await db.get(ShippingRate, rate_id)
    if not rate:
        raise HTTPException(status_code=404, detail="运费费率不存在")

    await db.delete(rate)
    await db.commit()
    return {"message": "运费费率已删除"}

@router.post("/calculate", response_model=ShippingQuote)
async def calculate_shipping(
    *,
    db: AsyncSession = Depends(get_db),
    request: ShippingCalculateRequest) -> Any:
    """运费试算：按重量计算运费，并按订单金额计算佣金"""
    calculator = await load_shipping_calculator(db, request.country)
    try:
        return calculator.quote(request.country, request.category, request.weight, request.order_value)
    except NoShippingRate as e:
        raise HTTPException(status_code=404, detail=e.message)
    except InvalidAmount as e:
        raise HTTPException(status_code=400, detail=e.message)
