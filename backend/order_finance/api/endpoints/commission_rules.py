"""佣金档位管理API"""

from typing import Any, List, Optional
from decimal import Decimal
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from order_finance.core.config import settings
from order_finance.core.deps import get_db
from order_finance.core.exceptions import InvalidAmount
from order_finance.models.commission_rule import CommissionRule
from order_finance.schemas.commission_rule import (
    CommissionRuleCreate, CommissionRuleUpdate, CommissionRuleResponse,
    CommissionResolveResponse
)
from order_finance.services.commission import resolve_with_default
from order_finance.services.order_service import load_commission_resolver

router = APIRouter()

@router.get("/", response_model=List[CommissionRuleResponse])
async def list_rules(
    *,
    db: AsyncSession = Depends(get_db),
    country: Optional[str] = Query(None, description="按国家筛选")) -> Any:
    """获取佣金档位列表（按国家、下限排序）"""
    query = select(CommissionRule)
    if country:
        query = query.where(CommissionRule.country == country)
    query = query.order_by(CommissionRule.country, CommissionRule.min_value)
    result = await db.execute(query)
    return result.scalars().all()

@router.get("/resolve", response_model=CommissionResolveResponse)
async def resolve_commission(
    *,
    db: AsyncSession = Depends(get_db),
    country: str = Query(..., description="国家"),
    value: Decimal = Query(..., ge=0, description="订单计佣金额")) -> Any:
    """佣金试算（找不到档位时按默认比例）"""
    resolver = await load_commission_resolver(db, country)
    try:
        result = resolve_with_default(resolver, country, value, settings.DEFAULT_COMMISSION_RATE)
    except InvalidAmount as e:
        raise HTTPException(status_code=400, detail=e.message)
    return CommissionResolveResponse(**result.model_dump())

@router.post("/", response_model=CommissionRuleResponse)
async def create_rule(
    *,
    db: AsyncSession = Depends(get_db),
    rule_in: CommissionRuleCreate) -> Any:
    """创建佣金档位"""
    rule = CommissionRule(**rule_in.model_dump())
    db.add(rule)
    await db.commit()
    await db.refresh(rule)
    return rule

@router.put("/{rule_id}", response_model=CommissionRuleResponse)
async def update_rule(
    *,
    db: AsyncSession = Depends(get_db),
    rule_id: int,
    rule_in: CommissionRuleUpdate) -> Any:
    """更新佣金档位"""
    rule = await db.get(CommissionRule, rule_id)
    if not rule:
        raise HTTPException(status_code=404, detail="佣金档位不存在")

    update_data = rule_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(rule, field, value)

    if rule.max_value is not None and rule.max_value <= rule.min_value:
        raise HTTPException(status_code=400, detail="档位上限必须大于下限")

    await db.commit()
    await db.refresh(rule)
    return rule

@router.delete("/{rule_id}")
async def delete_rule(
    *,
    db: AsyncSession = Depends(get_db),
    rule_id: int) -> Any:
    """删除佣金档位"""
    rule = await db.get(CommissionRule, rule_id)
    if not rule:
        raise HTTPException(status_code=404, detail="佣金档位不存在")

    await db.delete(rule)
    await db.commit()
    return {"message": "佣金档位已删除"}
