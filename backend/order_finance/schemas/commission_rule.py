"""佣金档位Schema"""
from typing import Optional, List
from pydantic import BaseModel, Field, model_validator
from datetime import datetime
from decimal import Decimal


class CommissionRuleBase(BaseModel):
    """佣金档位基础字段"""
    country: str = Field(..., min_length=1, max_length=50, description="国家")
    min_value: Decimal = Field(..., ge=0, description="档位下限（含）")
    max_value: Optional[Decimal] = Field(None, ge=0, description="档位上限（不含），为空表示无上限")
    percentage: Decimal = Field(..., ge=0, le=1, description="佣金比例 0-1")
    fixed_fee: Decimal = Field(default=Decimal("0.00"), ge=0, description="固定费用")

    @model_validator(mode="after")
    def check_range(self):
        if self.max_value is not None and self.max_value <= self.min_value:
            raise ValueError("档位上限必须大于下限")
        return self


class CommissionRuleCreate(CommissionRuleBase):
    """创建佣金档位"""
    pass


class CommissionRuleUpdate(BaseModel):
    """更新佣金档位"""
    country: Optional[str] = Field(None, min_length=1, max_length=50)
    min_value: Optional[Decimal] = Field(None, ge=0)
    max_value: Optional[Decimal] = Field(None, ge=0)
    percentage: Optional[Decimal] = Field(None, ge=0, le=1)
    fixed_fee: Optional[Decimal] = Field(None, ge=0)


class CommissionRuleResponse(CommissionRuleBase):
    """佣金档位响应"""
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CommissionResolveResponse(BaseModel):
    """佣金试算结果"""
    country: str
    value: Decimal
    percentage: Decimal
    fixed_fee: Decimal
    commission_amount: Decimal
    rule_id: Optional[int] = None
    is_default: bool = False
