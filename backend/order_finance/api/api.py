"""API 路由聚合（无认证）"""
from fastapi import APIRouter

from order_finance.api.endpoints import (
    customers, orders, commission_rules, shipping_rates, settings, reports
)

api_router = APIRouter()

api_router.include_router(customers.router, prefix="/customers", tags=["客户管理"])
api_router.include_router(orders.router, prefix="/orders", tags=["订单管理"])
api_router.include_router(commission_rules.router, prefix="/commission-rules", tags=["佣金档位"])
api_router.include_router(shipping_rates.router, prefix="/shipping-rates", tags=["运费费率"])
api_router.include_router(settings.router, prefix="/settings", tags=["系统设置"])
api_router.include_router(reports.router, prefix="/reports", tags=["报表"])
