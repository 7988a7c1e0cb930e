from fastapi import APIRouter, Depends
from storefront.services.auth_service import get_current_user


# 非受保护路由（店铺前台 / 结账页）
from .routes_health import router as health_router
from .shipping_quote import router as shipping_quote_router
from .shipping_regional import router as shipping_regional_router


# 需要登录的受保护路由（店铺后台）
from .shipping_admin import router as shipping_admin_router



api_v1 = APIRouter()
api_v1.include_router(health_router)              # /health 不需要登录
api_v1.include_router(shipping_quote_router)
api_v1.include_router(shipping_regional_router)

# --- 需要登录的接口 ---
protected = APIRouter(dependencies=[Depends(get_current_user)])

protected.include_router(shipping_admin_router)   # 另外按 store_id 校验店铺权限

# 把受保护路由注册进主路由
api_v1.include_router(protected)
