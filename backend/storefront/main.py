from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from storefront.core.config import settings
from storefront.core.logging import configure_logging
from storefront.api.v1 import api_v1

configure_logging()

app = FastAPI(title=settings.PROJECT_NAME)

# 从环境读取前端白名单（逗号分隔）。本地可配：
# BACKEND_CORS_ORIGINS=http://localhost:3000,https://shop.local.test:3000
origins = [o.strip() for o in settings.BACKEND_CORS_ORIGINS.split(",") if o.strip()]


app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,     # 配成明确白名单（本地 http://localhost:3000，线上是店铺前台域名）
    allow_credentials=True,    # Access-Control-Allow-Credentials: true
    allow_methods=["GET","POST","PUT","PATCH","DELETE","OPTIONS"],
    allow_headers=["*"],
    )


# Origin 校验（仅对后台改数据方法）。前台报价接口是公开的 POST，不做校验
TRUSTED = set(origins)
ADMIN_PATH_MARKERS = "/shipping/zones", "/shipping/rates", "/shipping/methods"

@app.middleware("http")
async def origin_check(request: Request, call_next):
    p = request.url.path

    if request.method in {"POST", "PUT", "PATCH", "DELETE"} and any(m in p for m in ADMIN_PATH_MARKERS):
        origin = request.headers.get("origin")
        # 没有 Origin（如 curl/健康检查）则放行；有 Origin 但不在白名单里，才拒绝
        if origin and origin not in TRUSTED:
            return JSONResponse(status_code=403, content={"detail": "Bad Origin"})

    return await call_next(request)


app.include_router(api_v1, prefix=settings.API_PREFIX)

# 根路径健康探活（方便测试或 Docker 健康检查）
@app.get("/")
def root():
    return {
        "app": settings.PROJECT_NAME,
        "env": settings.ENVIRONMENT,
        "ok": True
    }
