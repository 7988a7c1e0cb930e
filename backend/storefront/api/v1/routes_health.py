# 健康检查（含 DB 探活）

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from storefront.api.v1.deps import get_db

router = APIRouter(tags=["health"])

@router.get("/health")
def health(db: Session = Depends(get_db)):
    # 轻量 DB ping（不依赖迁移）
    db.execute(text("SELECT 1"))
    return {"status": "ok"}
