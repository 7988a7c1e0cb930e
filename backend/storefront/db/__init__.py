# 导出入口，给脚本/测试建表用

from typing import Optional

from sqlalchemy.engine import Engine

from .session import engine, SessionLocal, get_db, session_scope
from storefront.db.model import *  # 确保把所有模型加载进 Base.metadata
from .base import Base


"""
    Create every table on an empty database (tests use an in-memory sqlite engine):
        python -c "from storefront.db import create_all; create_all()"
    Real databases go through `alembic upgrade head`.
"""
def create_all(bind: Optional[Engine] = None) -> None:
    Base.metadata.create_all(bind=bind or engine)


def drop_all(bind: Optional[Engine] = None) -> None:
    Base.metadata.drop_all(bind=bind or engine)
