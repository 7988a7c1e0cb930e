# 店铺表（多租户：所有目录/购物车/运费配置都挂在 store 下）

from __future__ import annotations
from typing import Optional
from sqlalchemy import String, Boolean, Integer, text
from sqlalchemy.orm import Mapped, mapped_column
from storefront.db.base import Base, UUIDPrimaryKey, Timestamps


class Store(UUIDPrimaryKey, Timestamps, Base):
    __tablename__ = "stores"

    slug: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)   # used in storefront URLs /stores/{slug}
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    owner_id: Mapped[Optional[int]] = mapped_column(Integer, index=True)         # user that created the store
    currency: Mapped[str] = mapped_column(String(3), nullable=False, server_default=text("'COP'"))
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("true"))
