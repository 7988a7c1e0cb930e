# 商品目录表（只保留运费计算需要读取的字段）

from __future__ import annotations
from decimal import Decimal
from typing import Optional
from sqlalchemy import String, Boolean, Numeric, ForeignKey, Text, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column
from storefront.db.base import Base, UUIDPrimaryKey, Timestamps


class Product(UUIDPrimaryKey, Timestamps, Base):
    __tablename__ = "products"

    store_id: Mapped[str] = mapped_column(String(36), ForeignKey("stores.id", ondelete="CASCADE"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    sku: Mapped[Optional[str]] = mapped_column(String(64))
    description: Mapped[Optional[str]] = mapped_column(Text)

    price:  Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    weight: Mapped[Optional[Decimal]] = mapped_column(Numeric(8, 2))      # kg; NULL = unknown weight
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("true"))

    __table_args__ = (
        UniqueConstraint("store_id", "slug", name="uq_products_store_slug"),
    )
