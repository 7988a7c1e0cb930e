# 购物车 + 购物车明细

from __future__ import annotations
from typing import List, Optional
from sqlalchemy import String, Integer, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from storefront.db.base import Base, UUIDPrimaryKey, Timestamps


class Cart(UUIDPrimaryKey, Timestamps, Base):
    __tablename__ = "carts"

    store_id: Mapped[str] = mapped_column(String(36), ForeignKey("stores.id", ondelete="CASCADE"), index=True, nullable=False)
    user_id: Mapped[Optional[int]] = mapped_column(Integer, index=True)        # NULL for guest carts
    session_id: Mapped[Optional[str]] = mapped_column(String(255), index=True) # cookie session for guests

    items: Mapped[List["CartItem"]] = relationship(back_populates="cart", cascade="all, delete-orphan")


class CartItem(UUIDPrimaryKey, Timestamps, Base):
    __tablename__ = "cart_items"

    cart_id: Mapped[str] = mapped_column(String(36), ForeignKey("carts.id", ondelete="CASCADE"), index=True, nullable=False)
    product_id: Mapped[str] = mapped_column(String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    cart: Mapped[Cart] = relationship(back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="quantity_positive"),
    )
