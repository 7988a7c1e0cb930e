# 购物车读取：为运费计算组装 CartLine 快照

from __future__ import annotations
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.db.model.cart import Cart, CartItem
from storefront.db.model.catalog import Product
from storefront.services.shipping.cart import CartLine


def get_cart(db: Session, cart_id: str, store_id: str) -> Optional[Cart]:
    stmt = select(Cart).where(Cart.id == cart_id, Cart.store_id == store_id)
    return db.execute(stmt).scalars().first()


def load_cart_lines(db: Session, cart_id: str) -> List[CartLine]:
    """
    Join cart_items with products and return the pricing snapshot
    (unit price / unit weight / quantity), in insertion order.
    """
    stmt = (
        select(CartItem.product_id, CartItem.quantity, Product.price, Product.weight)
        .join(Product, Product.id == CartItem.product_id)
        .where(CartItem.cart_id == cart_id)
        .order_by(CartItem.created_at.asc(), CartItem.id.asc())
    )
    return [
        CartLine.parse(product_id, price, weight, quantity)
        for product_id, quantity, price, weight in db.execute(stmt).all()
    ]
