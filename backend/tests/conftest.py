# 测试公共夹具：内存 SQLite + 假登录用户 + 数据构造工具

from __future__ import annotations
import os

# settings 在 import 时读取环境变量，必须在导入 storefront 之前设置
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")

from decimal import Decimal
from typing import Any, Callable, Iterator, List, Optional, Tuple

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.db import create_all, drop_all
from storefront.db.model import Cart, CartItem, Product, Store


@pytest.fixture()
def db_session() -> Iterator[Session]:
    """每个测试一个全新的内存库；StaticPool 让 TestClient 的线程看到同一个连接。"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_all(engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        drop_all(engine)
        engine.dispose()


@pytest.fixture()
def store(db_session: Session) -> Store:
    row = Store(slug="tienda-demo", name="Tienda Demo", owner_id=1)
    db_session.add(row)
    db_session.commit()
    return row


@pytest.fixture()
def other_store(db_session: Session) -> Store:
    row = Store(slug="otra-tienda", name="Otra Tienda", owner_id=2)
    db_session.add(row)
    db_session.commit()
    return row


CartSpec = List[Tuple[str, Any, Optional[Any], int]]


@pytest.fixture()
def make_cart(db_session: Session) -> Callable[[str, CartSpec], Cart]:
    """
    make_cart(store_id, [(name, price, weight, quantity), ...])
    每个 item 建一个商品，再把它放进同一个购物车。
    """
    def _make(store_id: str, items: CartSpec) -> Cart:
        cart = Cart(store_id=store_id, session_id="sess-1")
        db_session.add(cart)
        db_session.flush()
        for idx, (name, price, weight, qty) in enumerate(items):
            product = Product(
                store_id=store_id,
                name=name,
                slug=f"{name.lower().replace(' ', '-')}-{idx}",
                price=Decimal(str(price)),
                weight=Decimal(str(weight)) if weight is not None else None,
            )
            db_session.add(product)
            db_session.flush()
            db_session.add(CartItem(cart_id=cart.id, product_id=product.id, quantity=qty))
            db_session.flush()
        db_session.commit()
        return cart

    return _make
