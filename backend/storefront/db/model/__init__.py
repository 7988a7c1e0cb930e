# 聚合导入所有模型，供 Alembic 发现

from .store import Store
from .catalog import Product
from .cart import Cart, CartItem

from .shipping import (
    ShippingZone,
    ShippingRate,
    ShippingMethod,
    RATE_TYPES,
)

__all__ = [
    # tenant / catalog
    "Store", "Product",
    # cart
    "Cart", "CartItem",
    # shipping
    "ShippingZone", "ShippingRate", "ShippingMethod", "RATE_TYPES",
]
