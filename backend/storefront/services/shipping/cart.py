# 购物车快照：运费计算的统一输入

from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, Optional

from storefront.services.shipping.errors import InvalidCartError


# 超出范围的金额/数量在 quantize 时会溢出，入口处直接拒绝
MAX_AMOUNT = Decimal("1000000000000")
MAX_QUANTITY = 100000


def parse_decimal(value: Any, field: str) -> Decimal:
    """Parse a decimal string/number; reject non-numeric, NaN/inf, negative and out-of-range values."""
    if isinstance(value, bool):
        raise InvalidCartError(f"{field} must be a decimal, got {value!r}")
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidCartError(f"{field} must be a decimal, got {value!r}") from None
    if not d.is_finite():
        raise InvalidCartError(f"{field} must be finite, got {value!r}")
    if d < 0:
        raise InvalidCartError(f"{field} must be non-negative, got {value!r}")
    if d >= MAX_AMOUNT:
        raise InvalidCartError(f"{field} must be less than {MAX_AMOUNT}, got {value!r}")
    return d


@dataclass(frozen=True)
class CartLine:
    product_id: str
    unit_price: Decimal
    unit_weight: Optional[Decimal]   # None = product has no declared weight
    quantity: int

    @classmethod
    def parse(
        cls,
        product_id: Any,
        unit_price: Any,
        unit_weight: Any = None,
        quantity: Any = 1,
    ) -> "CartLine":
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            try:
                quantity = int(str(quantity))
            except ValueError:
                raise InvalidCartError(f"quantity must be an integer, got {quantity!r}") from None
        if quantity < 1:
            raise InvalidCartError(f"quantity must be >= 1, got {quantity}")
        if quantity > MAX_QUANTITY:
            raise InvalidCartError(f"quantity must be <= {MAX_QUANTITY}, got {quantity}")

        weight = None
        if unit_weight is not None and str(unit_weight).strip() != "":
            weight = parse_decimal(unit_weight, "unit_weight")

        return cls(
            product_id=str(product_id),
            unit_price=parse_decimal(unit_price, "unit_price"),
            unit_weight=weight,
            quantity=quantity,
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CartLine":
        """Accept both snake_case and the storefront's camelCase keys."""
        def pick(*keys: str, default: Any = None) -> Any:
            for k in keys:
                if k in data and data[k] is not None:
                    return data[k]
            return default

        return cls.parse(
            product_id=pick("product_id", "productId", default=""),
            unit_price=pick("unit_price", "unitPrice", "price"),
            unit_weight=pick("unit_weight", "unitWeight", "weight"),
            quantity=pick("quantity", default=1),
        )

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity

    def weight_with_default(self, default_weight: Decimal) -> Decimal:
        w = self.unit_weight if self.unit_weight is not None else default_weight
        return w * self.quantity


def cart_subtotal(lines: Iterable[CartLine]) -> Decimal:
    return sum((line.subtotal for line in lines), Decimal("0"))


def cart_weight(lines: Iterable[CartLine], default_weight: Decimal = Decimal("0")) -> Decimal:
    """
    Total cart weight; lines without a declared weight count as `default_weight` per unit.
    The store rate engine uses 0, the regional estimator a non-zero fallback.
    """
    return sum((line.weight_with_default(default_weight) for line in lines), Decimal("0"))
