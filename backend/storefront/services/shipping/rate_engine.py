# 店铺自定义运费规则计算（free / flat_rate / weight_based / price_based）

from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence
import logging

from storefront.services.shipping.cart import CartLine, cart_subtotal, cart_weight


logger = logging.getLogger(__name__)


# --------- 常量与工具 ----------
RATE_FREE = "free"
RATE_FLAT = "flat_rate"
RATE_WEIGHT = "weight_based"
RATE_PRICE = "price_based"

_ZERO = Decimal("0")
_Q_CENTS = Decimal("0.01")


def _d(val: Any, *, field: str = "", rate_id: Any = None) -> Optional[Decimal]:
    """Lenient parse for stored values: blank/malformed -> None (logged)."""
    if val is None:
        return None
    if isinstance(val, Decimal):
        return val if val.is_finite() else None
    text = str(val).strip()
    if not text:
        return None
    try:
        d = Decimal(text)
    except (InvalidOperation, ValueError):
        logger.warning("shipping rate %s has malformed %s=%r; ignoring", rate_id, field, val)
        return None
    return d if d.is_finite() else None


def _days(val: Any, *, rate_id: Any = None) -> Optional[int]:
    if val is None or (isinstance(val, str) and not val.strip()):
        return None
    try:
        return int(val)
    except (TypeError, ValueError):
        logger.warning("shipping rate %s has malformed estimated_days=%r; ignoring", rate_id, val)
        return None


def _cents(val: Decimal) -> Decimal:
    return val.quantize(_Q_CENTS, rounding=ROUND_HALF_UP)


def _get(obj: Any, *keys: str) -> Any:
    """Read the first present key from a mapping or attribute object (ORM row / SimpleNamespace)."""
    for k in keys:
        if isinstance(obj, Mapping):
            if k in obj:
                return obj[k]
        elif hasattr(obj, k):
            return getattr(obj, k)
    return None



# --------- 输入 / 输出模型 ----------
@dataclass(frozen=True)
class RateRule:
    """
    One store-configured rate, parsed once. Missing price/bounds stay None;
    evaluation treats them as price 0.00, min 0 and max +inf respectively.
    """
    rate_id: str
    name: str
    type: str
    price: Optional[Decimal] = None
    min_weight: Optional[Decimal] = None
    max_weight: Optional[Decimal] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    description: Optional[str] = None
    estimated_days: Optional[int] = None
    is_active: bool = True

    @classmethod
    def from_record(cls, rec: Any) -> "RateRule":
        if isinstance(rec, RateRule):
            return rec
        rate_id = _get(rec, "id", "rate_id", "rateId")

        def dec(*keys: str) -> Optional[Decimal]:
            return _d(_get(rec, *keys), field=keys[0], rate_id=rate_id)

        active = _get(rec, "is_active", "isActive")
        return cls(
            rate_id=str(rate_id) if rate_id is not None else "",
            name=_get(rec, "name") or "",
            type=str(_get(rec, "type") or ""),
            price=dec("price"),
            min_weight=dec("min_weight", "minWeight"),
            max_weight=dec("max_weight", "maxWeight"),
            min_price=dec("min_price", "minPrice"),
            max_price=dec("max_price", "maxPrice"),
            description=_get(rec, "description"),
            estimated_days=_days(_get(rec, "estimated_days", "estimatedDays"), rate_id=rate_id),
            is_active=True if active is None else bool(active),
        )

    @property
    def price_or_zero(self) -> Decimal:
        return self.price if self.price is not None else _ZERO


@dataclass(frozen=True)
class RateCalculation:
    rate_id: str
    name: str
    description: Optional[str]
    type: str
    price: Decimal               # configured price (0.00 when unset)
    estimated_days: Optional[int]
    is_eligible: bool
    calculated_cost: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rate_id": self.rate_id,
            "name": self.name,
            "description": self.description,
            "type": self.type,
            "price": f"{self.price:.2f}",
            "estimated_days": self.estimated_days,
            "is_eligible": self.is_eligible,
            "calculated_cost": f"{self.calculated_cost:.2f}",
        }



# --------- 逐条规则计算 ----------
def _within(value: Decimal, low: Optional[Decimal], high: Optional[Decimal]) -> bool:
    """Inclusive window; missing low = 0, missing high = +inf."""
    lo = low if low is not None else _ZERO
    if value < lo:
        return False
    return high is None or value <= high


def evaluate_rate(
    rate: Any,
    lines: Sequence[CartLine],
    *,
    subtotal: Optional[Decimal] = None,
    weight: Optional[Decimal] = None,
) -> RateCalculation:
    """
    free         -> eligible, cost 0
    flat_rate    -> eligible, cost = price
    weight_based -> eligible iff cart weight in [min_weight, max_weight]; cost = price (not weight-scaled)
    price_based  -> eligible iff cart subtotal in [min_price, max_price]; cost = price
    other        -> not eligible
    Products without a weight count as 0 here.
    """
    rule = RateRule.from_record(rate)
    if subtotal is None:
        subtotal = cart_subtotal(lines)
    if weight is None:
        weight = cart_weight(lines, _ZERO)

    eligible = True
    cost = _ZERO

    if rule.type == RATE_FREE:
        cost = _ZERO
    elif rule.type == RATE_FLAT:
        cost = rule.price_or_zero
    elif rule.type == RATE_WEIGHT:
        eligible = _within(weight, rule.min_weight, rule.max_weight)
        if eligible:
            cost = rule.price_or_zero
    elif rule.type == RATE_PRICE:
        eligible = _within(subtotal, rule.min_price, rule.max_price)
        if eligible:
            cost = rule.price_or_zero
    else:
        eligible = False

    if eligible and rule.type != RATE_FREE and rule.price is None:
        logger.warning("shipping rate %s (%s) has no price; quoting 0.00", rule.rate_id, rule.type)

    return RateCalculation(
        rate_id=rule.rate_id,
        name=rule.name,
        description=rule.description,
        type=rule.type,
        price=_cents(rule.price_or_zero),
        estimated_days=rule.estimated_days,
        is_eligible=eligible,
        calculated_cost=_cents(cost),
    )



# --------- 聚合 ----------
def calculate_for_all(rates: Iterable[Any], lines: Sequence[CartLine]) -> List[RateCalculation]:
    """Evaluate every active rate, keep the eligible ones, cheapest first (ties keep input order)."""
    subtotal = cart_subtotal(lines)
    weight = cart_weight(lines, _ZERO)
    rules = [RateRule.from_record(r) for r in rates]
    results = [evaluate_rate(r, lines, subtotal=subtotal, weight=weight) for r in rules if r.is_active]
    eligible = [c for c in results if c.is_eligible]
    eligible.sort(key=lambda c: c.calculated_cost)
    return eligible


def find_cheapest(rates: Iterable[Any], lines: Sequence[CartLine]) -> Optional[RateCalculation]:
    ranked = calculate_for_all(rates, lines)
    return ranked[0] if ranked else None


def cart_total_with_shipping(subtotal: Decimal, shipping_cost: Optional[Any]) -> Decimal:
    """Cart subtotal plus the selected shipping cost (no selection = free)."""
    shipping = _d(shipping_cost, field="shipping_cost") if shipping_cost is not None else None
    return _cents(Decimal(subtotal) + (shipping or _ZERO))
