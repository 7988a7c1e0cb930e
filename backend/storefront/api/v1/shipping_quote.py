# 店铺自定义运费报价接口 -> 前端购物车 / 结账页调用

from __future__ import annotations
from decimal import Decimal
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from storefront.api.v1.deps import get_db, shipping_http_errors
from storefront.services.shipping import admin_service, checkout_service
from storefront.services.shipping.cart import CartLine, cart_subtotal, cart_weight
from storefront.services.shipping.rate_engine import (
    RateCalculation,
    calculate_for_all,
    cart_total_with_shipping,
)


router = APIRouter(tags=["shipping"])


# ---------- schemas ----------
class CartItemIn(BaseModel):
    product_id: str = ""
    unit_price: Decimal
    unit_weight: Optional[Decimal] = None      # 商品未填重量 -> None
    quantity: int = 1


class RuleIn(BaseModel):
    id: Optional[str] = None
    name: str = ""
    description: Optional[str] = None
    type: str
    price: Optional[Decimal] = None
    min_weight: Optional[Decimal] = None
    max_weight: Optional[Decimal] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    estimated_days: Optional[int] = None
    is_active: bool = True


class QuoteIn(BaseModel):
    items: List[CartItemIn] = Field(default_factory=list)
    rates: List[RuleIn] = Field(default_factory=list)


class RateCalculationOut(BaseModel):
    rate_id: str
    name: str
    description: Optional[str] = None
    type: str
    price: str
    estimated_days: Optional[int] = None
    is_eligible: bool
    calculated_cost: str


class QuoteOut(BaseModel):
    subtotal: str
    weight: str
    rates: List[RateCalculationOut]
    cheapest: Optional[RateCalculationOut] = None
    total_with_cheapest: str


class ZoneRef(BaseModel):
    id: str
    name: str


class ZoneOptions(BaseModel):
    zone: ZoneRef
    rates: List[RateCalculationOut]


def parse_items(items: List[CartItemIn]) -> List[CartLine]:
    """Request items -> CartLine; negative/zero quantities surface as 422 through shipping_http_errors."""
    return [CartLine.from_mapping(it.model_dump()) for it in items]


def _calc_out(calc: RateCalculation) -> RateCalculationOut:
    return RateCalculationOut(**calc.to_dict())



# ---------- routes ----------
@router.post("/shipping/quote", response_model=QuoteOut)
def quote_store_rates(payload: QuoteIn):
    """
    Price an inline cart against an inline list of store rates.
    Rules are checked like admin-created rates (422 on a bad rule);
    only eligible rates are returned, cheapest first.
    """
    with shipping_http_errors():
        lines = parse_items(payload.items)
        rules: List[Any] = [admin_service.validate_rate(r.model_dump()) for r in payload.rates]

    ranked = calculate_for_all(rules, lines)
    cheapest = ranked[0] if ranked else None
    subtotal = cart_subtotal(lines)
    total = cart_total_with_shipping(subtotal, cheapest.calculated_cost if cheapest else None)

    return QuoteOut(
        subtotal=f"{subtotal:.2f}",
        weight=f"{cart_weight(lines):.2f}",
        rates=[_calc_out(c) for c in ranked],
        cheapest=_calc_out(cheapest) if cheapest else None,
        total_with_cheapest=f"{total:.2f}",
    )


@router.get("/stores/{store_id}/carts/{cart_id}/shipping-options", response_model=List[ZoneOptions])
def cart_shipping_options(
    store_id: str,
    cart_id: str,
    zone_id: Optional[str] = Query(None, description="shopper-selected zone; all active zones when omitted"),
    db: Session = Depends(get_db),
):
    with shipping_http_errors():
        options = checkout_service.available_shipping_options(db, store_id, cart_id, zone_id=zone_id)
    return [
        ZoneOptions(
            zone=ZoneRef(id=opt["zone"].id, name=opt["zone"].name),
            rates=[_calc_out(c) for c in opt["rates"]],
        )
        for opt in options
    ]
