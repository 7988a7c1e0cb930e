# 区域物流（哥伦比亚）报价接口 -> 结账页「物流公司」选项

from __future__ import annotations
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from storefront.api.v1.deps import get_db, get_regional_estimator, shipping_http_errors
from storefront.api.v1.shipping_quote import CartItemIn, parse_items
from storefront.services.shipping import checkout_service
from storefront.services.shipping.regional_estimator import CarrierQuote, RegionalEstimator


router = APIRouter(tags=["shipping-regional"])


# ---------- schemas ----------
class RegionalQuoteIn(BaseModel):
    items: List[CartItemIn] = Field(default_factory=list)
    origin_city: Optional[str] = None           # 缺省 -> settings.REGIONAL_DEFAULT_ORIGIN
    destination_city: Optional[str] = None      # 缺省 -> settings.REGIONAL_DEFAULT_DESTINATION
    declared_value: Optional[Decimal] = None    # 缺省 / 0 -> 购物车小计
    cash_on_delivery: bool = False
    carrier: Optional[str] = None               # 只看某一家物流
    express_only: bool = False


class CarrierQuoteOut(BaseModel):
    id: str
    carrier_code: str
    company: str
    service_name: str
    service_code: str
    description: str
    price: int
    price_formatted: str
    estimated_days: int
    has_recaudo: bool
    tracking_url: str
    restrictions: List[str]


class CityOut(BaseModel):
    code: str
    name: str
    department: str
    zone: str


class RegionalZoneOut(BaseModel):
    code: str
    name: str
    description: str
    base_rate: str
    cities: List[str]


def _quote_out(q: CarrierQuote) -> CarrierQuoteOut:
    return CarrierQuoteOut(**q.to_dict())


def _options(payload: RegionalQuoteIn) -> dict:
    return dict(
        origin_city=payload.origin_city,
        destination_city=payload.destination_city,
        declared_value=payload.declared_value,
        cash_on_delivery=payload.cash_on_delivery,
    )



# ---------- routes ----------
@router.post("/shipping/regional/quotes", response_model=List[CarrierQuoteOut])
def regional_quotes(
    payload: RegionalQuoteIn,
    estimator: RegionalEstimator = Depends(get_regional_estimator),
):
    """All quotable carrier services, cheapest first; `carrier` and `express_only` narrow the list."""
    with shipping_http_errors():
        lines = parse_items(payload.items)
        if payload.carrier:
            quotes = estimator.for_carrier(payload.carrier, lines, **_options(payload))
        else:
            quotes = estimator.quote_all(lines, **_options(payload))
    if payload.express_only:
        quotes = [q for q in quotes if q.is_express]
    return [_quote_out(q) for q in quotes]


@router.post("/shipping/regional/cheapest", response_model=Optional[CarrierQuoteOut])
def regional_cheapest(
    payload: RegionalQuoteIn,
    estimator: RegionalEstimator = Depends(get_regional_estimator),
):
    with shipping_http_errors():
        lines = parse_items(payload.items)
        quote = estimator.cheapest(lines, **_options(payload))
    return _quote_out(quote) if quote else None


@router.get("/shipping/regional/cities", response_model=List[CityOut])
def regional_cities(estimator: RegionalEstimator = Depends(get_regional_estimator)):
    cat = estimator.catalog
    return [
        CityOut(code=c.code, name=c.name, department=c.department, zone=cat.zone_for_city(c.code).code)
        for c in cat.cities
    ]


@router.get("/shipping/regional/zones", response_model=List[RegionalZoneOut])
def regional_zones(estimator: RegionalEstimator = Depends(get_regional_estimator)):
    return [
        RegionalZoneOut(
            code=z.code,
            name=z.name,
            description=z.description,
            base_rate=f"{z.base_rate:.2f}",
            cities=list(z.cities),
        )
        for z in estimator.catalog.zones
    ]


@router.get("/stores/{store_id}/carts/{cart_id}/regional-quotes", response_model=List[CarrierQuoteOut])
def cart_regional_quotes(
    store_id: str,
    cart_id: str,
    origin_city: Optional[str] = Query(None),
    destination_city: Optional[str] = Query(None),
    declared_value: Optional[Decimal] = Query(None),
    cash_on_delivery: bool = Query(False),
    db: Session = Depends(get_db),
    estimator: RegionalEstimator = Depends(get_regional_estimator),
):
    """Same as /shipping/regional/quotes but priced from a persisted cart."""
    with shipping_http_errors():
        quotes = checkout_service.regional_quotes_for_cart(
            db, estimator, store_id, cart_id,
            origin_city=origin_city,
            destination_city=destination_city,
            declared_value=declared_value,
            cash_on_delivery=cash_on_delivery,
        )
    return [_quote_out(q) for q in quotes]
