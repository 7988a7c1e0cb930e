# 店铺后台运费配置接口 -> 前端 admin/shipping 页面调用

from __future__ import annotations
from decimal import Decimal
from typing import Any, List, Literal, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from storefront.api.v1.deps import get_db, shipping_http_errors
from storefront.services.auth_service import require_store_admin
from storefront.services.shipping import admin_service


router = APIRouter(
    prefix="/stores/{store_id}/shipping",
    tags=["shipping-admin"],
    dependencies=[Depends(require_store_admin)],
)


RateType = Literal["free", "flat_rate", "weight_based", "price_based"]


# ---------- schemas ----------
class ZoneIn(BaseModel):
    name: str = Field(..., min_length=1)
    countries: Optional[List[str]] = None
    states: Optional[List[str]] = None
    postal_codes: Optional[List[str]] = None
    is_active: bool = True


class ZonePatch(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    countries: Optional[List[str]] = None
    states: Optional[List[str]] = None
    postal_codes: Optional[List[str]] = None
    is_active: Optional[bool] = None


class ZoneOut(BaseModel):
    id: str
    store_id: str
    name: str
    countries: Optional[List[str]] = None
    states: Optional[List[str]] = None
    postal_codes: Optional[List[str]] = None
    is_active: bool
    rate_count: Optional[int] = None


class RateIn(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    type: RateType
    # decimals accepted as strings ("12.50") or numbers
    price: Optional[Decimal] = None
    min_weight: Optional[Decimal] = None
    max_weight: Optional[Decimal] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    estimated_days: Optional[int] = Field(None, ge=0)
    is_active: bool = True


class RatePatch(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    type: Optional[RateType] = None
    price: Optional[Decimal] = None
    min_weight: Optional[Decimal] = None
    max_weight: Optional[Decimal] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    estimated_days: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class RateOut(BaseModel):
    id: str
    zone_id: str
    name: str
    description: Optional[str] = None
    type: str
    price: Optional[str] = None
    min_weight: Optional[str] = None
    max_weight: Optional[str] = None
    min_price: Optional[str] = None
    max_price: Optional[str] = None
    estimated_days: Optional[int] = None
    is_active: bool


class ZoneWithRates(BaseModel):
    zone: ZoneOut
    rates: List[RateOut]


class MethodIn(BaseModel):
    name: str = Field(..., min_length=1)
    carrier: Optional[str] = None
    code: Optional[str] = None
    tracking_url_template: Optional[str] = None
    is_active: bool = True


class MethodPatch(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    carrier: Optional[str] = None
    code: Optional[str] = None
    tracking_url_template: Optional[str] = None
    is_active: Optional[bool] = None


class MethodOut(BaseModel):
    id: str
    store_id: str
    name: str
    carrier: Optional[str] = None
    code: Optional[str] = None
    tracking_url_template: Optional[str] = None
    is_active: bool



# ---------- serializers ----------
def _money(val: Optional[Decimal]) -> Optional[str]:
    return None if val is None else f"{Decimal(val):.2f}"


def _zone_out(zone: Any, rate_count: Optional[int] = None) -> ZoneOut:
    return ZoneOut(
        id=zone.id,
        store_id=zone.store_id,
        name=zone.name,
        countries=zone.countries,
        states=zone.states,
        postal_codes=zone.postal_codes,
        is_active=zone.is_active,
        rate_count=rate_count,
    )


def _rate_out(rate: Any) -> RateOut:
    return RateOut(
        id=rate.id,
        zone_id=rate.zone_id,
        name=rate.name,
        description=rate.description,
        type=rate.type,
        price=_money(rate.price),
        min_weight=_money(rate.min_weight),
        max_weight=_money(rate.max_weight),
        min_price=_money(rate.min_price),
        max_price=_money(rate.max_price),
        estimated_days=rate.estimated_days,
        is_active=rate.is_active,
    )


def _method_out(method: Any) -> MethodOut:
    return MethodOut(
        id=method.id,
        store_id=method.store_id,
        name=method.name,
        carrier=method.carrier,
        code=method.code,
        tracking_url_template=method.tracking_url_template,
        is_active=method.is_active,
    )



# ---------- zones ----------
@router.get("/zones", response_model=List[ZoneOut])
def list_zones(store_id: str, db: Session = Depends(get_db)):
    return [_zone_out(row["zone"], row["rate_count"]) for row in admin_service.list_zones(db, store_id)]


@router.post("/zones", response_model=ZoneOut, status_code=status.HTTP_201_CREATED)
def create_zone(store_id: str, payload: ZoneIn, db: Session = Depends(get_db)):
    with shipping_http_errors():
        zone = admin_service.create_zone(db, store_id, payload.model_dump())
    return _zone_out(zone, 0)


@router.get("/zones/{zone_id}", response_model=ZoneWithRates)
def get_zone(store_id: str, zone_id: str, db: Session = Depends(get_db)):
    with shipping_http_errors():
        data = admin_service.get_zone_with_rates(db, zone_id, store_id)
    rates = data["rates"]
    return ZoneWithRates(zone=_zone_out(data["zone"], len(rates)), rates=[_rate_out(r) for r in rates])


@router.patch("/zones/{zone_id}", response_model=ZoneOut)
def update_zone(store_id: str, zone_id: str, payload: ZonePatch, db: Session = Depends(get_db)):
    with shipping_http_errors():
        zone = admin_service.update_zone(db, zone_id, store_id, payload.model_dump(exclude_unset=True))
    return _zone_out(zone)


@router.delete("/zones/{zone_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_zone(store_id: str, zone_id: str, db: Session = Depends(get_db)):
    with shipping_http_errors():
        admin_service.delete_zone(db, zone_id, store_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)



# ---------- rates ----------
@router.post("/zones/{zone_id}/rates", response_model=RateOut, status_code=status.HTTP_201_CREATED)
def create_rate(store_id: str, zone_id: str, payload: RateIn, db: Session = Depends(get_db)):
    with shipping_http_errors():
        rate = admin_service.create_rate(db, zone_id, store_id, payload.model_dump())
    return _rate_out(rate)


@router.patch("/rates/{rate_id}", response_model=RateOut)
def update_rate(store_id: str, rate_id: str, payload: RatePatch, db: Session = Depends(get_db)):
    # exclude_unset: an explicit null clears a field, an omitted one is kept
    with shipping_http_errors():
        rate = admin_service.update_rate(db, rate_id, store_id, payload.model_dump(exclude_unset=True))
    return _rate_out(rate)


@router.delete("/rates/{rate_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_rate(store_id: str, rate_id: str, db: Session = Depends(get_db)):
    with shipping_http_errors():
        admin_service.delete_rate(db, rate_id, store_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)



# ---------- methods ----------
@router.get("/methods", response_model=List[MethodOut])
def list_methods(store_id: str, db: Session = Depends(get_db)):
    return [_method_out(m) for m in admin_service.list_methods(db, store_id)]


@router.post("/methods", response_model=MethodOut, status_code=status.HTTP_201_CREATED)
def create_method(store_id: str, payload: MethodIn, db: Session = Depends(get_db)):
    with shipping_http_errors():
        method = admin_service.create_method(db, store_id, payload.model_dump())
    return _method_out(method)


@router.patch("/methods/{method_id}", response_model=MethodOut)
def update_method(store_id: str, method_id: str, payload: MethodPatch, db: Session = Depends(get_db)):
    with shipping_http_errors():
        method = admin_service.update_method(db, method_id, store_id, payload.model_dump(exclude_unset=True))
    return _method_out(method)


@router.delete("/methods/{method_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_method(store_id: str, method_id: str, db: Session = Depends(get_db)):
    with shipping_http_errors():
        admin_service.delete_method(db, method_id, store_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
