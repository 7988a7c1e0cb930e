# 店铺后台：运费区域 / 规则 / 配送方式的业务校验与编排

from __future__ import annotations
from typing import Any, Dict, List
import logging

from sqlalchemy.orm import Session

from storefront.db.model.shipping import RATE_TYPES, ShippingMethod, ShippingRate, ShippingZone
from storefront.repository import shipping_repo
from storefront.services.shipping.cart import parse_decimal
from storefront.services.shipping.errors import (
    InvalidCartError,
    RateValidationError,
    ShippingConflictError,
    ShippingNotFoundError,
    ShippingValidationError,
)
from storefront.services.shipping.rate_engine import RATE_FLAT, RATE_PRICE, RATE_WEIGHT


logger = logging.getLogger(__name__)

_DECIMAL_FIELDS = ("price", "min_weight", "max_weight", "min_price", "max_price")

# fields each rate type must carry
_REQUIRED: Dict[str, tuple] = {
    RATE_FLAT: ("price",),
    RATE_WEIGHT: ("min_weight", "max_weight", "price"),
    RATE_PRICE: ("min_price", "max_price", "price"),
}
_REQUIRED_MSG = {
    RATE_FLAT: "Flat rate shipping must have a price",
    RATE_WEIGHT: "Weight-based shipping must have min/max weight and price",
    RATE_PRICE: "Price-based shipping must have min/max price and rate",
}



# ---------- rate validation ----------
def validate_rate(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Parse and check a complete rate configuration; returns a copy with decimals parsed.
    Rates are rejected here so the pricing engine never has to default a missing price.
    """
    clean = dict(data)
    rate_type = clean.get("type")
    if rate_type not in RATE_TYPES:
        raise RateValidationError(f"Unknown rate type {rate_type!r}; expected one of {', '.join(RATE_TYPES)}")
    if not (clean.get("name") or "").strip():
        raise RateValidationError("Name is required")

    for f in _DECIMAL_FIELDS:
        raw = clean.get(f)
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            clean[f] = None
            continue
        try:
            clean[f] = parse_decimal(raw, f)
        except InvalidCartError as e:
            raise RateValidationError(str(e)) from None

    missing = [f for f in _REQUIRED.get(rate_type, ()) if clean.get(f) is None]
    if missing:
        raise RateValidationError(_REQUIRED_MSG[rate_type])

    for low, high in (("min_weight", "max_weight"), ("min_price", "max_price")):
        lo, hi = clean.get(low), clean.get(high)
        if lo is not None and hi is not None and lo > hi:
            raise RateValidationError(f"{low} must be <= {high}")

    days = clean.get("estimated_days")
    if days is not None and int(days) < 0:
        raise RateValidationError("estimated_days must be >= 0")
    return clean


def _rate_as_dict(rate: ShippingRate) -> Dict[str, Any]:
    return {f: getattr(rate, f) for f in shipping_repo.RATE_FIELDS}



# ---------- zones ----------
def list_zones(db: Session, store_id: str) -> List[Dict[str, Any]]:
    return [
        {"zone": zone, "rate_count": count}
        for zone, count in shipping_repo.list_zones_with_rate_counts(db, store_id)
    ]


def get_zone_or_404(db: Session, zone_id: str, store_id: str) -> ShippingZone:
    zone = shipping_repo.get_zone(db, zone_id, store_id)
    if zone is None:
        raise ShippingNotFoundError("Shipping zone not found")
    return zone


def get_zone_with_rates(db: Session, zone_id: str, store_id: str) -> Dict[str, Any]:
    zone = get_zone_or_404(db, zone_id, store_id)
    return {"zone": zone, "rates": shipping_repo.list_rates_by_zone(db, zone.id)}


def create_zone(db: Session, store_id: str, payload: Dict[str, Any]) -> ShippingZone:
    if not (payload.get("name") or "").strip():
        raise ShippingValidationError("Name is required")
    zone = shipping_repo.create_zone(db, store_id, payload)
    logger.info("shipping zone created: store=%s zone=%s", store_id, zone.id)
    return zone


def update_zone(db: Session, zone_id: str, store_id: str, payload: Dict[str, Any]) -> ShippingZone:
    zone = get_zone_or_404(db, zone_id, store_id)
    if "name" in payload and not (payload.get("name") or "").strip():
        raise ShippingValidationError("Name is required")
    return shipping_repo.update_zone(db, zone, payload)


def delete_zone(db: Session, zone_id: str, store_id: str) -> None:
    zone = get_zone_or_404(db, zone_id, store_id)
    if shipping_repo.count_rates_by_zone(db, zone.id) > 0:
        raise ShippingConflictError("Cannot delete shipping zone with existing rates")
    shipping_repo.delete_zone(db, zone)
    logger.info("shipping zone deleted: store=%s zone=%s", store_id, zone_id)



# ---------- rates ----------
def create_rate(db: Session, zone_id: str, store_id: str, payload: Dict[str, Any]) -> ShippingRate:
    zone = get_zone_or_404(db, zone_id, store_id)
    clean = validate_rate(payload)
    rate = shipping_repo.create_rate(db, zone.id, clean)
    logger.info("shipping rate created: zone=%s rate=%s type=%s", zone.id, rate.id, rate.type)
    return rate


def update_rate(db: Session, rate_id: str, store_id: str, payload: Dict[str, Any]) -> ShippingRate:
    """The merged result (existing row + payload) must still be a valid rate."""
    rate = shipping_repo.get_rate(db, rate_id, store_id)
    if rate is None:
        raise ShippingNotFoundError("Shipping rate not found")
    merged = _rate_as_dict(rate)
    merged.update({k: v for k, v in payload.items() if k in shipping_repo.RATE_FIELDS})
    clean = validate_rate(merged)
    changes = {k: clean[k] for k in payload if k in clean}
    return shipping_repo.update_rate(db, rate, changes)


def delete_rate(db: Session, rate_id: str, store_id: str) -> None:
    rate = shipping_repo.get_rate(db, rate_id, store_id)
    if rate is None:
        raise ShippingNotFoundError("Shipping rate not found")
    shipping_repo.delete_rate(db, rate)



# ---------- methods ----------
def list_methods(db: Session, store_id: str) -> List[ShippingMethod]:
    return shipping_repo.list_methods(db, store_id)


def create_method(db: Session, store_id: str, payload: Dict[str, Any]) -> ShippingMethod:
    if not (payload.get("name") or "").strip():
        raise ShippingValidationError("Name is required")
    return shipping_repo.create_method(db, store_id, payload)


def update_method(db: Session, method_id: str, store_id: str, payload: Dict[str, Any]) -> ShippingMethod:
    method = shipping_repo.get_method(db, method_id, store_id)
    if method is None:
        raise ShippingNotFoundError("Shipping method not found")
    return shipping_repo.update_method(db, method, payload)


def delete_method(db: Session, method_id: str, store_id: str) -> None:
    method = shipping_repo.get_method(db, method_id, store_id)
    if method is None:
        raise ShippingNotFoundError("Shipping method not found")
    shipping_repo.delete_method(db, method)
