# 店铺运费配置相关的 DB 操作（区域 / 规则 / 配送方式）

from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storefront.db.model.shipping import ShippingZone, ShippingRate, ShippingMethod


# writable columns per table; anything else in a payload is dropped
ZONE_FIELDS = ("name", "countries", "states", "postal_codes", "is_active")
RATE_FIELDS = (
    "name", "description", "type", "price",
    "min_weight", "max_weight", "min_price", "max_price",
    "estimated_days", "is_active",
)
METHOD_FIELDS = ("name", "carrier", "code", "tracking_url_template", "is_active")


def _pick(payload: Dict[str, Any], fields: Sequence[str]) -> Dict[str, Any]:
    return {k: v for k, v in payload.items() if k in fields}



# ---------- zones ----------
def list_zones_with_rate_counts(db: Session, store_id: str) -> List[Tuple[ShippingZone, int]]:
    """Zones of a store (newest first) with the number of rates each holds."""
    rate_count = (
        select(ShippingRate.zone_id, func.count(ShippingRate.id).label("rate_count"))
        .group_by(ShippingRate.zone_id)
        .subquery()
    )
    stmt = (
        select(ShippingZone, func.coalesce(rate_count.c.rate_count, 0))
        .outerjoin(rate_count, rate_count.c.zone_id == ShippingZone.id)
        .where(ShippingZone.store_id == store_id)
        .order_by(ShippingZone.created_at.desc(), ShippingZone.name.asc())
    )
    return [(zone, int(count)) for zone, count in db.execute(stmt).all()]


def list_active_zones(db: Session, store_id: str, limit: Optional[int] = None) -> List[ShippingZone]:
    stmt = (
        select(ShippingZone)
        .where(ShippingZone.store_id == store_id, ShippingZone.is_active.is_(True))
        .order_by(ShippingZone.name.asc())
    )
    if limit:
        stmt = stmt.limit(limit)
    return list(db.execute(stmt).scalars().all())


def get_zone(db: Session, zone_id: str, store_id: str) -> Optional[ShippingZone]:
    stmt = select(ShippingZone).where(ShippingZone.id == zone_id, ShippingZone.store_id == store_id)
    return db.execute(stmt).scalars().first()


def create_zone(db: Session, store_id: str, payload: Dict[str, Any]) -> ShippingZone:
    zone = ShippingZone(store_id=store_id, **_pick(payload, ZONE_FIELDS))
    db.add(zone)
    db.commit()
    db.refresh(zone)
    return zone


def update_zone(db: Session, zone: ShippingZone, payload: Dict[str, Any]) -> ShippingZone:
    """Only keys present in payload are written."""
    for k, v in _pick(payload, ZONE_FIELDS).items():
        setattr(zone, k, v)
    db.commit()
    db.refresh(zone)
    return zone


def delete_zone(db: Session, zone: ShippingZone) -> None:
    db.delete(zone)
    db.commit()



# ---------- rates ----------
def list_rates_by_zone(db: Session, zone_id: str, *, active_only: bool = False) -> List[ShippingRate]:
    stmt = select(ShippingRate).where(ShippingRate.zone_id == zone_id)
    if active_only:
        stmt = stmt.where(ShippingRate.is_active.is_(True))
    stmt = stmt.order_by(ShippingRate.name.asc())
    return list(db.execute(stmt).scalars().all())


def count_rates_by_zone(db: Session, zone_id: str) -> int:
    stmt = select(func.count(ShippingRate.id)).where(ShippingRate.zone_id == zone_id)
    return int(db.execute(stmt).scalar_one())


def get_rate(db: Session, rate_id: str, store_id: str) -> Optional[ShippingRate]:
    """Rate lookup scoped to the store through its zone."""
    stmt = (
        select(ShippingRate)
        .join(ShippingZone, ShippingZone.id == ShippingRate.zone_id)
        .where(ShippingRate.id == rate_id, ShippingZone.store_id == store_id)
    )
    return db.execute(stmt).scalars().first()


def create_rate(db: Session, zone_id: str, payload: Dict[str, Any]) -> ShippingRate:
    rate = ShippingRate(zone_id=zone_id, **_pick(payload, RATE_FIELDS))
    db.add(rate)
    db.commit()
    db.refresh(rate)
    return rate


def update_rate(db: Session, rate: ShippingRate, payload: Dict[str, Any]) -> ShippingRate:
    for k, v in _pick(payload, RATE_FIELDS).items():
        setattr(rate, k, v)
    db.commit()
    db.refresh(rate)
    return rate


def delete_rate(db: Session, rate: ShippingRate) -> None:
    db.delete(rate)
    db.commit()



# ---------- methods ----------
def list_methods(db: Session, store_id: str) -> List[ShippingMethod]:
    stmt = select(ShippingMethod).where(ShippingMethod.store_id == store_id).order_by(ShippingMethod.name.asc())
    return list(db.execute(stmt).scalars().all())


def get_method(db: Session, method_id: str, store_id: str) -> Optional[ShippingMethod]:
    stmt = select(ShippingMethod).where(ShippingMethod.id == method_id, ShippingMethod.store_id == store_id)
    return db.execute(stmt).scalars().first()


def create_method(db: Session, store_id: str, payload: Dict[str, Any]) -> ShippingMethod:
    method = ShippingMethod(store_id=store_id, **_pick(payload, METHOD_FIELDS))
    db.add(method)
    db.commit()
    db.refresh(method)
    return method


def update_method(db: Session, method: ShippingMethod, payload: Dict[str, Any]) -> ShippingMethod:
    for k, v in _pick(payload, METHOD_FIELDS).items():
        setattr(method, k, v)
    db.commit()
    db.refresh(method)
    return method


def delete_method(db: Session, method: ShippingMethod) -> None:
    db.delete(method)
    db.commit()
