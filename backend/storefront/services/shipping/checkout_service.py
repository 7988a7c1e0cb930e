# 结账页运费：读取购物车 + 店铺规则 / 区域物流报价

from __future__ import annotations
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.repository import cart_repo, shipping_repo
from storefront.services.shipping.cart import CartLine
from storefront.services.shipping.errors import ShippingNotFoundError
from storefront.services.shipping.rate_engine import RateCalculation, calculate_for_all
from storefront.services.shipping.regional_estimator import CarrierQuote, RegionalEstimator


logger = logging.getLogger(__name__)


def load_cart(db: Session, store_id: str, cart_id: str) -> List[CartLine]:
    cart = cart_repo.get_cart(db, cart_id, store_id)
    if cart is None:
        raise ShippingNotFoundError("Cart not found")
    return cart_repo.load_cart_lines(db, cart.id)


"""
Shipping options for the cart page, grouped by zone:
    [{"zone": ShippingZone, "rates": [RateCalculation, ...]}, ...]
- zone_id given -> only that zone (404 if it is not the store's)
- otherwise every active zone of the store
Address -> zone matching is not done here; the storefront asks the shopper to pick.
Zones without an eligible rate are dropped.
"""
def available_shipping_options(
    db: Session,
    store_id: str,
    cart_id: str,
    zone_id: Optional[str] = None,
) -> List[Dict[str, Any]]:
    lines = load_cart(db, store_id, cart_id)

    if zone_id:
        zone = shipping_repo.get_zone(db, zone_id, store_id)
        if zone is None:
            raise ShippingNotFoundError("Shipping zone not found")
        zones = [zone]
    else:
        zones = shipping_repo.list_active_zones(db, store_id, limit=settings.STORE_RATE_MAX_ZONES)

    options: List[Dict[str, Any]] = []
    for zone in zones:
        rates = shipping_repo.list_rates_by_zone(db, zone.id, active_only=True)
        ranked = calculate_for_all(rates, lines)
        if ranked:
            options.append({"zone": zone, "rates": ranked})

    logger.debug("shipping options: store=%s cart=%s zones=%d options=%d", store_id, cart_id, len(zones), len(options))
    return options


def cheapest_store_rate(db: Session, store_id: str, cart_id: str, zone_id: str) -> Optional[RateCalculation]:
    options = available_shipping_options(db, store_id, cart_id, zone_id=zone_id)
    return options[0]["rates"][0] if options else None


def regional_quotes_for_cart(
    db: Session,
    estimator: RegionalEstimator,
    store_id: str,
    cart_id: str,
    **options: Any,
) -> List[CarrierQuote]:
    """Persisted cart -> regional carrier quotes (origin/destination/declared value/COD in options)."""
    lines = load_cart(db, store_id, cart_id)
    return estimator.quote_all(lines, **options)
