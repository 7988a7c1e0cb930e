# 示例数据：给店铺建好哥伦比亚三个运费区域 + 各物流商规则 + 配送方式

from __future__ import annotations
from typing import Any, Dict, List, Tuple
import logging

from sqlalchemy.orm import Session

from storefront.db.model.store import Store
from storefront.repository import shipping_repo
from storefront.services.shipping import admin_service


logger = logging.getLogger(__name__)


# (zone name, departments, rates); rate = (name, description, type, price, window, days)
# window is (min, max) weight for weight_based, (min, max) order value for price_based
SEED_ZONES: List[Tuple[str, List[str], List[Tuple[str, str, str, str, Tuple[str, str], int]]]] = [
    ("Colombia - Ciudades Principales",
     ["Cundinamarca", "Antioquia", "Valle del Cauca", "Atlántico"],
     [
         ("Envia - Terrestre", "Paquetes terrestres 1-8kg, entrega en 3 días", "weight_based", "8000", ("0", "8"), 3),
         ("Envia - Aéreo Express", "Paquetes aéreos 9-80kg, entrega en 1 día", "weight_based", "25000", ("0", "80"), 1),
         ("Envia - Con Recaudo", "Envío con recaudo contra entrega", "price_based", "12000", ("10000", "500000"), 3),
         ("Servientrega - Nacional", "Servicio estándar nacional", "weight_based", "9000", ("0", "50"), 2),
         ("Servientrega - Hoy Mismo", "Entrega el mismo día en ciudades principales", "flat_rate", "35000", ("", ""), 0),
         ("Servientrega - Contra Entrega", "Servicio contra entrega", "price_based", "15000", ("20000", "1000000"), 3),
         ("Coordinadora - Estándar", "Envío estándar nacional", "weight_based", "10000", ("0", "70"), 3),
         ("Coordinadora - Express", "Servicio express", "weight_based", "18000", ("0", "70"), 1),
         ("Interrapidisimo - Nacional", "Servicio nacional estándar", "weight_based", "8500", ("0", "50"), 2),
         ("Interrapidisimo - Súper Inter", "Servicio express nacional", "weight_based", "16000", ("0", "50"), 1),
     ]),
    ("Colombia - Ciudades Intermedias",
     ["Bolívar", "Norte de Santander", "Risaralda", "Santander", "Magdalena", "Tolima"],
     [
         ("Envia - Terrestre", "Paquetes terrestres 1-8kg", "weight_based", "9600", ("0", "8"), 4),
         ("Servientrega - Nacional", "Servicio estándar nacional", "weight_based", "10800", ("0", "50"), 3),
         ("Coordinadora - Estándar", "Envío estándar nacional", "weight_based", "12000", ("0", "70"), 4),
         ("Interrapidisimo - Nacional", "Servicio nacional estándar", "weight_based", "10200", ("0", "50"), 3),
     ]),
    ("Colombia - Otras Ciudades",
     ["Meta", "Caldas", "Cesar"],
     [
         ("Envia - Terrestre", "Paquetes terrestres 1-8kg", "weight_based", "12000", ("0", "8"), 5),
         ("Servientrega - Nacional", "Servicio estándar nacional", "weight_based", "13500", ("0", "50"), 4),
         ("Coordinadora - Estándar", "Envío estándar nacional", "weight_based", "15000", ("0", "70"), 5),
         ("Interrapidisimo - Nacional", "Servicio nacional estándar", "weight_based", "12750", ("0", "50"), 4),
     ]),
]

SEED_METHODS: List[Dict[str, Any]] = [
    {"name": "Envia", "carrier": "Envia", "code": "ENVIA",
     "tracking_url_template": "https://envia.co/tracking?guia={tracking_number}"},
    {"name": "Servientrega", "carrier": "Servientrega", "code": "SERVIENTREGA",
     "tracking_url_template": "https://servientrega.com/rastro?tracking={tracking_number}"},
    {"name": "Coordinadora", "carrier": "Coordinadora Mercantil S.A.", "code": "COORDINADORA",
     "tracking_url_template": "https://coordinadora.com/seguimiento/?guia={tracking_number}"},
    {"name": "Interrapidisimo", "carrier": "Interrapidisimo S.A.", "code": "INTERRAPIDISIMO",
     "tracking_url_template": "https://interrapidisimo.com/tracking?numero={tracking_number}"},
]


def _rate_payload(name: str, description: str, rate_type: str, price: str, window: Tuple[str, str], days: int) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "name": name, "description": description, "type": rate_type,
        "price": price, "estimated_days": days, "is_active": True,
    }
    low, high = window
    if rate_type == "weight_based":
        payload.update(min_weight=low, max_weight=high)
    elif rate_type == "price_based":
        payload.update(min_price=low, max_price=high)
    return payload


def seed_colombian_shipping(db: Session, store: Store) -> Dict[str, int]:
    """
    Create the three Colombian zones, their rates and the four carrier methods for one store.
    A store that already has zones is left untouched; returns how many rows were created.
    """
    if shipping_repo.list_active_zones(db, store.id, limit=1):
        logger.info("store %s already has shipping zones; skipping seed", store.slug)
        return {"zones": 0, "rates": 0, "methods": 0}

    created = {"zones": 0, "rates": 0, "methods": 0}
    for zone_name, departments, rates in SEED_ZONES:
        zone = admin_service.create_zone(db, store.id, {
            "name": zone_name, "countries": ["CO"], "states": departments, "is_active": True,
        })
        created["zones"] += 1
        for row in rates:
            admin_service.create_rate(db, zone.id, store.id, _rate_payload(*row))
            created["rates"] += 1

    for method in SEED_METHODS:
        admin_service.create_method(db, store.id, {**method, "is_active": True})
        created["methods"] += 1

    logger.info("seeded Colombian shipping for store %s: %s", store.slug, created)
    return created
