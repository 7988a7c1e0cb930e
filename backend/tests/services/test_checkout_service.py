"""结账页运费：按区域分组的可选运费 / 最便宜规则 / 购物车区域物流报价"""

from __future__ import annotations
from decimal import Decimal

import pytest

from storefront.repository import shipping_repo
from storefront.services.shipping import checkout_service
from storefront.services.shipping.carrier_catalog import default_catalog
from storefront.services.shipping.errors import ShippingNotFoundError
from storefront.services.shipping.regional_estimator import RegionalEstimator


@pytest.fixture()
def zones(db_session, store):
    """Nacional: 三条规则；Local: 只有一条（本购物车不满足）；Inactiva: 不参与"""
    nacional = shipping_repo.create_zone(db_session, store.id, {"name": "Nacional"})
    for payload in (
        {"name": "Estándar", "type": "flat_rate", "price": Decimal("12.00")},
        {"name": "Económico", "type": "flat_rate", "price": Decimal("8.50")},
        {"name": "Prioritario", "type": "flat_rate", "price": Decimal("20.00")},
        {"name": "Pesado", "type": "weight_based", "price": Decimal("1.00"),
         "min_weight": Decimal("10"), "max_weight": Decimal("20")},
        {"name": "Apagado", "type": "free", "is_active": False},
    ):
        shipping_repo.create_rate(db_session, nacional.id, payload)

    local = shipping_repo.create_zone(db_session, store.id, {"name": "Local"})
    shipping_repo.create_rate(db_session, local.id, {
        "name": "Compra grande", "type": "price_based", "price": Decimal("0"),
        "min_price": Decimal("500"), "max_price": Decimal("1000"),
    })

    inactive = shipping_repo.create_zone(db_session, store.id, {"name": "Inactiva", "is_active": False})
    shipping_repo.create_rate(db_session, inactive.id, {"name": "Gratis", "type": "free"})
    return {"nacional": nacional, "local": local, "inactive": inactive}


def test_options_drop_zones_without_eligible_rates(db_session, store, zones, make_cart):
    cart = make_cart(store.id, [("Camisa", "50.00", "2.0", 2)])
    options = checkout_service.available_shipping_options(db_session, store.id, cart.id)

    assert [o["zone"].name for o in options] == ["Nacional"]
    ranked = options[0]["rates"]
    assert [c.name for c in ranked] == ["Económico", "Estándar", "Prioritario"]
    assert [c.calculated_cost for c in ranked] == [Decimal("8.50"), Decimal("12.00"), Decimal("20.00")]


def test_options_for_selected_zone(db_session, store, zones, make_cart):
    cart = make_cart(store.id, [("Nevera", "600.00", "15", 1)])
    options = checkout_service.available_shipping_options(db_session, store.id, cart.id, zone_id=zones["local"].id)
    assert len(options) == 1
    assert options[0]["rates"][0].calculated_cost == Decimal("0.00")


def test_cheapest_store_rate(db_session, store, zones, make_cart):
    cart = make_cart(store.id, [("Nevera", "600.00", "15", 1)])
    best = checkout_service.cheapest_store_rate(db_session, store.id, cart.id, zones["nacional"].id)
    assert best.name == "Pesado"
    assert best.calculated_cost == Decimal("1.00")

    small = make_cart(store.id, [("Llavero", "5.00", "0.1", 1)])
    assert checkout_service.cheapest_store_rate(db_session, store.id, small.id, zones["local"].id) is None


def test_unknown_cart_or_zone(db_session, store, other_store, zones, make_cart):
    with pytest.raises(ShippingNotFoundError):
        checkout_service.available_shipping_options(db_session, store.id, "missing")

    cart = make_cart(store.id, [("Camisa", "50.00", "2.0", 1)])
    with pytest.raises(ShippingNotFoundError):
        checkout_service.available_shipping_options(db_session, other_store.id, cart.id)
    with pytest.raises(ShippingNotFoundError):
        checkout_service.available_shipping_options(db_session, store.id, cart.id, zone_id="nope")


def test_regional_quotes_for_cart(db_session, store, make_cart):
    cart = make_cart(store.id, [("Camisa", "50.00", "2.0", 2)])
    quotes = checkout_service.regional_quotes_for_cart(
        db_session, RegionalEstimator(default_catalog()), store.id, cart.id,
        destination_city="MDE",
    )
    by_code = {q.service_code: q for q in quotes}
    assert by_code["SER_STANDARD"].price == 16000
