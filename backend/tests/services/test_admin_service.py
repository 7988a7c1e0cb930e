"""店铺后台运费配置：规则校验 / 区域删除冲突 / 店铺隔离"""

from __future__ import annotations
from decimal import Decimal

import pytest

from storefront.services.shipping import admin_service
from storefront.services.shipping.errors import (
    RateValidationError,
    ShippingConflictError,
    ShippingNotFoundError,
    ShippingValidationError,
)


# ---------- validate_rate ----------
@pytest.mark.parametrize(
    "payload,message",
    [
        ({"name": "Plano", "type": "flat_rate"}, "Flat rate shipping must have a price"),
        ({"name": "Peso", "type": "weight_based", "price": "5", "min_weight": "0"},
         "Weight-based shipping must have min/max weight and price"),
        ({"name": "Valor", "type": "price_based", "min_price": "0", "max_price": "10"},
         "Price-based shipping must have min/max price and rate"),
    ],
)
def test_validate_rate_requires_fields_per_type(payload, message):
    with pytest.raises(RateValidationError) as exc:
        admin_service.validate_rate(payload)
    assert str(exc.value) == message


def test_validate_rate_free_needs_no_price():
    clean = admin_service.validate_rate({"name": "Gratis", "type": "free"})
    assert clean["price"] is None


def test_validate_rate_parses_decimals():
    clean = admin_service.validate_rate(
        {"name": "Peso", "type": "weight_based", "price": "7.5", "min_weight": 2, "max_weight": "5"}
    )
    assert clean["price"] == Decimal("7.5")
    assert clean["min_weight"] == Decimal("2")


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "x", "type": "pickup", "price": "1"},
        {"name": "  ", "type": "free"},
        {"name": "x", "type": "flat_rate", "price": "-1"},
        {"name": "x", "type": "flat_rate", "price": "abc"},
        {"name": "x", "type": "weight_based", "price": "1", "min_weight": "6", "max_weight": "5"},
        {"name": "x", "type": "free", "estimated_days": -2},
    ],
)
def test_validate_rate_rejects(payload):
    with pytest.raises(RateValidationError):
        admin_service.validate_rate(payload)


# ---------- zones ----------
def test_zone_crud_and_counts(db_session, store):
    zone = admin_service.create_zone(db_session, store.id, {"name": "Nacional", "countries": ["CO"]})
    admin_service.create_rate(db_session, zone.id, store.id, {"name": "Plano", "type": "flat_rate", "price": "9"})

    rows = admin_service.list_zones(db_session, store.id)
    assert [(r["zone"].name, r["rate_count"]) for r in rows] == [("Nacional", 1)]

    updated = admin_service.update_zone(db_session, zone.id, store.id, {"is_active": False})
    assert updated.is_active is False
    assert updated.countries == ["CO"]


def test_create_zone_requires_name(db_session, store):
    with pytest.raises(ShippingValidationError):
        admin_service.create_zone(db_session, store.id, {"name": ""})


def test_delete_zone_with_rates_conflicts(db_session, store):
    zone = admin_service.create_zone(db_session, store.id, {"name": "Nacional"})
    rate = admin_service.create_rate(db_session, zone.id, store.id, {"name": "Gratis", "type": "free"})

    with pytest.raises(ShippingConflictError) as exc:
        admin_service.delete_zone(db_session, zone.id, store.id)
    assert str(exc.value) == "Cannot delete shipping zone with existing rates"

    admin_service.delete_rate(db_session, rate.id, store.id)
    admin_service.delete_zone(db_session, zone.id, store.id)
    assert admin_service.list_zones(db_session, store.id) == []


def test_zone_of_other_store_is_not_found(db_session, store, other_store):
    zone = admin_service.create_zone(db_session, store.id, {"name": "Nacional"})
    with pytest.raises(ShippingNotFoundError):
        admin_service.get_zone_with_rates(db_session, zone.id, other_store.id)
    with pytest.raises(ShippingNotFoundError):
        admin_service.create_rate(db_session, zone.id, other_store.id, {"name": "x", "type": "free"})


# ---------- rates ----------
def test_update_rate_validates_merged_result(db_session, store):
    zone = admin_service.create_zone(db_session, store.id, {"name": "Nacional"})
    rate = admin_service.create_rate(
        db_session, zone.id, store.id,
        {"name": "Peso", "type": "weight_based", "price": "7", "min_weight": "2", "max_weight": "5"},
    )

    changed = admin_service.update_rate(db_session, rate.id, store.id, {"price": "8.25"})
    assert changed.price == Decimal("8.25")
    assert changed.max_weight == Decimal("5")

    with pytest.raises(RateValidationError):
        admin_service.update_rate(db_session, rate.id, store.id, {"max_weight": None})


def test_update_rate_can_change_type(db_session, store):
    zone = admin_service.create_zone(db_session, store.id, {"name": "Nacional"})
    rate = admin_service.create_rate(db_session, zone.id, store.id, {"name": "Gratis", "type": "free"})
    with pytest.raises(RateValidationError):
        admin_service.update_rate(db_session, rate.id, store.id, {"type": "flat_rate"})
    changed = admin_service.update_rate(db_session, rate.id, store.id, {"type": "flat_rate", "price": "3"})
    assert changed.type == "flat_rate"


def test_rate_of_other_store_is_not_found(db_session, store, other_store):
    zone = admin_service.create_zone(db_session, store.id, {"name": "Nacional"})
    rate = admin_service.create_rate(db_session, zone.id, store.id, {"name": "Gratis", "type": "free"})
    with pytest.raises(ShippingNotFoundError):
        admin_service.update_rate(db_session, rate.id, other_store.id, {"name": "y"})
    with pytest.raises(ShippingNotFoundError):
        admin_service.delete_rate(db_session, rate.id, other_store.id)


# ---------- methods ----------
def test_method_crud(db_session, store, other_store):
    m = admin_service.create_method(
        db_session, store.id,
        {"name": "Servientrega", "carrier": "SERVIENTREGA",
         "tracking_url_template": "https://servientrega.com/rastro?tracking={tracking_number}"},
    )
    assert [x.id for x in admin_service.list_methods(db_session, store.id)] == [m.id]
    assert admin_service.list_methods(db_session, other_store.id) == []

    m = admin_service.update_method(db_session, m.id, store.id, {"code": "SER"})
    assert m.code == "SER"

    with pytest.raises(ShippingNotFoundError):
        admin_service.delete_method(db_session, m.id, other_store.id)
    admin_service.delete_method(db_session, m.id, store.id)
    assert admin_service.list_methods(db_session, store.id) == []
