"""哥伦比亚区域物流报价：档位 / 分区 / 货到付款 / 当日达 / 容错"""

from __future__ import annotations
from dataclasses import replace
from decimal import Decimal

import pytest

from storefront.services.shipping.cart import CartLine
from storefront.services.shipping.carrier_catalog import (
    INFINITY,
    PRICING_WEIGHT,
    CarrierService,
    RegionalZone,
    WeightTier,
    default_catalog,
)
from storefront.services.shipping.errors import CatalogError, InvalidCartError
from storefront.services.shipping.formatting import format_cop
from storefront.services.shipping.regional_estimator import (
    SKIP_COD_UNSUPPORTED,
    SKIP_ERROR,
    SKIP_OVER_MAX_WEIGHT,
    SKIP_SAME_DAY_UNAVAILABLE,
    RegionalEstimator,
)


@pytest.fixture()
def estimator() -> RegionalEstimator:
    return RegionalEstimator(default_catalog())


def cart(weight="2.0", qty=2, price="50.00"):
    return [CartLine.parse("p1", price, weight, qty)]


def by_code(quotes):
    return {q.service_code: q for q in quotes}


# ---------- 目录 ----------
@pytest.mark.parametrize(
    "weight,price",
    [("0", 8000), ("1", 8000), ("1.01", 12000), ("3", 12000), ("5", 16000),
     ("10", 22000), ("20", 35000), ("50", 50000), ("50.5", 80000), ("900", 80000)],
)
def test_weight_tier_boundaries(weight, price):
    assert default_catalog().tier_for_weight(Decimal(weight)).price == Decimal(price)


def test_unknown_city_falls_into_most_expensive_zone():
    cat = default_catalog()
    assert cat.zone_for_city("XYZ").code == "ZONE_3"
    assert cat.zone_for_city(None).code == "ZONE_3"
    assert cat.zone_for_city(" mde ").code == "ZONE_1"
    assert cat.top_zone.code == "ZONE_1"


def test_catalog_rejects_unsorted_tiers():
    tiers = (WeightTier(Decimal("5"), Decimal("1")), WeightTier(Decimal("3"), Decimal("2")),
             WeightTier(INFINITY, Decimal("3")))
    with pytest.raises(CatalogError):
        default_catalog(weight_tiers=tiers)


def test_catalog_rejects_bounded_last_tier():
    with pytest.raises(CatalogError):
        default_catalog(weight_tiers=(WeightTier(Decimal("5"), Decimal("1")),))


def test_catalog_rejects_unknown_service_type():
    cat = default_catalog()
    bad = replace(cat.carriers[0], services=(CarrierService("X", "X", "x", "per_km", 2),))
    with pytest.raises(CatalogError):
        cat.with_overrides(carriers=(bad,))


def test_catalog_needs_zones():
    with pytest.raises(CatalogError):
        default_catalog(zones=())


def test_tracking_url_uses_carrier_template():
    cat = default_catalog()
    assert cat.tracking_url("ENVIA", "123") == "https://envia.co/tracking?guia=123"
    assert cat.tracking_url("NOPE", "123") == "https://example.com/track/123"


# ---------- 单次请求上下文 ----------
def test_prepare_defaults(estimator):
    ctx = estimator.prepare(cart())
    assert ctx.origin_city == "BOG"
    assert ctx.destination_city == "MDE"
    assert ctx.subtotal == Decimal("100.00")
    assert ctx.weight == Decimal("4.0")
    assert ctx.declared_value == Decimal("100.00")


def test_zero_declared_value_falls_back_to_subtotal(estimator):
    assert estimator.prepare(cart(), declared_value=0).declared_value == Decimal("100.00")
    assert estimator.prepare(cart(), declared_value="250000").declared_value == Decimal("250000")


def test_negative_declared_value_is_rejected(estimator):
    with pytest.raises(InvalidCartError):
        estimator.prepare(cart(), declared_value="-1")


def test_missing_product_weight_uses_fallback(estimator):
    ctx = estimator.prepare([CartLine.parse("p1", "10", None, 2)])
    assert ctx.weight == Decimal("1.0")


# ---------- 报价 ----------
def test_end_to_end_standard_quote(estimator):
    quotes = estimator.quote_all(cart(), origin_city="BOG", destination_city="MDE")
    q = by_code(quotes)["SER_STANDARD"]
    assert q.price == 16000
    assert q.price_formatted == "$\u00a016.000"
    assert q.id == "SERVIENTREGA_SER_STANDARD"
    assert q.company == "Servientrega"
    assert q.estimated_days == 2


def test_quotes_sorted_and_ties_keep_catalog_order(estimator):
    quotes = estimator.quote_all(cart())
    prices = [q.price for q in quotes]
    assert prices == sorted(prices)
    assert len(quotes) == 14
    cheapest = [q.service_code for q in quotes if q.price == 10000]
    assert cheapest == ["ENVIA_COD", "SER_COD", "COOR_SPECIAL", "INTER_COD"]


def test_express_multiplier_and_price_based_minimum(estimator):
    q = by_code(estimator.quote_all(cart()))
    assert q["ENVIA_EXPRESS"].price == 24000          # 16000 * 1.5
    assert q["INTER_EXPRESS"].price == 24000
    assert q["SER_NEXT"].price == 16000               # no express marker in the code
    assert q["COOR_SPECIAL"].price == 10000           # max(100 * 5%, 10000)


def test_same_day_only_in_top_zone(estimator):
    top = by_code(estimator.quote_all(cart(), destination_city="CLO"))
    assert top["SER_EXPRESS"].price == 50000          # 25000 flat * 2
    other = by_code(estimator.quote_all(cart(), destination_city="CTG"))
    assert "SER_EXPRESS" not in other
    outcomes = {o.service_code: o for o in estimator.outcomes(cart(), destination_city="VAL")}
    assert outcomes["SER_EXPRESS"].skip_reason == SKIP_SAME_DAY_UNAVAILABLE


def test_price_grows_with_zone(estimator):
    zones = ["MDE", "CTG", "VAL"]
    per_zone = [by_code(estimator.quote_all(cart(), destination_city=c)) for c in zones]
    for code in ("ENVIA_STANDARD", "SER_STANDARD", "COOR_STANDARD", "INTER_COD"):
        prices = [q[code].price for q in per_zone]
        assert prices == sorted(prices)
    assert [q["SER_STANDARD"].price for q in per_zone] == [16000, 19200, 24000]


def test_over_max_weight_is_skipped(estimator):
    heavy = [CartLine.parse("p1", "10", "60", 1)]
    outcomes = {o.service_code: o for o in estimator.outcomes(heavy)}
    assert outcomes["ENVIA_STANDARD"].skip_reason == SKIP_OVER_MAX_WEIGHT
    assert outcomes["SER_STANDARD"].skip_reason == SKIP_OVER_MAX_WEIGHT
    assert outcomes["ENVIA_EXPRESS"].ok
    assert outcomes["ENVIA_EXPRESS"].quote.price == 120000      # 80000 * 1.5


def test_cash_on_delivery_keeps_only_recaudo_services(estimator):
    quotes = estimator.quote_all(cart(), declared_value="1000000", cash_on_delivery=True)
    assert {q.service_code for q in quotes} == {"ENVIA_COD", "SER_COD", "INTER_COD"}
    assert all(q.has_recaudo for q in quotes)
    outcomes = {o.service_code: o for o in estimator.outcomes(cart(), cash_on_delivery=True)}
    assert outcomes["SER_STANDARD"].skip_reason == SKIP_COD_UNSUPPORTED


def test_cash_on_delivery_increases_price_based(estimator):
    plain = by_code(estimator.quote_all(cart(), declared_value="1000000"))
    cod = by_code(estimator.quote_all(cart(), declared_value="1000000", cash_on_delivery=True))
    assert plain["SER_COD"].price == 50000
    assert cod["SER_COD"].price == 70000              # + 2% of declared value


def test_restriction_notes(estimator):
    q = by_code(estimator.quote_all([CartLine.parse("p1", "10", "7", 1)]))
    assert "Peso máximo: 8kg" in q["ENVIA_STANDARD"].restrictions
    assert "Dimensiones máximas: 45cm x 45cm x 45cm" in q["ENVIA_STANDARD"].restrictions
    assert "Incluye recaudo contra entrega" in q["ENVIA_COD"].restrictions
    assert "Solo disponible en ciudades principales" in q["SER_EXPRESS"].restrictions


def test_faulty_service_is_skipped_not_fatal(estimator, monkeypatch):
    original = estimator.base_price

    def broken(service, ctx):
        if service.code == "SER_STANDARD":
            raise ArithmeticError("boom")
        return original(service, ctx)

    monkeypatch.setattr(estimator, "base_price", broken)
    outcomes = {o.service_code: o for o in estimator.outcomes(cart())}
    assert outcomes["SER_STANDARD"].skip_reason == SKIP_ERROR
    assert outcomes["SER_STANDARD"].error == "boom"
    assert len(estimator.quote_all(cart())) == 13


def test_custom_catalog_is_injected():
    tiers = (WeightTier(Decimal("10"), Decimal("1000")), WeightTier(INFINITY, Decimal("5000")))
    zone = RegionalZone("Z", "Única", "todo", Decimal("1"), ("BOG", "MDE"))
    only = replace(default_catalog().carriers[1], services=(
        CarrierService("SER_STANDARD", "Envío Nacional", "std", PRICING_WEIGHT, 2),
    ))
    est = RegionalEstimator(default_catalog(weight_tiers=tiers, zones=(zone,), carriers=(only,)))
    quotes = est.quote_all(cart())
    assert [q.price for q in quotes] == [1000]


# ---------- 便捷视图 ----------
def test_cheapest(estimator):
    assert estimator.cheapest(cart()).service_code == "ENVIA_COD"
    assert estimator.cheapest([]) is not None       # empty cart still quotes the first tier


def test_for_carrier_is_case_insensitive(estimator):
    codes = [q.service_code for q in estimator.for_carrier("servientrega", cart())]
    assert sorted(codes) == ["SER_COD", "SER_EXPRESS", "SER_NEXT", "SER_STANDARD"]
    assert estimator.for_carrier("unknown", cart()) == []


def test_express_only(estimator):
    codes = {q.service_code for q in estimator.express_only(cart())}
    assert codes == {"ENVIA_EXPRESS", "SER_EXPRESS", "SER_NEXT", "COOR_EXPRESS", "INTER_EXPRESS"}


# ---------- 金额展示 ----------
@pytest.mark.parametrize(
    "amount,text",
    [(16000, "$\u00a016.000"), (0, "$\u00a00"), (1234567, "$\u00a01.234.567"),
     (Decimal("999.5"), "$\u00a01.000"), (-2500, "-$\u00a02.500")],
)
def test_format_cop(amount, text):
    assert format_cop(amount) == text
