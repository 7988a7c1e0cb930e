# 区域物流报价：按目录中每个 (承运商, 服务) 估算运费并排序

from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging

from storefront.services.shipping.cart import CartLine, cart_subtotal, cart_weight, parse_decimal
from storefront.services.shipping.carrier_catalog import (
    PRICING_FLAT,
    PRICING_PRICE,
    PRICING_WEIGHT,
    Carrier,
    CarrierService,
    RegionalCatalog,
    RegionalZone,
    default_catalog,
)
from storefront.services.shipping.errors import CatalogError
from storefront.services.shipping.formatting import format_cop


logger = logging.getLogger(__name__)


SKIP_OVER_MAX_WEIGHT = "over_max_weight"
SKIP_COD_UNSUPPORTED = "cod_unsupported"
SKIP_SAME_DAY_UNAVAILABLE = "same_day_unavailable"
SKIP_ERROR = "error"


def _round_pesos(val: Decimal) -> int:
    return int(val.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _fmt_kg(val: Decimal) -> str:
    return f"{val.normalize():f}"



# --------- 输入 / 输出模型 ----------
@dataclass(frozen=True)
class QuoteContext:
    """Everything computed once per request and shared by every service evaluation."""
    subtotal: Decimal
    weight: Decimal
    declared_value: Decimal
    origin_city: str
    destination_city: str
    origin_zone: RegionalZone
    destination_zone: RegionalZone
    cash_on_delivery: bool = False


@dataclass(frozen=True)
class CarrierQuote:
    id: str                       # "{carrier_code}_{service_code}"
    carrier_code: str
    company: str
    service_name: str
    service_code: str
    description: str
    price: int                    # whole pesos
    price_formatted: str
    estimated_days: int
    has_recaudo: bool
    tracking_url: str
    restrictions: Tuple[str, ...] = ()

    @property
    def is_express(self) -> bool:
        code = self.service_code
        return "EXPRESS" in code or "SUPER" in code or self.estimated_days <= 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "carrier_code": self.carrier_code,
            "company": self.company,
            "service_name": self.service_name,
            "service_code": self.service_code,
            "description": self.description,
            "price": self.price,
            "price_formatted": self.price_formatted,
            "estimated_days": self.estimated_days,
            "has_recaudo": self.has_recaudo,
            "tracking_url": self.tracking_url,
            "restrictions": list(self.restrictions),
        }


@dataclass(frozen=True)
class QuoteOutcome:
    """Result of pricing one (carrier, service) pair: a quote, or the reason it was left out."""
    carrier_code: str
    service_code: str
    quote: Optional[CarrierQuote] = None
    skip_reason: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.quote is not None



# --------- 报价引擎 ----------
@dataclass
class RegionalEstimator:
    catalog: RegionalCatalog = field(default_factory=default_catalog)

    def prepare(
        self,
        lines: Sequence[CartLine],
        origin_city: Optional[str] = None,
        destination_city: Optional[str] = None,
        declared_value: Optional[Any] = None,
        cash_on_delivery: bool = False,
    ) -> QuoteContext:
        """
        Totals and zones for one request. Products without weight count
        `catalog.fallback_weight` per unit; a missing or zero declared value
        falls back to the cart subtotal. Unknown cities land in the most expensive zone.
        """
        cat = self.catalog
        subtotal = cart_subtotal(lines)
        weight = cart_weight(lines, cat.fallback_weight)

        declared = parse_decimal(declared_value, "declared_value") if declared_value is not None else None
        if not declared:
            declared = subtotal

        origin = (origin_city or cat.default_origin).strip().upper()
        destination = (destination_city or cat.default_destination).strip().upper()
        return QuoteContext(
            subtotal=subtotal,
            weight=weight,
            declared_value=declared,
            origin_city=origin,
            destination_city=destination,
            origin_zone=cat.zone_for_city(origin),
            destination_zone=cat.zone_for_city(destination),
            cash_on_delivery=bool(cash_on_delivery),
        )

    # ---- per service ----
    def base_price(self, service: CarrierService, ctx: QuoteContext) -> Decimal:
        """Price before the same-day rule and rounding."""
        pricing = self.catalog.pricing
        multiplier = ctx.destination_zone.base_rate

        if service.type == PRICING_WEIGHT:
            price = self.catalog.tier_for_weight(ctx.weight).price * multiplier
            if service.is_express:
                price *= pricing.express_multiplier
            if ctx.cash_on_delivery:
                price += max(ctx.declared_value * pricing.cod_percentage, pricing.min_cod_fee)
            return price

        if service.type == PRICING_PRICE:
            price = max(ctx.declared_value * pricing.declared_value_percentage, pricing.min_declared_value_fee)
            price *= multiplier
            if ctx.cash_on_delivery:
                price += ctx.declared_value * pricing.declared_value_cod_percentage
            return price

        if service.type == PRICING_FLAT:
            base = pricing.flat_express if service.is_express else pricing.flat_standard
            return base * multiplier

        raise CatalogError(f"unknown pricing type {service.type!r} for {service.code}")

    def restrictions(self, service: CarrierService, ctx: QuoteContext) -> Tuple[str, ...]:
        notes: List[str] = []
        if service.max_weight and ctx.weight > service.max_weight * self.catalog.pricing.weight_warning_ratio:
            notes.append(f"Peso máximo: {_fmt_kg(service.max_weight)}kg")
        if service.max_dimensions:
            notes.append(f"Dimensiones máximas: {service.max_dimensions}")
        if service.same_day_delivery:
            notes.append("Solo disponible en ciudades principales")
            notes.append("Pedido antes de las 2:00 PM")
        if service.has_recaudo:
            notes.append("Incluye recaudo contra entrega")
        return tuple(notes)

    def _quote_service(self, carrier: Carrier, service: CarrierService, ctx: QuoteContext) -> QuoteOutcome:
        def skipped(reason: str) -> QuoteOutcome:
            return QuoteOutcome(carrier.code, service.code, skip_reason=reason)

        if service.max_weight is not None and ctx.weight > service.max_weight:
            return skipped(SKIP_OVER_MAX_WEIGHT)
        if ctx.cash_on_delivery and not service.has_recaudo:
            return skipped(SKIP_COD_UNSUPPORTED)

        price = self.base_price(service, ctx)

        if service.same_day_delivery:
            if ctx.destination_zone.code != self.catalog.top_zone.code:
                return skipped(SKIP_SAME_DAY_UNAVAILABLE)
            price *= self.catalog.pricing.same_day_multiplier

        rounded = _round_pesos(price)
        quote = CarrierQuote(
            id=f"{carrier.code}_{service.code}",
            carrier_code=carrier.code,
            company=carrier.name,
            service_name=service.name,
            service_code=service.code,
            description=service.description,
            price=rounded,
            price_formatted=format_cop(rounded),
            estimated_days=service.estimated_days,
            has_recaudo=service.has_recaudo,
            tracking_url=self.catalog.tracking_url(carrier.code),
            restrictions=self.restrictions(service, ctx),
        )
        return QuoteOutcome(carrier.code, service.code, quote=quote)

    def evaluate(self, carrier: Carrier, service: CarrierService, ctx: QuoteContext) -> QuoteOutcome:
        """One catalog entry; a fault becomes an error outcome instead of failing the whole request."""
        try:
            return self._quote_service(carrier, service, ctx)
        except Exception as e:
            logger.warning(
                "regional quote failed: carrier=%s service=%s err=%s", carrier.code, service.code, e,
                exc_info=True,
            )
            return QuoteOutcome(carrier.code, service.code, skip_reason=SKIP_ERROR, error=str(e))

    # ---- whole catalog ----
    def outcomes(self, lines: Sequence[CartLine], **options: Any) -> List[QuoteOutcome]:
        ctx = self.prepare(lines, **options)
        results = [
            self.evaluate(carrier, service, ctx)
            for carrier in self.catalog.carriers
            for service in carrier.services
        ]
        skipped = [o for o in results if not o.ok]
        if skipped:
            logger.debug(
                "regional quotes: %d/%d services skipped (%s)",
                len(skipped), len(results),
                ", ".join(f"{o.service_code}:{o.skip_reason}" for o in skipped),
            )
        return results

    def quote_all(
        self,
        lines: Sequence[CartLine],
        origin_city: Optional[str] = None,
        destination_city: Optional[str] = None,
        declared_value: Optional[Any] = None,
        cash_on_delivery: bool = False,
    ) -> List[CarrierQuote]:
        """Every quotable service, cheapest first (ties keep catalog order)."""
        results = self.outcomes(
            lines,
            origin_city=origin_city,
            destination_city=destination_city,
            declared_value=declared_value,
            cash_on_delivery=cash_on_delivery,
        )
        quotes = [o.quote for o in results if o.quote is not None]
        quotes.sort(key=lambda q: q.price)
        return quotes

    # ---- convenience views ----
    def cheapest(self, lines: Sequence[CartLine], **options: Any) -> Optional[CarrierQuote]:
        quotes = self.quote_all(lines, **options)
        return quotes[0] if quotes else None

    def for_carrier(self, carrier_code: str, lines: Sequence[CartLine], **options: Any) -> List[CarrierQuote]:
        wanted = (carrier_code or "").strip().upper()
        return [q for q in self.quote_all(lines, **options) if q.carrier_code == wanted]

    def express_only(self, lines: Sequence[CartLine], **options: Any) -> List[CarrierQuote]:
        return [q for q in self.quote_all(lines, **options) if q.is_express]
