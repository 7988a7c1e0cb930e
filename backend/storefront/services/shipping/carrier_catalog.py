# 哥伦比亚区域物流商目录（承运商 / 服务 / 城市分区 / 重量档位）
"""
Static catalog for the regional carrier estimator.

Everything here is immutable data bundled into a `RegionalCatalog` that the
estimator receives explicitly; tests build their own catalogs with
`dataclasses.replace` or the constructors instead of patching module state.
Money is in Colombian pesos (COP), weights in kg.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from storefront.services.shipping.errors import CatalogError


INFINITY = Decimal("Infinity")

PRICING_WEIGHT = "weight_based"
PRICING_PRICE = "price_based"
PRICING_FLAT = "flat_rate"
PRICING_TYPES = (PRICING_WEIGHT, PRICING_PRICE, PRICING_FLAT)

EXPRESS_MARKERS = ("EXPRESS", "SUPER")
TRACKING_PLACEHOLDER = "{tracking_number}"



# --------- 目录数据模型 ----------
@dataclass(frozen=True)
class CarrierService:
    code: str
    name: str
    description: str
    type: str                                  # weight_based | price_based | flat_rate
    estimated_days: int
    max_weight: Optional[Decimal] = None       # kg
    max_dimensions: Optional[str] = None
    has_recaudo: bool = False                  # supports cash on delivery
    same_day_delivery: bool = False

    @property
    def is_express(self) -> bool:
        return any(marker in self.code for marker in EXPRESS_MARKERS)


@dataclass(frozen=True)
class Carrier:
    code: str
    name: str
    website: str
    services: Tuple[CarrierService, ...]
    tracking_url_template: Optional[str] = None
    logo: Optional[str] = None


@dataclass(frozen=True)
class RegionalZone:
    code: str
    name: str
    description: str
    base_rate: Decimal                         # price multiplier
    cities: Tuple[str, ...] = ()


@dataclass(frozen=True)
class WeightTier:
    max_weight: Decimal                        # inclusive ceiling
    price: Decimal


@dataclass(frozen=True)
class City:
    code: str
    name: str
    department: str


@dataclass(frozen=True)
class PricingTable:
    express_multiplier: Decimal = Decimal("1.5")
    cod_percentage: Decimal = Decimal("0.02")            # weight_based COD fee
    min_cod_fee: Decimal = Decimal("3000")
    declared_value_percentage: Decimal = Decimal("0.05") # price_based base
    min_declared_value_fee: Decimal = Decimal("10000")
    declared_value_cod_percentage: Decimal = Decimal("0.02")
    flat_standard: Decimal = Decimal("15000")
    flat_express: Decimal = Decimal("25000")
    same_day_multiplier: Decimal = Decimal("2")
    weight_warning_ratio: Decimal = Decimal("0.8")       # restriction note above 80 % of max weight


@dataclass(frozen=True)
class RegionalCatalog:
    carriers: Tuple[Carrier, ...]
    zones: Tuple[RegionalZone, ...]
    weight_tiers: Tuple[WeightTier, ...]
    cities: Tuple[City, ...] = ()
    pricing: PricingTable = field(default_factory=PricingTable)
    default_origin: str = "BOG"
    default_destination: str = "MDE"
    fallback_weight: Decimal = Decimal("0.5")            # per unit when a product has no weight
    currency: str = "COP"
    tracking_fallback: str = "https://example.com/track/" + TRACKING_PLACEHOLDER

    def __post_init__(self) -> None:
        if not self.zones:
            raise CatalogError("catalog needs at least one zone")
        if not self.weight_tiers:
            raise CatalogError("catalog needs at least one weight tier")
        ceilings = [t.max_weight for t in self.weight_tiers]
        if any(b <= a for a, b in zip(ceilings, ceilings[1:])):
            raise CatalogError("weight tiers must be strictly ascending by max_weight")
        if ceilings[-1] != INFINITY:
            raise CatalogError("last weight tier must be unbounded")
        for carrier in self.carriers:
            for service in carrier.services:
                if service.type not in PRICING_TYPES:
                    raise CatalogError(f"{carrier.code}/{service.code}: unknown pricing type {service.type!r}")

    # ---- zones ----
    @property
    def fallback_zone(self) -> RegionalZone:
        """Most expensive zone; unmapped cities land here."""
        return max(self.zones, key=lambda z: z.base_rate)

    @property
    def top_zone(self) -> RegionalZone:
        """Cheapest/fastest zone (major cities); the only one with same-day delivery."""
        return min(self.zones, key=lambda z: z.base_rate)

    def zone_for_city(self, city_code: Optional[str]) -> RegionalZone:
        code = (city_code or "").strip().upper()
        for zone in self.zones:
            if code in zone.cities:
                return zone
        return self.fallback_zone

    def zone(self, zone_code: str) -> Optional[RegionalZone]:
        return next((z for z in self.zones if z.code == zone_code), None)

    # ---- weight tiers ----
    def tier_for_weight(self, weight: Decimal) -> WeightTier:
        for tier in self.weight_tiers:
            if weight <= tier.max_weight:
                return tier
        raise CatalogError(f"weight {weight} exceeds every tier")

    # ---- carriers ----
    def carrier(self, code: str) -> Optional[Carrier]:
        wanted = (code or "").strip().upper()
        return next((c for c in self.carriers if c.code == wanted), None)

    def city(self, code: str) -> Optional[City]:
        wanted = (code or "").strip().upper()
        return next((c for c in self.cities if c.code == wanted), None)

    def tracking_url(self, carrier_code: str, tracking_number: str = TRACKING_PLACEHOLDER) -> str:
        carrier = self.carrier(carrier_code)
        template = (carrier.tracking_url_template if carrier else None) or self.tracking_fallback
        return template.replace(TRACKING_PLACEHOLDER, tracking_number)

    def with_overrides(self, **changes: Any) -> "RegionalCatalog":
        return replace(self, **changes)



# --------- 默认目录（哥伦比亚） ----------
COLOMBIAN_CITIES: Tuple[City, ...] = (
    # major cities
    City("BOG", "Bogotá D.C.", "Cundinamarca"),
    City("MDE", "Medellín", "Antioquia"),
    City("CLO", "Cali", "Valle del Cauca"),
    City("BAQ", "Barranquilla", "Atlántico"),
    City("CTG", "Cartagena", "Bolívar"),
    City("CUC", "Cúcuta", "Norte de Santander"),
    City("PEI", "Pereira", "Risaralda"),
    City("IBE", "Ibagué", "Tolima"),
    City("BGA", "Bucaramanga", "Santander"),
    City("SMR", "Santa Marta", "Magdalena"),
    City("VVC", "Villavicencio", "Meta"),
    City("MZL", "Manizales", "Caldas"),
    City("PAL", "Palmira", "Valle del Cauca"),
    City("SOL", "Soledad", "Atlántico"),
    City("VAL", "Valledupar", "Cesar"),
)


COLOMBIAN_ZONES: Tuple[RegionalZone, ...] = (
    RegionalZone(
        code="ZONE_1",
        name="Zona 1 - Ciudades Principales",
        description="Bogotá, Medellín, Cali, Barranquilla",
        base_rate=Decimal("1.0"),
        cities=("BOG", "MDE", "CLO", "BAQ"),
    ),
    RegionalZone(
        code="ZONE_2",
        name="Zona 2 - Ciudades Intermedias",
        description="Cartagena, Cúcuta, Pereira, Bucaramanga",
        base_rate=Decimal("1.2"),
        cities=("CTG", "CUC", "PEI", "BGA", "SMR", "IBE"),
    ),
    RegionalZone(
        code="ZONE_3",
        name="Zona 3 - Otras Ciudades",
        description="Resto de municipios",
        base_rate=Decimal("1.5"),
        cities=("VVC", "MZL", "PAL", "SOL", "VAL"),
    ),
)


# COP per shipment, first tier whose ceiling >= cart weight wins
COLOMBIAN_WEIGHT_TIERS: Tuple[WeightTier, ...] = (
    WeightTier(Decimal("1"), Decimal("8000")),
    WeightTier(Decimal("3"), Decimal("12000")),
    WeightTier(Decimal("5"), Decimal("16000")),
    WeightTier(Decimal("10"), Decimal("22000")),
    WeightTier(Decimal("20"), Decimal("35000")),
    WeightTier(Decimal("50"), Decimal("50000")),
    WeightTier(INFINITY, Decimal("80000")),
)


COLOMBIAN_CARRIERS: Tuple[Carrier, ...] = (
    Carrier(
        code="ENVIA",
        name="Envia",
        website="https://envia.co",
        logo="/logos/envia.png",
        tracking_url_template="https://envia.co/tracking?guia={tracking_number}",
        services=(
            CarrierService("ENVIA_STANDARD", "Envío Terrestre", "Paquetes terrestres 1-8 kg",
                           PRICING_WEIGHT, 3, max_weight=Decimal("8"), max_dimensions="45cm x 45cm x 45cm"),
            CarrierService("ENVIA_EXPRESS", "Envío Aéreo", "Paquetes aéreos 9-80 kg",
                           PRICING_WEIGHT, 1, max_weight=Decimal("80"), max_dimensions="1m x 1m x 1m"),
            CarrierService("ENVIA_HEAVY", "Mercancía Terrestre", "Mercancía terrestre 9-200 kg",
                           PRICING_WEIGHT, 4, max_weight=Decimal("200"), max_dimensions="4m x 2m x 2m"),
            CarrierService("ENVIA_COD", "Recaudo", "Envío con recaudo (contra entrega)",
                           PRICING_PRICE, 3, has_recaudo=True),
        ),
    ),
    Carrier(
        code="SERVIENTREGA",
        name="Servientrega",
        website="https://servientrega.com",
        logo="/logos/servientrega.png",
        tracking_url_template="https://servientrega.com/rastro?tracking={tracking_number}",
        services=(
            CarrierService("SER_STANDARD", "Envío Nacional", "Servicio estándar nacional",
                           PRICING_WEIGHT, 2, max_weight=Decimal("50")),
            CarrierService("SER_EXPRESS", "Hoy Mismo", "Entrega el mismo día (ciudades principales)",
                           PRICING_FLAT, 0, same_day_delivery=True),
            CarrierService("SER_NEXT", "Próximo Día", "Entrega al siguiente día",
                           PRICING_WEIGHT, 1),
            CarrierService("SER_COD", "Contra Entrega", "Servicio contra entrega",
                           PRICING_PRICE, 3, has_recaudo=True),
        ),
    ),
    Carrier(
        code="COORDINADORA",
        name="Coordinadora",
        website="https://coordinadora.com",
        logo="/logos/coordinadora.png",
        tracking_url_template="https://coordinadora.com/seguimiento/?guia={tracking_number}",
        services=(
            CarrierService("COOR_STANDARD", "Estándar", "Envío estándar nacional",
                           PRICING_WEIGHT, 3, max_weight=Decimal("70")),
            CarrierService("COOR_EXPRESS", "Express", "Servicio express",
                           PRICING_WEIGHT, 1),
            CarrierService("COOR_SPECIAL", "Especial", "Paquetes especiales y voluminosos",
                           PRICING_PRICE, 4),
        ),
    ),
    Carrier(
        code="INTERRAPIDISIMO",
        name="Interrapidisimo",
        website="https://interrapidisimo.com",
        logo="/logos/interrapidisimo.png",
        tracking_url_template="https://interrapidisimo.com/tracking?numero={tracking_number}",
        services=(
            CarrierService("INTER_STANDARD", "Envío Nacional", "Servicio nacional estándar",
                           PRICING_WEIGHT, 2, max_weight=Decimal("50")),
            CarrierService("INTER_EXPRESS", "Súper Inter", "Servicio express nacional",
                           PRICING_WEIGHT, 1),
            CarrierService("INTER_COD", "Contra Entrega", "Servicio contra entrega",
                           PRICING_PRICE, 3, has_recaudo=True),
        ),
    ),
)


def default_catalog(**overrides: Any) -> RegionalCatalog:
    """Build the Colombian catalog; keyword overrides replace top-level fields (defaults, tiers, carriers...)."""
    base: Dict[str, Any] = dict(
        carriers=COLOMBIAN_CARRIERS,
        zones=COLOMBIAN_ZONES,
        weight_tiers=COLOMBIAN_WEIGHT_TIERS,
        cities=COLOMBIAN_CITIES,
        pricing=PricingTable(),
    )
    base.update({k: v for k, v in overrides.items() if v is not None})
    return RegionalCatalog(**base)
