"""
Public surface of the shipping pricing core:
- store-defined rate engine (rate_engine)
- regional carrier estimator (regional_estimator + carrier_catalog)
Admin/checkout services import the repositories and are imported by module path.
"""

from .cart import CartLine, cart_subtotal, cart_weight

from .rate_engine import (
    RateRule,
    RateCalculation,
    evaluate_rate,
    calculate_for_all,
    find_cheapest,
    cart_total_with_shipping,
)

from .carrier_catalog import RegionalCatalog, default_catalog
from .regional_estimator import RegionalEstimator, CarrierQuote, QuoteOutcome
from .formatting import format_cop

from .errors import (
    ShippingError, InvalidCartError, CatalogError, ShippingValidationError, RateValidationError,
    ShippingNotFoundError, ShippingConflictError,
)


__all__ = [
    "CartLine", "cart_subtotal", "cart_weight",
    "RateRule", "RateCalculation", "evaluate_rate", "calculate_for_all", "find_cheapest",
    "cart_total_with_shipping",
    "RegionalCatalog", "default_catalog", "RegionalEstimator", "CarrierQuote", "QuoteOutcome",
    "format_cop",
    "ShippingError", "InvalidCartError", "CatalogError", "ShippingValidationError", "RateValidationError",
    "ShippingNotFoundError", "ShippingConflictError",
]
