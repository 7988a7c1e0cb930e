"""
   运费模块专用异常类型。
   Pricing/admin errors stay independent of HTTP; the API layer maps them to status codes.
"""

class ShippingError(Exception):
    """Base for all shipping errors."""

class InvalidCartError(ShippingError, ValueError):
    """Cart snapshot has an invalid shape (negative price/weight, quantity < 1, non-numeric)."""

class CatalogError(ShippingError):
    """Regional carrier catalog is inconsistent or cannot price a request (e.g. no weight tier)."""

class ShippingValidationError(ShippingError, ValueError):
    """Admin payload rejected at create/update time (missing name, bad values)."""

class RateValidationError(ShippingValidationError):
    """Store rate configuration rejected at create/update time."""

class ShippingNotFoundError(ShippingError, LookupError):
    """Zone, rate, method or cart does not exist for the given store."""

class ShippingConflictError(ShippingError):
    """Operation conflicts with existing data (e.g. deleting a zone that still has rates)."""
