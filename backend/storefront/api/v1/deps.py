# 路由公共依赖：DB 会话 / 区域报价引擎 / 业务异常 -> HTTP 状态码

from __future__ import annotations
from contextlib import contextmanager
from decimal import Decimal
from functools import lru_cache
from typing import Iterator

from fastapi import HTTPException, status

from storefront.core.config import settings
from storefront.db.session import get_db  # re-exported for routers / dependency overrides
from storefront.services.shipping.carrier_catalog import default_catalog
from storefront.services.shipping.errors import (
    CatalogError,
    InvalidCartError,
    ShippingConflictError,
    ShippingNotFoundError,
    ShippingValidationError,
)
from storefront.services.shipping.regional_estimator import RegionalEstimator


@lru_cache(maxsize=1)
def get_regional_estimator() -> RegionalEstimator:
    """Colombian catalog with the hub/destination/fallback weight taken from settings."""
    catalog = default_catalog(
        default_origin=settings.REGIONAL_DEFAULT_ORIGIN.upper(),
        default_destination=settings.REGIONAL_DEFAULT_DESTINATION.upper(),
        fallback_weight=Decimal(str(settings.REGIONAL_FALLBACK_WEIGHT_KG)),
    )
    return RegionalEstimator(catalog)


@contextmanager
def shipping_http_errors() -> Iterator[None]:
    """Translate shipping service errors raised inside the block into HTTPException."""
    try:
        yield
    except ShippingNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ShippingConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except (InvalidCartError, ShippingValidationError) as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except CatalogError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)) from e


__all__ = ["get_db", "get_regional_estimator", "shipping_http_errors"]
