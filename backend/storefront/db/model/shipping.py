# 店铺自定义运费：配送区域 / 运费规则 / 配送方式

from __future__ import annotations
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import String, Integer, Boolean, Numeric, Text, ForeignKey, JSON, CheckConstraint, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from storefront.db.base import Base, UUIDPrimaryKey, Timestamps


RATE_TYPES = ("free", "flat_rate", "weight_based", "price_based")


class ShippingZone(UUIDPrimaryKey, Timestamps, Base):
    __tablename__ = "shipping_zones"

    store_id: Mapped[str] = mapped_column(String(36), ForeignKey("stores.id", ondelete="CASCADE"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # match lists are stored but not evaluated against addresses yet; the caller picks the zone
    countries:    Mapped[Optional[List[str]]] = mapped_column(JSON)
    states:       Mapped[Optional[List[str]]] = mapped_column(JSON)
    postal_codes: Mapped[Optional[List[str]]] = mapped_column(JSON)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("true"))

    rates: Mapped[List["ShippingRate"]] = relationship(back_populates="zone", order_by="ShippingRate.name")


class ShippingRate(UUIDPrimaryKey, Timestamps, Base):
    __tablename__ = "shipping_rates"

    zone_id: Mapped[str] = mapped_column(String(36), ForeignKey("shipping_zones.id", ondelete="CASCADE"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    type: Mapped[str] = mapped_column(String(24), nullable=False)        # free | flat_rate | weight_based | price_based

    price:      Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2))   # required for every type except free
    min_weight: Mapped[Optional[Decimal]] = mapped_column(Numeric(8, 2))    # weight_based window (inclusive)
    max_weight: Mapped[Optional[Decimal]] = mapped_column(Numeric(8, 2))
    min_price:  Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2))   # price_based window (inclusive)
    max_price:  Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2))

    estimated_days: Mapped[Optional[int]] = mapped_column(Integer)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("true"))

    zone: Mapped[ShippingZone] = relationship(back_populates="rates")

    __table_args__ = (
        CheckConstraint(
            "type IN ('free', 'flat_rate', 'weight_based', 'price_based')",
            name="rate_type",
        ),
    )


class ShippingMethod(UUIDPrimaryKey, Timestamps, Base):
    __tablename__ = "shipping_methods"

    store_id: Mapped[str] = mapped_column(String(36), ForeignKey("stores.id", ondelete="CASCADE"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    carrier: Mapped[Optional[str]] = mapped_column(String(120))
    code: Mapped[Optional[str]] = mapped_column(String(64))
    tracking_url_template: Mapped[Optional[str]] = mapped_column(String(512))   # e.g. https://carrier/track?n={tracking_number}
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("true"))
