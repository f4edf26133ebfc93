"""Store catalog models: categories, products, variants."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.store_service.models.enums import Locale
from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, Numeric
from sqlalchemy import String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

# JSONB on PostgreSQL, plain JSON elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _localized(locale: Locale, en: Optional[str], id_: Optional[str]) -> Optional[str]:
    return id_ if Locale(locale) == Locale.ID else en


# ============================================================================
# CATALOG MODELS
# ============================================================================


class Category(Base):
    """Product categories (e.g., 'Men's Clothing' / 'Pakaian Pria')."""

    __tablename__ = "categories"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name_en: Mapped[str] = mapped_column(String(255), nullable=False)
    name_id: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true", index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    # Relationships
    products = relationship(
        "Product", back_populates="category", cascade="all, delete-orphan"
    )

    def get_name(self, locale: Locale) -> str:
        return _localized(locale, self.name_en, self.name_id)

    def get_description(self, locale: Locale) -> Optional[str]:
        return _localized(locale, self.description_en, self.description_id)

    def __repr__(self):
        return f"<Category {self.slug}>"


class Product(Base):
    """Products available in the store (e.g., 'Classic Cotton T-Shirt')."""

    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Bilingual copy
    name_en: Mapped[str] = mapped_column(String(255), nullable=False)
    name_id: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    short_description_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    short_description_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Pricing in IDR
    base_price: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)

    sku: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    stock_quantity: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0"
    )
    weight: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(8, 2), nullable=True
    )  # kg
    images: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    # Status
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true"
    )
    is_featured: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    __table_args__ = (Index("ix_products_active_featured", "is_active", "is_featured"),)

    # Relationships
    category = relationship("Category", back_populates="products")
    variants = relationship(
        "ProductVariant", back_populates="product", cascade="all, delete-orphan"
    )

    def get_name(self, locale: Locale) -> str:
        return _localized(locale, self.name_en, self.name_id)

    def get_description(self, locale: Locale) -> Optional[str]:
        return _localized(locale, self.description_en, self.description_id)

    def get_short_description(self, locale: Locale) -> Optional[str]:
        return _localized(locale, self.short_description_en, self.short_description_id)

    def __repr__(self):
        return f"<Product {self.sku}>"


class ProductVariant(Base):
    """Size/color specialisations of a product (e.g., 'M / Navy')."""

    __tablename__ = "product_variants"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    size: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    color: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    sku: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    # Signed adjustment added to the product base price
    price_adjustment: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), default=Decimal("0"), server_default="0"
    )
    stock_quantity: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0"
    )
    image: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    # Status
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    __table_args__ = (
        Index("ix_product_variants_product_size_color", "product_id", "size", "color"),
    )

    # Relationships
    product = relationship("Product", back_populates="variants")

    @property
    def display_name(self) -> str:
        return " / ".join(part for part in (self.size, self.color) if part)

    def final_price(self, base_price: Decimal) -> Decimal:
        """Unit price for this variant: base price plus the adjustment."""
        return base_price + (self.price_adjustment or Decimal("0"))

    def __repr__(self):
        return f"<ProductVariant {self.sku}>"
