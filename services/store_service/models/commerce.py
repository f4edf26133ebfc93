"""Store commerce models: cart rows, orders and order items."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.store_service.models.catalog import JSONType
from services.store_service.models.enums import (
    Locale,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    ShippingMethod,
    enum_values,
)
from sqlalchemy import CheckConstraint, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Index, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

# ============================================================================
# CART MODELS
# ============================================================================


class CartItem(Base):
    """Pre-order cart line, owned by a user or an anonymous session."""

    __tablename__ = "carts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Owner (user_id for signed-in shoppers, session_id for guests)
    user_id: Mapped[Optional[str]] = mapped_column(
        String(255), index=True, nullable=True
    )
    session_id: Mapped[Optional[str]] = mapped_column(
        String(255), index=True, nullable=True
    )

    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_variant_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("product_variants.id", ondelete="CASCADE"),
        nullable=True,
    )

    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    # Price captured when the row was first added
    price: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    __table_args__ = (
        CheckConstraint(
            "(user_id IS NOT NULL AND session_id IS NULL) "
            "OR (user_id IS NULL AND session_id IS NOT NULL)",
            name="cart_exactly_one_owner",
        ),
        CheckConstraint("quantity > 0", name="cart_positive_quantity"),
        Index("ix_carts_user_product_variant", "user_id", "product_id", "product_variant_id"),
    )

    # Relationships
    product = relationship("Product")
    variant = relationship("ProductVariant")

    def __repr__(self):
        return f"<CartItem product={self.product_id} qty={self.quantity}>"


# ============================================================================
# ORDER MODELS
# ============================================================================


class Order(Base):
    """Orders: immutable record of a completed checkout."""

    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    order_number: Mapped[str] = mapped_column(
        String(32), unique=True, nullable=False, index=True
    )

    # Customer (null for guests)
    user_id: Mapped[Optional[str]] = mapped_column(
        String(255), index=True, nullable=True
    )

    # Status
    status: Mapped[OrderStatus] = mapped_column(
        SAEnum(
            OrderStatus,
            values_callable=enum_values,
            name="order_status_enum",
            native_enum=False,
        ),
        default=OrderStatus.PENDING,
        server_default="pending",
        index=True,
    )

    # Pricing (IDR)
    subtotal: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    tax_amount: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), default=0, server_default="0"
    )
    shipping_cost: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), default=0, server_default="0"
    )
    total: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    currency: Mapped[str] = mapped_column(
        String(3), default="IDR", server_default="IDR"
    )

    # Addresses: {"name", "phone", "address", "city", "postal_code"}
    billing_address: Mapped[dict] = mapped_column(JSONType, nullable=False)
    shipping_address: Mapped[dict] = mapped_column(JSONType, nullable=False)

    payment_method: Mapped[PaymentMethod] = mapped_column(
        SAEnum(
            PaymentMethod,
            values_callable=enum_values,
            name="payment_method_enum",
            native_enum=False,
        ),
        nullable=False,
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        SAEnum(
            PaymentStatus,
            values_callable=enum_values,
            name="payment_status_enum",
            native_enum=False,
        ),
        default=PaymentStatus.PENDING,
        server_default="pending",
        index=True,
    )
    shipping_method: Mapped[ShippingMethod] = mapped_column(
        SAEnum(
            ShippingMethod,
            values_callable=enum_values,
            name="shipping_method_enum",
            native_enum=False,
        ),
        nullable=False,
    )

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Language the item snapshots were captured in
    locale: Mapped[str] = mapped_column(
        String(5), default=Locale.EN.value, server_default="en"
    )

    # Timestamps
    shipped_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    delivered_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    # Relationships
    items = relationship(
        "OrderItem", back_populates="order", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Order {self.order_number}>"


class OrderItem(Base):
    """Order line items (snapshot at order time)."""

    __tablename__ = "order_items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Traceability only; prices and names come from the snapshot columns
    product_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("products.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    product_variant_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("product_variants.id", ondelete="SET NULL"),
        nullable=True,
    )

    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    total: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)

    # Snapshot at order time (products may change)
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    product_sku: Mapped[str] = mapped_column(String(255), nullable=False)
    product_details: Mapped[Optional[dict]] = mapped_column(
        JSONType, nullable=True
    )  # {"size": ..., "color": ..., "variant_sku": ...}

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    __table_args__ = (Index("ix_order_items_order_product", "order_id", "product_id"),)

    # Relationships
    order = relationship("Order", back_populates="items")

    def __repr__(self):
        return f"<OrderItem {self.product_name} qty={self.quantity}>"
