"""Store Service models package."""

from services.store_service.models.catalog import Category, Product, ProductVariant
from services.store_service.models.commerce import CartItem, Order, OrderItem
from services.store_service.models.enums import (
    Locale,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    SalesPeriod,
    ShippingMethod,
)

__all__ = [
    "CartItem",
    "Category",
    "Locale",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentMethod",
    "PaymentStatus",
    "Product",
    "ProductVariant",
    "SalesPeriod",
    "ShippingMethod",
]
