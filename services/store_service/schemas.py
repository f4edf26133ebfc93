"""Pydantic schemas for store service."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field, field_validator
from services.store_service.models import (
    Locale,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    SalesPeriod,
    ShippingMethod,
)

# ============================================================================
# CATEGORY SCHEMAS
# ============================================================================


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str  # Resolved for the request locale
    name_en: str
    name_id: str
    slug: str
    description: Optional[str] = None
    image: Optional[str] = None
    is_active: bool


# ============================================================================
# PRODUCT SCHEMAS
# ============================================================================


class ProductBase(BaseModel):
    category_id: uuid.UUID
    name_en: str = Field(..., min_length=1, max_length=255)
    name_id: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255)
    description_en: Optional[str] = None
    description_id: Optional[str] = None
    short_description_en: Optional[str] = None
    short_description_id: Optional[str] = None
    base_price: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2)
    sku: str = Field(..., min_length=1, max_length=255)
    stock_quantity: int = Field(..., ge=0)
    weight: Optional[Decimal] = Field(None, ge=0, max_digits=8, decimal_places=2)
    images: list[AnyHttpUrl] = Field(default_factory=list)
    is_active: bool = True
    is_featured: bool = False


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    category_id: Optional[uuid.UUID] = None
    name_en: Optional[str] = Field(None, min_length=1, max_length=255)
    name_id: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, min_length=1, max_length=255)
    description_en: Optional[str] = None
    description_id: Optional[str] = None
    short_description_en: Optional[str] = None
    short_description_id: Optional[str] = None
    base_price: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
    sku: Optional[str] = Field(None, min_length=1, max_length=255)
    stock_quantity: Optional[int] = Field(None, ge=0)
    weight: Optional[Decimal] = Field(None, ge=0, max_digits=8, decimal_places=2)
    images: Optional[list[AnyHttpUrl]] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None


class ProductVariantBase(BaseModel):
    size: Optional[str] = Field(None, max_length=50)
    color: Optional[str] = Field(None, max_length=50)
    sku: str = Field(..., min_length=1, max_length=255)
    price_adjustment: Decimal = Field(Decimal("0"), max_digits=10, decimal_places=2)
    stock_quantity: int = Field(0, ge=0)
    image: Optional[str] = Field(None, max_length=512)
    is_active: bool = True


class ProductVariantCreate(ProductVariantBase):
    pass


class ProductVariantUpdate(BaseModel):
    size: Optional[str] = Field(None, max_length=50)
    color: Optional[str] = Field(None, max_length=50)
    sku: Optional[str] = Field(None, min_length=1, max_length=255)
    price_adjustment: Optional[Decimal] = Field(None, max_digits=10, decimal_places=2)
    stock_quantity: Optional[int] = Field(None, ge=0)
    image: Optional[str] = Field(None, max_length=512)
    is_active: Optional[bool] = None


class ProductVariantResponse(ProductVariantBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    product_id: uuid.UUID
    display_name: str
    final_price: Decimal
    created_at: datetime
    updated_at: datetime


class ProductResponse(BaseModel):
    """Localized product card."""

    id: uuid.UUID
    category_id: uuid.UUID
    name: str
    short_description: Optional[str] = None
    slug: str
    sku: str
    base_price: Decimal
    formatted_price: str
    stock_quantity: int
    images: list[str] = []
    is_active: bool
    is_featured: bool
    created_at: datetime


class ProductDetail(ProductResponse):
    """Full product detail with bilingual copy, variants and category."""

    name_en: str
    name_id: str
    description: Optional[str] = None
    description_en: Optional[str] = None
    description_id: Optional[str] = None
    short_description_en: Optional[str] = None
    short_description_id: Optional[str] = None
    weight: Optional[Decimal] = None
    updated_at: datetime
    variants: list[ProductVariantResponse] = []
    category: Optional[CategoryResponse] = None


class ProductListResponse(BaseModel):
    """Paginated product list."""

    items: list[ProductResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class ProductPageResponse(BaseModel):
    product: ProductDetail
    related_products: list[ProductResponse]


class HomeResponse(BaseModel):
    featured_products: list[ProductResponse]
    locale: Locale


# ============================================================================
# CART SCHEMAS
# ============================================================================


class CartItemCreate(BaseModel):
    product_id: uuid.UUID
    product_variant_id: Optional[uuid.UUID] = None
    quantity: int = Field(..., ge=1)


class CartItemUpdate(BaseModel):
    quantity: int = Field(..., ge=1)


class CartItemResponse(BaseModel):
    id: uuid.UUID
    product_id: uuid.UUID
    product_variant_id: Optional[uuid.UUID] = None
    quantity: int
    price: Decimal
    line_total: Decimal
    product_name: Optional[str] = None
    product_slug: Optional[str] = None
    sku: Optional[str] = None
    variant_name: Optional[str] = None
    image_url: Optional[str] = None


class CartSummary(BaseModel):
    subtotal: Decimal
    tax_amount: Decimal
    shipping_cost: Decimal
    total: Decimal
    shipping_method: ShippingMethod


class CartResponse(BaseModel):
    items: list[CartItemResponse]
    summary: CartSummary


# ============================================================================
# CHECKOUT SCHEMAS
# ============================================================================


class Address(BaseModel):
    name: str = Field(..., max_length=255)
    phone: str = Field(..., max_length=20)
    address: str
    city: str = Field(..., max_length=255)
    postal_code: str = Field(..., max_length=10)

    @field_validator("name", "phone", "address", "city", "postal_code")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("This field is required")
        return v


class CheckoutRequest(BaseModel):
    billing_address: Address
    shipping_address: Address
    payment_method: PaymentMethod
    shipping_method: ShippingMethod
    notes: Optional[str] = None


# ============================================================================
# ORDER SCHEMAS
# ============================================================================


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    product_id: Optional[uuid.UUID] = None
    product_variant_id: Optional[uuid.UUID] = None
    quantity: int
    price: Decimal
    total: Decimal
    product_name: str
    product_sku: str
    product_details: Optional[dict] = None


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    order_number: str
    user_id: Optional[str] = None
    status: OrderStatus
    subtotal: Decimal
    tax_amount: Decimal
    shipping_cost: Decimal
    total: Decimal
    currency: str
    billing_address: dict
    shipping_address: dict
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    shipping_method: ShippingMethod
    notes: Optional[str] = None
    locale: str
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    items: list[OrderItemResponse] = []


class OrderListResponse(BaseModel):
    items: list[OrderResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


# ============================================================================
# ADMIN DASHBOARD SCHEMAS
# ============================================================================


class DashboardStats(BaseModel):
    total_products: int
    active_products: int
    total_categories: int
    total_customers: int
    total_orders: int
    pending_orders: int


class SalesSeries(BaseModel):
    labels: list[str]
    orders: list[int]
    sales: list[Decimal]
    average_order_value: list[Decimal]


class TopProduct(BaseModel):
    id: uuid.UUID
    name: str
    sku: str
    total_sold: int


class DashboardResponse(BaseModel):
    stats: DashboardStats
    sales_data: SalesSeries
    recent_orders: list[OrderResponse]
    top_products: list[TopProduct]
    period: SalesPeriod


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
