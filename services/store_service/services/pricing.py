"""Cart and checkout pricing.

Pure functions over ``(quantity, price)`` rows. The cart page, the checkout
page and order placement all call ``calculate_totals`` so the figures a
shopper sees are the figures that get recorded.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Protocol

from libs.common.currency import quantize_amount
from services.store_service.models import ShippingMethod

TAX_RATE = Decimal("0.10")

# Flat IDR rates, independent of weight, distance or subtotal
SHIPPING_COSTS: dict[ShippingMethod, Decimal] = {
    ShippingMethod.REGULAR: Decimal("25000"),
    ShippingMethod.EXPRESS: Decimal("50000"),
}


class PricedRow(Protocol):
    quantity: int
    price: Decimal


@dataclass(frozen=True)
class CartTotals:
    subtotal: Decimal
    tax_amount: Decimal
    shipping_cost: Decimal
    total: Decimal
    shipping_method: ShippingMethod


def line_total(quantity: int, price: Decimal) -> Decimal:
    return quantize_amount(Decimal(price) * quantity)


def shipping_cost_for(method: ShippingMethod) -> Decimal:
    return SHIPPING_COSTS[ShippingMethod(method)]


def calculate_totals(
    rows: Iterable[PricedRow],
    shipping_method: ShippingMethod = ShippingMethod.REGULAR,
) -> CartTotals:
    """Derive subtotal, 10% tax, flat shipping and grand total."""
    subtotal = quantize_amount(
        sum((line_total(row.quantity, row.price) for row in rows), Decimal("0"))
    )
    tax_amount = quantize_amount(subtotal * TAX_RATE)
    shipping_cost = quantize_amount(shipping_cost_for(shipping_method))

    return CartTotals(
        subtotal=subtotal,
        tax_amount=tax_amount,
        shipping_cost=shipping_cost,
        total=subtotal + tax_amount + shipping_cost,
        shipping_method=ShippingMethod(shipping_method),
    )
