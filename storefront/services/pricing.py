# storefront/services/pricing.py
"""
Pricing calculator. Pure functions, no store access.

unit price = price - discount (absolute amount, not clamped) + variant modifier
line total = unit price * quantity
taxes      = subtotal * TAX_RATE
shipping   = free above FREE_SHIPPING_THRESHOLD, flat cost otherwise
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Tuple

from storefront.domain.schemas import CartTotals
from storefront.utils.settings import (
    FLAT_SHIPPING_COST,
    FREE_SHIPPING_THRESHOLD,
    TAX_RATE,
)

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    # through str so floats keep their printed value
    return Decimal(str(value))


def unit_price(product, variant=None) -> Decimal:
    price = to_decimal(product.price) - to_decimal(product.discount)
    if variant is not None:
        price += to_decimal(variant.price_modifier)
    return price


def line_total(product, variant, quantity: int) -> Decimal:
    return unit_price(product, variant) * quantity


def summarize(
    subtotal: Decimal,
    tax_rate: Decimal = TAX_RATE,
    free_shipping_threshold: Decimal = FREE_SHIPPING_THRESHOLD,
    flat_shipping: Decimal = FLAT_SHIPPING_COST,
) -> CartTotals:
    subtotal = to_decimal(subtotal)
    taxes = (subtotal * tax_rate).quantize(CENT, rounding=ROUND_HALF_UP)
    shipping = ZERO if subtotal > free_shipping_threshold else flat_shipping
    return CartTotals(
        subtotal=subtotal,
        taxes=taxes,
        shipping=shipping,
        total=subtotal + taxes + shipping,
    )


def cart_totals(lines: Iterable[Tuple[object, Optional[object], int]], **kwargs) -> CartTotals:
    """
    lines: (product, variant or None, quantity). Lines whose product is
    gone are left out of the subtotal.
    """
    subtotal = sum(
        (line_total(product, variant, quantity) for product, variant, quantity in lines if product is not None),
        ZERO,
    )
    return summarize(subtotal, **kwargs)
