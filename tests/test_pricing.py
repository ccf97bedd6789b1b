from decimal import Decimal
from types import SimpleNamespace

from storefront.services import pricing


def _product(price, discount="0"):
    return SimpleNamespace(price=Decimal(price), discount=Decimal(discount))


def _variant(modifier):
    return SimpleNamespace(price_modifier=Decimal(modifier))


def test_line_total_applies_discount_and_variant_modifier():
    product = _product("100", "20")
    variant = _variant("5")

    assert pricing.unit_price(product, variant) == Decimal("85")
    assert pricing.line_total(product, variant, 3) == Decimal("255")


def test_totals_above_free_shipping_threshold():
    totals = pricing.cart_totals([(_product("100", "20"), _variant("5"), 3)])

    assert totals.subtotal == Decimal("255")
    assert totals.taxes == Decimal("15.30")
    assert totals.shipping == Decimal("0")
    assert totals.total == Decimal("270.30")


def test_shipping_threshold_is_strict():
    assert pricing.summarize(Decimal("50")).shipping == Decimal("9.99")
    assert pricing.summarize(Decimal("100")).shipping == Decimal("9.99")
    assert pricing.summarize(Decimal("100.01")).shipping == Decimal("0")


def test_small_cart_total_includes_taxes_and_shipping():
    totals = pricing.summarize(Decimal("50"))

    assert totals.taxes == Decimal("3.00")
    assert abs(totals.total - Decimal("62.99")) < Decimal("0.01")


def test_discount_larger_than_price_is_not_clamped():
    assert pricing.unit_price(_product("10", "15")) == Decimal("-5")


def test_float_prices_do_not_drift():
    product = SimpleNamespace(price=899.99, discount=150.0)

    assert pricing.unit_price(product) == Decimal("749.99")


def test_lines_without_product_are_left_out():
    totals = pricing.cart_totals([(None, None, 4), (_product("30"), None, 2)])

    assert totals.subtotal == Decimal("60")


def test_empty_cart_still_charges_shipping():
    totals = pricing.cart_totals([])

    assert totals.subtotal == Decimal("0")
    assert totals.shipping == Decimal("9.99")
