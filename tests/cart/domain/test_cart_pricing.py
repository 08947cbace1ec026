"""Tests for priced cart lines and totals."""

from storefront.cart.pricing import PricedCart, PricedLine
from storefront.catalogue.product import Product


def _product(price, discount_price=0.0):
    return Product.create(
        name="Clay Mask",
        brand="Bloom",
        category="Skincare",
        price=price,
        discount_price=discount_price,
        description="Purifying mask.",
        stock=10,
    )


class TestPricedLine:
    def test_line_total_uses_actual_price(self):
        line = PricedLine(product=_product(1000.0, discount_price=850.0), quantity=3)
        assert line.line_total == 2550.0

    def test_line_total_is_rounded(self):
        line = PricedLine(product=_product(33.333), quantity=3)
        assert line.line_total == 100.0


class TestPricedCart:
    def test_empty_cart(self):
        cart = PricedCart()
        assert cart.cart_total == 0.0
        assert cart.items_count == 0

    def test_totals(self):
        cart = PricedCart(
            lines=[
                PricedLine(product=_product(500.0), quantity=2),
                PricedLine(product=_product(1200.0, discount_price=999.5), quantity=1),
            ]
        )

        assert cart.cart_total == 1999.5
        assert cart.items_count == 3
