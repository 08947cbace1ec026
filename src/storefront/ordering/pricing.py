"""Checkout totals. Shipping is free above the threshold, tax is a flat rate."""

from dataclasses import dataclass

FREE_SHIPPING_THRESHOLD = 2000.0
SHIPPING_FEE = 200.0
TAX_RATE = 0.05


@dataclass(frozen=True)
class OrderTotals:
    items_price: float
    shipping_price: float
    tax_price: float
    total_price: float


def calculate_totals(items_price: float) -> OrderTotals:
    items_price = round(items_price, 2)
    shipping_price = 0.0 if items_price > FREE_SHIPPING_THRESHOLD else SHIPPING_FEE
    tax_price = round(items_price * TAX_RATE, 2)
    return OrderTotals(
        items_price=items_price,
        shipping_price=shipping_price,
        tax_price=tax_price,
        total_price=round(items_price + shipping_price + tax_price, 2),
    )


def line_total(lines) -> float:
    """Sum of price x quantity over anything exposing both."""
    return round(sum(line.price * line.quantity for line in lines), 2)
