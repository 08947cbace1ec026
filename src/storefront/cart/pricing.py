"""Cart lines resolved against the live catalog."""

from dataclasses import dataclass, field

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product


@dataclass
class PricedLine:
    product: Product
    quantity: int
    variant: str | None = None
    item_id: str | None = None

    @property
    def line_total(self) -> float:
        return round(self.product.actual_price * self.quantity, 2)


@dataclass
class PricedCart:
    lines: list[PricedLine] = field(default_factory=list)

    @property
    def cart_total(self) -> float:
        return round(sum(line.line_total for line in self.lines), 2)

    @property
    def items_count(self) -> int:
        return sum(line.quantity for line in self.lines)


def price_lines(entries) -> PricedCart:
    """Resolve (product_id, quantity, variant, item_id) entries.

    Lines whose product no longer exists or has been withdrawn are dropped
    from the priced view.
    """
    repo = current_domain.repository_for(Product)
    cart = PricedCart()
    for entry in entries:
        try:
            product = repo.get(entry["product_id"])
        except ObjectNotFoundError:
            continue
        if not product.is_active:
            continue
        cart.lines.append(
            PricedLine(
                product=product,
                quantity=int(entry.get("quantity", 1)),
                variant=entry.get("variant"),
                item_id=entry.get("item_id"),
            )
        )
    return cart


def price_user_cart(user) -> PricedCart:
    return price_lines(
        {"product_id": i.product_id, "quantity": i.quantity, "variant": i.variant, "item_id": i.id}
        for i in user.cart_items
    )
