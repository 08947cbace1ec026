"""Order placement: stock check, stock decrement, order snapshot.

The handler sums the requested quantity per product and checks each total
against stock before touching any product, so a failing line rejects the
whole order. The decrement pass runs afterwards without a lock; a
concurrent order between the two passes can take the same units.
"""

import json
from collections import Counter

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.ordering.order import GuestUser, Order, PaymentMethod, ShippingAddress
from storefront.shared.email import validated_email
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier()
    items = Text(required=True)  # JSON: [{product_id, quantity, variant}]
    shipping_address = Text(required=True)  # JSON: address dict
    payment_method = String(required=True, choices=PaymentMethod)
    guest_user = Text()  # JSON: {name, email, phone}, required without user_id
    notes = Text()


def _requested_lines(raw_items) -> list[dict]:
    items = json.loads(raw_items) if isinstance(raw_items, str) else raw_items
    if not items:
        raise ValidationError({"order_items": ["No order items"]})

    lines = []
    for item in items:
        quantity = int(item.get("quantity") or 0)
        if quantity < 1:
            raise ValidationError({"order_items": ["Quantity must be at least 1"]})
        lines.append({"product_id": item["product_id"], "quantity": quantity, "variant": item.get("variant")})
    return lines


def _shipping_address(raw_address) -> ShippingAddress:
    data = json.loads(raw_address) if isinstance(raw_address, str) else raw_address
    return ShippingAddress(
        name=data.get("name"),
        address=data.get("address"),
        city=data.get("city"),
        state=data.get("state"),
        postal_code=data.get("postal_code"),
        country=data.get("country") or "Pakistan",
        phone=data.get("phone"),
    )


def _guest(raw_guest) -> GuestUser:
    data = json.loads(raw_guest) if raw_guest else None
    if not data:
        raise ValidationError({"guest_user": ["Guest name and email are required to order without an account"]})
    return GuestUser(name=data.get("name"), email=validated_email(data.get("email")), phone=data.get("phone"))


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        lines = _requested_lines(command.items)
        shipping_address = _shipping_address(command.shipping_address)
        guest_user = None if command.user_id else _guest(command.guest_user)

        product_repo = current_domain.repository_for(Product)

        # Lines for the same product draw on the same stock
        requested = Counter()
        for line in lines:
            requested[line["product_id"]] += line["quantity"]

        # Check pass: every product must cover its total before anything changes
        products: dict[str, Product] = {}
        for product_id, quantity in requested.items():
            product = product_repo.get(product_id)
            if not product.is_active:
                raise ObjectNotFoundError(f"Product {product_id} not found")
            if not product.has_stock(quantity):
                raise ValidationError(
                    {"order_items": [f"Insufficient stock for {product.name}. Available: {product.stock}"]}
                )
            products[product_id] = product

        # Write pass: snapshot the line, then take the units out of stock
        snapshot = []
        for line in lines:
            product = products[line["product_id"]]
            snapshot.append(
                {
                    "product_id": product.id,
                    "name": product.name,
                    "quantity": line["quantity"],
                    "image": product.primary_image,
                    "price": product.actual_price,
                    "variant": line["variant"],
                }
            )
            product.record_sale(line["quantity"])

        for product in products.values():
            product_repo.add(product)

        order = Order.place(
            items=snapshot,
            shipping_address=shipping_address,
            payment_method=command.payment_method,
            user_id=command.user_id,
            guest_user=guest_user,
            notes=command.notes,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            user_id=str(command.user_id) if command.user_id else None,
            guest=guest_user is not None,
            total=order.total_price,
        )
        return str(order.id)
