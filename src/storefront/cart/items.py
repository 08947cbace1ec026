"""Stored-cart commands for signed-in shoppers.

Additions and quantity changes are checked against current stock; the
check is advisory, stock is only taken at checkout.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.identity.user import User


@storefront.command(part_of="User")
class AddToCart:
    user_id: Identifier(required=True)
    product_id: Identifier(required=True)
    quantity: Integer(default=1, min_value=1)
    variant: String(max_length=100)


@storefront.command(part_of="User")
class UpdateCartItem:
    user_id: Identifier(required=True)
    item_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)


@storefront.command(part_of="User")
class RemoveFromCart:
    user_id: Identifier(required=True)
    item_id: Identifier(required=True)


@storefront.command(part_of="User")
class ClearCart:
    user_id: Identifier(required=True)


def ensure_in_stock(product: Product, quantity: int) -> None:
    if not product.has_stock(quantity):
        raise ValidationError({"quantity": ["Insufficient stock"]})


def _cart_item(user: User, item_id):
    item = next((i for i in user.cart_items if i.id == item_id), None)
    if item is None:
        raise ObjectNotFoundError("Cart item not found")
    return item


@storefront.command_handler(part_of=User)
class CartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = current_domain.repository_for(Product).get_active(command.product_id)
        ensure_in_stock(product, command.quantity)

        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        line = user.add_to_cart(product.id, command.quantity, command.variant)
        repo.add(user)
        return str(line.id)

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        item = _cart_item(user, command.item_id)

        product = current_domain.repository_for(Product).get(item.product_id)
        ensure_in_stock(product, command.quantity)

        user.update_cart_item(item.id, command.quantity)
        repo.add(user)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        _cart_item(user, command.item_id)

        user.remove_cart_item(command.item_id)
        repo.add(user)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.clear_cart()
        repo.add(user)
