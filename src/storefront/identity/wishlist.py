"""Wishlist commands."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.identity.user import User


@storefront.command(part_of="User")
class AddToWishlist:
    user_id: Identifier(required=True)
    product_id: Identifier(required=True)


@storefront.command(part_of="User")
class RemoveFromWishlist:
    user_id: Identifier(required=True)
    product_id: Identifier(required=True)


@storefront.command_handler(part_of=User)
class WishlistHandler:
    @handle(AddToWishlist)
    def add_to_wishlist(self, command):
        # Unknown products raise ObjectNotFoundError
        current_domain.repository_for(Product).get(command.product_id)

        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.add_to_wishlist(command.product_id)
        repo.add(user)

    @handle(RemoveFromWishlist)
    def remove_from_wishlist(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.remove_from_wishlist(command.product_id)
        repo.add(user)
