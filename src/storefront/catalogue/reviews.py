"""Product reviews."""

from protean import handle
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.identity.user import User
from storefront.ordering.order import Order


@storefront.command(part_of="Product")
class AddReview:
    product_id: Identifier(required=True)
    user_id: Identifier(required=True)
    rating: Integer(required=True, min_value=1, max_value=5)
    comment: Text(required=True)


@storefront.command_handler(part_of=Product)
class ReviewHandler:
    @handle(AddReview)
    def add_review(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get_active(command.product_id)
        user = current_domain.repository_for(User).get(command.user_id)

        verified = current_domain.repository_for(Order).has_purchased(command.user_id, command.product_id)
        review = product.add_review(
            user_id=user.id,
            name=user.name,
            rating=command.rating,
            comment=command.comment,
            verified_purchase=verified,
        )
        repo.add(product)
        return str(review.id)
