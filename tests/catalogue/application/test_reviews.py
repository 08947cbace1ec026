"""Application tests for product reviews and rating aggregation."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.catalogue.management import WithdrawProduct
from storefront.catalogue.product import Product
from storefront.catalogue.reviews import AddReview


def _review(product, user, rating, comment="Nice"):
    return current_domain.process(
        AddReview(product_id=product.id, user_id=user.id, rating=rating, comment=comment),
        asynchronous=False,
    )


class TestAddReview:
    def test_ratings_are_averaged(self, make_user, make_product):
        product = make_product()
        shoppers = [make_user(name=f"Shopper {i}", email=f"s{i}@example.com") for i in range(3)]

        for shopper, rating in zip(shoppers, (5, 3, 4), strict=True):
            _review(product, shopper, rating)

        stored = current_domain.repository_for(Product).get(product.id)
        assert stored.rating == 4.0
        assert stored.num_reviews == 3

    def test_review_carries_reviewer_name(self, make_user, make_product):
        product = make_product()
        user = make_user(name="Sana Malik", email="sana@example.com")

        _review(product, user, 5)

        review = current_domain.repository_for(Product).get(product.id).reviews[0]
        assert review.name == "Sana Malik"
        assert review.verified_purchase is False

    def test_second_review_by_same_user_is_rejected(self, make_user, make_product):
        product = make_product()
        user = make_user()
        _review(product, user, 5)

        with pytest.raises(ValidationError):
            _review(product, user, 2)

        assert current_domain.repository_for(Product).get(product.id).num_reviews == 1

    def test_withdrawn_product_cannot_be_reviewed(self, make_user, make_product):
        product = make_product()
        user = make_user()
        current_domain.process(WithdrawProduct(product_id=product.id), asynchronous=False)

        with pytest.raises(ObjectNotFoundError):
            _review(product, user, 4)
