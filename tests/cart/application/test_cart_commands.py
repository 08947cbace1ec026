"""Application tests for the stored cart via domain.process()."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartItem
from storefront.cart.pricing import price_lines, price_user_cart
from storefront.cart.sync import SyncGuestCart
from storefront.catalogue.management import WithdrawProduct
from storefront.catalogue.product import Product
from storefront.identity.user import User


def _user(user):
    return current_domain.repository_for(User).get(user.id)


def _add(user, product, quantity=1, variant=None):
    return current_domain.process(
        AddToCart(user_id=user.id, product_id=product.id, quantity=quantity, variant=variant),
        asynchronous=False,
    )


class TestAddToCart:
    def test_add(self, make_user, make_product):
        user = make_user()
        product = make_product(stock=5)

        item_id = _add(user, product, 2)

        items = _user(user).cart_items
        assert [(i.id, i.quantity) for i in items] == [(item_id, 2)]

    def test_repeat_add_merges_into_one_line(self, make_user, make_product):
        user = make_user()
        product = make_product(stock=5)

        _add(user, product, 1, "Rose")
        _add(user, product, 2, "Rose")

        assert [i.quantity for i in _user(user).cart_items] == [3]

    def test_more_than_stock(self, make_user, make_product):
        user = make_user()
        product = make_product(stock=2)

        with pytest.raises(ValidationError) as exc:
            _add(user, product, 3)
        assert exc.value.messages["quantity"] == ["Insufficient stock"]
        assert len(_user(user).cart_items) == 0

    def test_withdrawn_product(self, make_user, make_product):
        user = make_user()
        product = make_product()
        current_domain.process(WithdrawProduct(product_id=product.id), asynchronous=False)

        with pytest.raises(ObjectNotFoundError):
            _add(user, product)

    def test_zero_quantity_is_rejected(self, make_user, make_product):
        user = make_user()
        product = make_product()

        with pytest.raises(ValidationError):
            AddToCart(user_id=user.id, product_id=product.id, quantity=0)


class TestEditCart:
    def test_update_quantity(self, make_user, make_product):
        user = make_user()
        item_id = _add(user, make_product(stock=5))

        current_domain.process(UpdateCartItem(user_id=user.id, item_id=item_id, quantity=4), asynchronous=False)

        assert _user(user).cart_items[0].quantity == 4

    def test_update_beyond_stock(self, make_user, make_product):
        user = make_user()
        item_id = _add(user, make_product(stock=5))

        with pytest.raises(ValidationError):
            current_domain.process(UpdateCartItem(user_id=user.id, item_id=item_id, quantity=6), asynchronous=False)

    def test_remove(self, make_user, make_product):
        user = make_user()
        item_id = _add(user, make_product())

        current_domain.process(RemoveFromCart(user_id=user.id, item_id=item_id), asynchronous=False)

        assert len(_user(user).cart_items) == 0

    def test_remove_unknown_line(self, make_user):
        user = make_user()

        with pytest.raises(ObjectNotFoundError):
            current_domain.process(RemoveFromCart(user_id=user.id, item_id="missing"), asynchronous=False)

    def test_clear(self, make_user, make_product):
        user = make_user()
        _add(user, make_product(name="A"))
        _add(user, make_product(name="B"))

        current_domain.process(ClearCart(user_id=user.id), asynchronous=False)

        assert len(_user(user).cart_items) == 0


class TestSyncGuestCart:
    def test_guest_lines_merge_into_stored_cart(self, make_user, make_product):
        user = make_user()
        product = make_product(stock=10)
        _add(user, product, 1)

        current_domain.process(
            SyncGuestCart(user_id=user.id, guest_cart=json.dumps([{"product_id": product.id, "quantity": 2}])),
            asynchronous=False,
        )

        items = _user(user).cart_items
        assert len(items) == 1
        assert items[0].quantity == 3

    def test_empty_guest_cart_is_a_no_op(self, make_user):
        user = make_user()

        current_domain.process(SyncGuestCart(user_id=user.id, guest_cart="[]"), asynchronous=False)

        assert len(_user(user).cart_items) == 0

    def test_line_without_product(self, make_user):
        user = make_user()

        with pytest.raises(ValidationError):
            current_domain.process(
                SyncGuestCart(user_id=user.id, guest_cart=json.dumps([{"quantity": 1}])),
                asynchronous=False,
            )


class TestCartPricing:
    def test_user_cart_reflects_current_prices(self, make_user, make_product):
        user = make_user()
        product = make_product(price=1000.0, stock=5)
        _add(user, product, 2)

        stored = current_domain.repository_for(Product).get(product.id)
        stored.update_details(discount_price=800.0)
        current_domain.repository_for(Product).add(stored)

        cart = price_user_cart(_user(user))
        assert cart.cart_total == 1600.0

    def test_missing_products_are_dropped(self, make_product):
        product = make_product(price=250.0)

        cart = price_lines(
            [
                {"product_id": product.id, "quantity": 2},
                {"product_id": "gone", "quantity": 1},
            ]
        )

        assert [line.product.id for line in cart.lines] == [product.id]
        assert cart.cart_total == 500.0

    def test_withdrawn_products_are_dropped(self, make_user, make_product):
        user = make_user()
        kept = make_product(name="Kept", price=300.0, stock=5)
        withdrawn = make_product(name="Withdrawn", price=900.0, stock=5)
        _add(user, kept, 1)
        _add(user, withdrawn, 1)

        current_domain.process(WithdrawProduct(product_id=withdrawn.id), asynchronous=False)

        cart = price_user_cart(_user(user))
        assert [line.product.id for line in cart.lines] == [kept.id]
        assert cart.cart_total == 300.0
        assert cart.items_count == 1
