"""BDD tests for product reviews and verified purchases."""

from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, scenarios, then, when

from storefront.catalogue.product import Product
from storefront.catalogue.reviews import AddReview

scenarios("features/product_reviews.feature")


def _stored(product):
    return current_domain.repository_for(Product).get(product.id)


def _review_by(product, shopper):
    return next(r for r in _stored(product).reviews if r.user_id == shopper.id)


@given(parsers.cfparse('a product "{name}" in the catalog'), target_fixture="product")
def product_in_catalog(make_product, name):
    return make_product(name=name, stock=20)


@given(parsers.cfparse('shoppers "{first}", "{second}" and "{third}"'))
def three_shoppers(make_user, shoppers, first, second, third):
    for name in (first, second, third):
        shoppers[name] = make_user(name=name, email=f"{name.lower()}@example.com")


@given(parsers.cfparse('"{name}" has ordered the product'))
def has_ordered(place_order, shoppers, product, name):
    place_order([(product, 1)], user=shoppers[name])


@given(parsers.cfparse('"{name}" rates it {rating:d}'))
@when(parsers.cfparse('"{name}" rates it {rating:d}'))
def rates_it(shoppers, product, error, name, rating):
    try:
        current_domain.process(
            AddReview(product_id=product.id, user_id=shoppers[name].id, rating=rating, comment="Tried it"),
            asynchronous=False,
        )
    except ValidationError as exc:
        error["exc"] = exc


@then(parsers.cfparse("the product is rated {rating:f} from {count:d} reviews"))
def product_rated(product, rating, count):
    stored = _stored(product)
    assert stored.rating == rating
    assert stored.num_reviews == count


@then("the review is refused")
def review_refused(error):
    assert isinstance(error["exc"], ValidationError)
    assert error["exc"].messages["reviews"] == ["Product already reviewed"]


@then(parsers.cfparse('the review by "{name}" is a verified purchase'))
def verified(shoppers, product, name):
    assert _review_by(product, shoppers[name]).verified_purchase is True


@then(parsers.cfparse('the review by "{name}" is not a verified purchase'))
def not_verified(shoppers, product, name):
    assert _review_by(product, shoppers[name]).verified_purchase is False
