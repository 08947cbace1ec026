"""Application tests for admin product management via domain.process()."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.catalogue.management import AttachProductImages, CreateProduct, UpdateProduct, WithdrawProduct
from storefront.catalogue.product import Product


def _create(**overrides):
    fields = {
        "name": "Vitamin C Serum",
        "brand": "Glow Lab",
        "category": "Skincare",
        "price": 2500.0,
        "description": "Brightening serum.",
        "stock": 10,
    }
    fields.update(overrides)
    return current_domain.process(CreateProduct(**fields), asynchronous=False)


class TestCreateProduct:
    def test_create(self):
        product_id = _create(skin_types=json.dumps(["Dry"]))

        product = current_domain.repository_for(Product).get(product_id)
        assert product.name == "Vitamin C Serum"
        assert product.stock == 10
        assert product.skin_type_list == ["Dry"]

    def test_create_with_variants(self):
        product_id = _create(variants=json.dumps([{"name": "30ml", "stock": 4}, {"name": "50ml", "price": 3200}]))

        product = current_domain.repository_for(Product).get(product_id)
        assert sorted(v.name for v in product.variants) == ["30ml", "50ml"]
        prices = {v.name: v.price for v in product.variants}
        assert prices == {"30ml": 2500.0, "50ml": 3200.0}

    def test_invalid_discount(self):
        with pytest.raises(ValidationError):
            _create(discount_price=9999.0)


class TestUpdateProduct:
    def test_partial_update(self):
        product_id = _create()

        current_domain.process(UpdateProduct(product_id=product_id, price=2700.0, is_featured=True), asynchronous=False)

        product = current_domain.repository_for(Product).get(product_id)
        assert product.price == 2700.0
        assert product.is_featured is True
        assert product.name == "Vitamin C Serum"

    def test_unknown_product(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(UpdateProduct(product_id="missing", price=1.0), asynchronous=False)


class TestWithdrawProduct:
    def test_withdrawn_product_is_hidden(self):
        product_id = _create()

        current_domain.process(WithdrawProduct(product_id=product_id), asynchronous=False)

        repo = current_domain.repository_for(Product)
        assert repo.get(product_id).is_active is False
        with pytest.raises(ObjectNotFoundError):
            repo.get_active(product_id)
        assert repo.search().total == 0


class TestAttachProductImages:
    def test_attach(self):
        product_id = _create(images=json.dumps(["/uploads/a.jpg"]))

        current_domain.process(
            AttachProductImages(product_id=product_id, urls=json.dumps(["/uploads/b.jpg"])),
            asynchronous=False,
        )

        assert current_domain.repository_for(Product).get(product_id).image_list == [
            "/uploads/a.jpg",
            "/uploads/b.jpg",
        ]
