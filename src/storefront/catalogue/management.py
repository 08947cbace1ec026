"""Admin product management: create, update, withdraw, attach images."""

import json

from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_UPDATABLE = (
    "name",
    "brand",
    "category",
    "sub_category",
    "price",
    "discount_price",
    "description",
    "ingredients",
    "how_to_use",
    "stock",
    "is_featured",
    "is_new",
    "weight",
    "images",
    "benefits",
    "skin_types",
    "tags",
)


@storefront.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=100)
    brand: String(required=True, max_length=100)
    category: String(required=True, max_length=50)
    sub_category: String(max_length=100)
    price: Float(required=True, min_value=0.0)
    discount_price: Float(min_value=0.0)
    description: Text(required=True)
    ingredients: Text()
    how_to_use: Text()
    stock: Integer(default=0)
    is_featured: Boolean(default=False)
    is_new: Boolean(default=False)
    weight: String(max_length=50)
    images: Text()  # JSON list of URLs
    benefits: Text()  # JSON list
    skin_types: Text()  # JSON list
    tags: Text()  # JSON list
    variants: Text()  # JSON list of {name, price, stock, sku}


@storefront.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    name: String(max_length=100)
    brand: String(max_length=100)
    category: String(max_length=50)
    sub_category: String(max_length=100)
    price: Float(min_value=0.0)
    discount_price: Float(min_value=0.0)
    description: Text()
    ingredients: Text()
    how_to_use: Text()
    stock: Integer()
    is_featured: Boolean()
    is_new: Boolean()
    weight: String(max_length=50)
    images: Text()
    benefits: Text()
    skin_types: Text()
    tags: Text()


@storefront.command(part_of="Product")
class WithdrawProduct:
    product_id: Identifier(required=True)


@storefront.command(part_of="Product")
class AttachProductImages:
    product_id: Identifier(required=True)
    urls: Text(required=True)  # JSON list of URLs


@storefront.command_handler(part_of=Product)
class ProductManagementHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        details = {
            field: getattr(command, field)
            for field in _UPDATABLE
            if field not in ("name", "brand", "category", "price", "description")
            and getattr(command, field) is not None
        }
        product = Product.create(
            name=command.name,
            brand=command.brand,
            category=command.category,
            price=command.price,
            description=command.description,
            **details,
        )
        for variant in json.loads(command.variants) if command.variants else []:
            product.add_variant(
                name=variant["name"],
                price=variant.get("price"),
                stock=variant.get("stock", 0),
                sku=variant.get("sku"),
            )

        current_domain.repository_for(Product).add(product)
        logger.info("Product created", product_id=str(product.id), name=product.name)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        changes = {field: getattr(command, field) for field in _UPDATABLE if getattr(command, field) is not None}
        if changes:
            product.update_details(**changes)
            repo.add(product)

    @handle(WithdrawProduct)
    def withdraw_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.withdraw()
        repo.add(product)
        logger.info("Product withdrawn", product_id=str(product.id))

    @handle(AttachProductImages)
    def attach_images(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.attach_images(json.loads(command.urls))
        repo.add(product)
