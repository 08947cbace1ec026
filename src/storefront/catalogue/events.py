"""Domain events for the Product and Category aggregates."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    brand: String(required=True)
    category: String(required=True)
    price: Float(required=True)
    stock: Integer()
    created_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    changed_fields: String()


@storefront.event(part_of="Product")
class ProductWithdrawn:
    """The product was taken out of the catalog. Existing orders keep their snapshot."""

    __version__ = 1

    product_id: Identifier(required=True)
    withdrawn_at: DateTime(required=True)


@storefront.event(part_of="Product")
class StockSold:
    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    stock: Integer(required=True)


@storefront.event(part_of="Product")
class StockReturned:
    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    stock: Integer(required=True)


@storefront.event(part_of="Product")
class ProductReviewed:
    __version__ = 1

    product_id: Identifier(required=True)
    review_id: Identifier(required=True)
    user_id: Identifier(required=True)
    rating: Integer(required=True)
    verified_purchase: Boolean(default=False)


@storefront.event(part_of="Category")
class CategoryCreated:
    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    parent_category_id: Identifier()


@storefront.event(part_of="Category")
class CategoryDeactivated:
    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)
