"""Product aggregate root with embedded Review and Variant entities."""

import json
from datetime import datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text

from storefront.domain import storefront

# Fields holding JSON-encoded lists
_LIST_FIELDS = ("images", "benefits", "skin_types", "tags")

_EDITABLE = (
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
    *_LIST_FIELDS,
)


class SkinType(Enum):
    ALL = "All"
    OILY = "Oily"
    DRY = "Dry"
    COMBINATION = "Combination"
    SENSITIVE = "Sensitive"
    NORMAL = "Normal"


def _encode_list(value):
    if value is None or isinstance(value, str):
        return value
    return json.dumps(list(value))


def _decode_list(value) -> list:
    return json.loads(value) if value else []


@storefront.entity(part_of="Product")
class Review:
    """A shopper's review. One per user per product."""

    user_id: Identifier(required=True)
    name: String(required=True, max_length=50)
    rating: Integer(required=True, min_value=1, max_value=5)
    comment: Text(required=True)
    verified_purchase: Boolean(default=False)
    created_at: DateTime(default=datetime.now)


@storefront.entity(part_of="Product")
class Variant:
    """A sellable option of a product (shade, size).

    `stock` is shown on the product page only. Cart and order stock checks
    run against the product's own `stock`.
    """

    name: String(required=True, max_length=100)
    price: Float(min_value=0.0)
    stock: Integer(default=0)
    sku: String(max_length=64)


@storefront.aggregate
class Product:
    """Catalog entry.

    `stock` is intentionally not floored at zero: the order flow checks stock
    before it decrements but does not lock in between.
    """

    name: String(required=True, max_length=100)
    brand: String(required=True, max_length=100)
    category: String(required=True, max_length=50)
    sub_category: String(max_length=100)
    price: Float(required=True, min_value=0.0)
    discount_price: Float(min_value=0.0, default=0.0)
    images: Text()
    description: Text(required=True)
    ingredients: Text()
    how_to_use: Text()
    benefits: Text()
    skin_types: Text()
    stock: Integer(default=0)
    sold: Integer(default=0)
    rating: Float(default=0.0)
    num_reviews: Integer(default=0)
    reviews: HasMany(Review)
    variants: HasMany(Variant)
    tags: Text()
    is_featured: Boolean(default=False)
    is_new: Boolean(default=False)
    is_active: Boolean(default=True)
    weight: String(max_length=50)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @invariant.post
    def skin_types_must_be_known(self):
        allowed = {s.value for s in SkinType}
        unknown = [s for s in _decode_list(self.skin_types) if s not in allowed]
        if unknown:
            raise ValidationError({"skin_types": [f"Unknown skin type(s): {', '.join(unknown)}"]})

    @invariant.post
    def discount_cannot_exceed_price(self):
        if self.discount_price and self.price is not None and self.discount_price > self.price:
            raise ValidationError({"discount_price": ["Discount price cannot be higher than the price"]})

    @classmethod
    def create(cls, name, brand, category, price, description, **details):
        from storefront.catalogue.events import ProductCreated

        for field in _LIST_FIELDS:
            if field in details:
                details[field] = _encode_list(details[field])

        now = datetime.now()
        product = cls(
            name=name,
            brand=brand,
            category=category,
            price=price,
            description=description,
            created_at=now,
            updated_at=now,
            **details,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=product.name,
                brand=product.brand,
                category=product.category,
                price=product.price,
                stock=product.stock,
                created_at=now,
            )
        )
        return product

    @property
    def actual_price(self) -> float:
        """The price a shopper pays: the discount price when one is set."""
        if self.discount_price and self.discount_price > 0:
            return self.discount_price
        return self.price

    @property
    def image_list(self) -> list[str]:
        return _decode_list(self.images)

    @property
    def primary_image(self) -> str | None:
        images = self.image_list
        return images[0] if images else None

    @property
    def benefit_list(self) -> list[str]:
        return _decode_list(self.benefits)

    @property
    def skin_type_list(self) -> list[str]:
        return _decode_list(self.skin_types)

    @property
    def tag_list(self) -> list[str]:
        return _decode_list(self.tags)

    def update_details(self, **changes):
        from storefront.catalogue.events import ProductUpdated

        unknown = set(changes) - set(_EDITABLE)
        if unknown:
            raise ValidationError({"product": [f"Unknown field(s): {', '.join(sorted(unknown))}"]})

        with atomic_change(self):
            for field, value in changes.items():
                if field in _LIST_FIELDS:
                    value = _encode_list(value)
                setattr(self, field, value)
        self.updated_at = datetime.now()

        self.raise_(ProductUpdated(product_id=self.id, changed_fields=", ".join(sorted(changes))))

    def attach_images(self, urls):
        self.images = json.dumps(self.image_list + list(urls))
        self.updated_at = datetime.now()

    def withdraw(self):
        from storefront.catalogue.events import ProductWithdrawn

        if not self.is_active:
            raise ValidationError({"product": ["Product is already withdrawn"]})

        self.is_active = False
        self.updated_at = datetime.now()
        self.raise_(ProductWithdrawn(product_id=self.id, withdrawn_at=self.updated_at))

    # Stock

    def has_stock(self, quantity: int) -> bool:
        return (self.stock or 0) >= quantity

    def record_sale(self, quantity: int):
        """Take sold units out of stock."""
        from storefront.catalogue.events import StockSold

        with atomic_change(self):
            self.stock = (self.stock or 0) - quantity
            self.sold = (self.sold or 0) + quantity
        self.raise_(StockSold(product_id=self.id, quantity=quantity, stock=self.stock))

    def reverse_sale(self, quantity: int):
        """Put units from a cancelled order back, with no upper bound."""
        from storefront.catalogue.events import StockReturned

        with atomic_change(self):
            self.stock = (self.stock or 0) + quantity
            self.sold = (self.sold or 0) - quantity
        self.raise_(StockReturned(product_id=self.id, quantity=quantity, stock=self.stock))

    # Reviews

    def add_review(self, user_id, name, rating, comment, verified_purchase=False):
        from storefront.catalogue.events import ProductReviewed

        if any(r.user_id == user_id for r in self.reviews):
            raise ValidationError({"reviews": ["Product already reviewed"]})

        review = Review(
            user_id=user_id,
            name=name,
            rating=rating,
            comment=comment,
            verified_purchase=verified_purchase,
        )
        self.add_reviews(review)
        self.updated_at = datetime.now()

        self.raise_(
            ProductReviewed(
                product_id=self.id,
                review_id=review.id,
                user_id=user_id,
                rating=rating,
                verified_purchase=verified_purchase,
            )
        )
        return review

    def recalculate_rating(self):
        """Mean rating and count over the full review list. No-op without reviews."""
        if not self.reviews:
            return

        with atomic_change(self):
            self.num_reviews = len(self.reviews)
            self.rating = sum(r.rating for r in self.reviews) / len(self.reviews)

    # Variants

    def add_variant(self, name, price=None, stock=0, sku=None):
        variant = Variant(name=name, price=price if price is not None else self.price, stock=stock, sku=sku)
        self.add_variants(variant)
        self.updated_at = datetime.now()
        return variant
