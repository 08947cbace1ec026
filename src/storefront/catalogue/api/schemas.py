"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from storefront.catalogue.category import Category
from storefront.catalogue.product import Product


# --- Shared sub-models ---


class ReviewSchema(BaseModel):
    id: str
    user_id: str
    name: str
    rating: int
    comment: str
    verified_purchase: bool = False
    created_at: datetime | None = None


class VariantSchema(BaseModel):
    name: str = Field(..., max_length=100)
    price: float | None = Field(None, ge=0)
    stock: int = 0
    sku: str | None = Field(None, max_length=64)


# --- Product Schemas ---


class ProductResponse(BaseModel):
    id: str
    name: str
    brand: str
    category: str
    sub_category: str | None = None
    price: float
    discount_price: float = 0.0
    actual_price: float
    images: list[str] = []
    description: str
    ingredients: str | None = None
    how_to_use: str | None = None
    benefits: list[str] = []
    skin_types: list[str] = []
    stock: int = 0
    sold: int = 0
    rating: float = 0.0
    num_reviews: int = 0
    reviews: list[ReviewSchema] = []
    variants: list[VariantSchema] = []
    tags: list[str] = []
    is_featured: bool = False
    is_new: bool = False
    weight: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_product(cls, product: Product) -> ProductResponse:
        return cls(
            id=str(product.id),
            name=product.name,
            brand=product.brand,
            category=product.category,
            sub_category=product.sub_category,
            price=product.price,
            discount_price=product.discount_price or 0.0,
            actual_price=product.actual_price,
            images=product.image_list,
            description=product.description,
            ingredients=product.ingredients,
            how_to_use=product.how_to_use,
            benefits=product.benefit_list,
            skin_types=product.skin_type_list,
            stock=product.stock or 0,
            sold=product.sold or 0,
            rating=product.rating or 0.0,
            num_reviews=product.num_reviews or 0,
            reviews=[
                ReviewSchema(
                    id=str(r.id),
                    user_id=str(r.user_id),
                    name=r.name,
                    rating=r.rating,
                    comment=r.comment,
                    verified_purchase=bool(r.verified_purchase),
                    created_at=r.created_at,
                )
                for r in product.reviews
            ],
            variants=[VariantSchema(name=v.name, price=v.price, stock=v.stock or 0, sku=v.sku) for v in product.variants],
            tags=product.tag_list,
            is_featured=bool(product.is_featured),
            is_new=bool(product.is_new),
            weight=product.weight,
            created_at=product.created_at,
        )


class ProductListResponse(BaseModel):
    products: list[ProductResponse]
    page: int
    pages: int
    total: int


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Hydrating Face Serum",
                    "brand": "Glow Lab",
                    "category": "Skincare",
                    "price": 2500,
                    "discount_price": 2100,
                    "description": "Hyaluronic acid serum for all-day hydration.",
                    "stock": 40,
                    "skin_types": ["Dry", "Normal"],
                    "tags": ["serum", "hydration"],
                }
            ]
        }
    }

    name: str = Field(..., max_length=100)
    brand: str = Field(..., max_length=100)
    category: str = Field(..., max_length=50)
    sub_category: str | None = Field(None, max_length=100)
    price: float = Field(..., ge=0)
    discount_price: float | None = Field(None, ge=0)
    description: str
    ingredients: str | None = None
    how_to_use: str | None = None
    stock: int = 0
    is_featured: bool = False
    is_new: bool = False
    weight: str | None = Field(None, max_length=50)
    images: list[str] = []
    benefits: list[str] = []
    skin_types: list[str] = []
    tags: list[str] = []
    variants: list[VariantSchema] = []


class UpdateProductRequest(BaseModel):
    name: str | None = Field(None, max_length=100)
    brand: str | None = Field(None, max_length=100)
    category: str | None = Field(None, max_length=50)
    sub_category: str | None = Field(None, max_length=100)
    price: float | None = Field(None, ge=0)
    discount_price: float | None = Field(None, ge=0)
    description: str | None = None
    ingredients: str | None = None
    how_to_use: str | None = None
    stock: int | None = None
    is_featured: bool | None = None
    is_new: bool | None = None
    weight: str | None = Field(None, max_length=50)
    images: list[str] | None = None
    benefits: list[str] | None = None
    skin_types: list[str] | None = None
    tags: list[str] | None = None


class AddReviewRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str


class ReviewIdResponse(BaseModel):
    review_id: str
    message: str = "Review added"


# --- Category Schemas ---


class CategoryResponse(BaseModel):
    id: str
    name: str
    slug: str | None = None
    description: str | None = None
    image: str | None = None
    parent_category_id: str | None = None
    display_order: int = 0
    is_active: bool = True

    @classmethod
    def from_category(cls, category: Category) -> CategoryResponse:
        return cls(
            id=str(category.id),
            name=category.name,
            slug=category.slug,
            description=category.description,
            image=category.image,
            parent_category_id=str(category.parent_category_id) if category.parent_category_id else None,
            display_order=category.display_order or 0,
            is_active=bool(category.is_active),
        )


class CategoryNode(CategoryResponse):
    children: list[CategoryNode] = []

    @classmethod
    def from_node(cls, node: dict) -> CategoryNode:
        base = CategoryResponse.from_category(node["category"])
        return cls(**base.model_dump(), children=[cls.from_node(child) for child in node["children"]])


CategoryNode.model_rebuild()


class CreateCategoryRequest(BaseModel):
    name: str = Field(..., max_length=50)
    description: str | None = Field(None, max_length=500)
    image: str | None = Field(None, max_length=500)
    parent_category_id: str | None = None
    display_order: int = 0


class UpdateCategoryRequest(BaseModel):
    name: str | None = Field(None, max_length=50)
    description: str | None = Field(None, max_length=500)
    image: str | None = Field(None, max_length=500)
    parent_category_id: str | None = None
    display_order: int | None = None


# --- Shared Response Schemas ---


class ImagesResponse(BaseModel):
    success: bool = True
    images: list[str]


class StatusResponse(BaseModel):
    status: str = "ok"
