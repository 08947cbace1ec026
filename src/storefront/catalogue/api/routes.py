"""FastAPI endpoints for the Catalogue: products, reviews and categories."""

import json

from fastapi import APIRouter, Depends, File, Query, UploadFile
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.api.schemas import (
    AddReviewRequest,
    CategoryNode,
    CategoryResponse,
    CreateCategoryRequest,
    CreateProductRequest,
    ImagesResponse,
    ProductListResponse,
    ProductResponse,
    ReviewIdResponse,
    StatusResponse,
    UpdateCategoryRequest,
    UpdateProductRequest,
)
from storefront.catalogue.categories import CreateCategory, DeleteCategory, UpdateCategory
from storefront.catalogue.category import Category
from storefront.catalogue.management import CreateProduct, UpdateProduct, WithdrawProduct
from storefront.catalogue.product import Product
from storefront.catalogue.repository import DEFAULT_PAGE_SIZE, ProductFilters
from storefront.catalogue.reviews import AddReview
from storefront.identity.guards import admin_user, current_user
from storefront.identity.user import User
from storefront.media.uploads import read_upload, store_images

PRODUCT_UPLOAD_LIMIT = 5


def _json_list(values):
    return json.dumps(values) if values is not None else None


def _page_response(page) -> ProductListResponse:
    return ProductListResponse(
        products=[ProductResponse.from_product(p) for p in page.products],
        page=page.page,
        pages=page.pages,
        total=page.total,
    )


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.get("", response_model=ProductListResponse)
async def list_products(
    keyword: str | None = None,
    category: str | None = None,
    brand: str | None = None,
    min_price: float | None = Query(None, alias="minPrice"),
    max_price: float | None = Query(None, alias="maxPrice"),
    skin_type: str | None = Query(None, alias="skinType"),
    featured: bool | None = None,
    new: bool | None = None,
    in_stock: bool | None = Query(None, alias="inStock"),
    sort: str = "newest",
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
) -> ProductListResponse:
    filters = ProductFilters(
        keyword=keyword,
        category=category,
        brand=brand,
        min_price=min_price,
        max_price=max_price,
        skin_type=skin_type,
        featured=featured,
        new=new,
        in_stock=in_stock,
    )
    result = current_domain.repository_for(Product).search(filters, sort=sort, page=page, limit=limit)
    return _page_response(result)


@product_router.get("/top", response_model=list[ProductResponse])
async def top_products(limit: int = Query(5, ge=1, le=50)) -> list[ProductResponse]:
    return [ProductResponse.from_product(p) for p in current_domain.repository_for(Product).top_rated(limit)]


@product_router.get("/featured", response_model=list[ProductResponse])
async def featured_products(limit: int = Query(8, ge=1, le=50)) -> list[ProductResponse]:
    return [ProductResponse.from_product(p) for p in current_domain.repository_for(Product).featured(limit)]


@product_router.get("/new", response_model=list[ProductResponse])
async def new_products(limit: int = Query(8, ge=1, le=50)) -> list[ProductResponse]:
    return [ProductResponse.from_product(p) for p in current_domain.repository_for(Product).new_arrivals(limit)]


@product_router.get("/brands", response_model=list[str])
async def brands() -> list[str]:
    return current_domain.repository_for(Product).brands()


@product_router.get("/categories", response_model=list[str])
async def categories_in_use() -> list[str]:
    return current_domain.repository_for(Product).categories_in_use()


@product_router.get("/category/{category}", response_model=ProductListResponse)
async def products_in_category(
    category: str,
    sort: str = "newest",
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
) -> ProductListResponse:
    result = current_domain.repository_for(Product).search(
        ProductFilters(category=category), sort=sort, page=page, limit=limit
    )
    return _page_response(result)


@product_router.post("/upload", response_model=ImagesResponse)
async def upload_product_images(
    images: list[UploadFile] = File(...),
    _admin: User = Depends(admin_user),
) -> ImagesResponse:
    incoming = [await read_upload("images", f) for f in images]
    return ImagesResponse(images=store_images(incoming, max_files=PRODUCT_UPLOAD_LIMIT))


@product_router.post("", status_code=201, response_model=ProductResponse)
async def create_product(body: CreateProductRequest, _admin: User = Depends(admin_user)) -> ProductResponse:
    command = CreateProduct(
        name=body.name,
        brand=body.brand,
        category=body.category,
        sub_category=body.sub_category,
        price=body.price,
        discount_price=body.discount_price,
        description=body.description,
        ingredients=body.ingredients,
        how_to_use=body.how_to_use,
        stock=body.stock,
        is_featured=body.is_featured,
        is_new=body.is_new,
        weight=body.weight,
        images=_json_list(body.images),
        benefits=_json_list(body.benefits),
        skin_types=_json_list(body.skin_types),
        tags=_json_list(body.tags),
        variants=json.dumps([v.model_dump() for v in body.variants]),
    )
    product_id = current_domain.process(command, asynchronous=False)
    return ProductResponse.from_product(current_domain.repository_for(Product).get(product_id))


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return ProductResponse.from_product(current_domain.repository_for(Product).get_active(product_id))


@product_router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    body: UpdateProductRequest,
    _admin: User = Depends(admin_user),
) -> ProductResponse:
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        brand=body.brand,
        category=body.category,
        sub_category=body.sub_category,
        price=body.price,
        discount_price=body.discount_price,
        description=body.description,
        ingredients=body.ingredients,
        how_to_use=body.how_to_use,
        stock=body.stock,
        is_featured=body.is_featured,
        is_new=body.is_new,
        weight=body.weight,
        images=_json_list(body.images),
        benefits=_json_list(body.benefits),
        skin_types=_json_list(body.skin_types),
        tags=_json_list(body.tags),
    )
    current_domain.process(command, asynchronous=False)
    return ProductResponse.from_product(current_domain.repository_for(Product).get(product_id))


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def delete_product(product_id: str, _admin: User = Depends(admin_user)) -> StatusResponse:
    current_domain.process(WithdrawProduct(product_id=product_id), asynchronous=False)
    return StatusResponse(status="removed")


@product_router.post("/{product_id}/reviews", status_code=201, response_model=ReviewIdResponse)
async def add_review(
    product_id: str,
    body: AddReviewRequest,
    user: User = Depends(current_user),
) -> ReviewIdResponse:
    command = AddReview(
        product_id=product_id,
        user_id=user.id,
        rating=body.rating,
        comment=body.comment,
    )
    review_id = current_domain.process(command, asynchronous=False)
    return ReviewIdResponse(review_id=review_id)


# ---------------------------------------------------------------------------
# Category Router
# ---------------------------------------------------------------------------
category_router = APIRouter(prefix="/categories", tags=["categories"])


@category_router.get("", response_model=list[CategoryResponse])
async def list_categories() -> list[CategoryResponse]:
    return [CategoryResponse.from_category(c) for c in current_domain.repository_for(Category).active()]


@category_router.get("/tree", response_model=list[CategoryNode])
async def category_tree() -> list[CategoryNode]:
    return [CategoryNode.from_node(node) for node in current_domain.repository_for(Category).tree()]


@category_router.get("/slug/{slug}", response_model=CategoryResponse)
async def category_by_slug(slug: str) -> CategoryResponse:
    category = current_domain.repository_for(Category).find_by_slug(slug)
    if category is None:
        raise ObjectNotFoundError("Category not found")
    return CategoryResponse.from_category(category)


@category_router.post("", status_code=201, response_model=CategoryResponse)
async def create_category(body: CreateCategoryRequest, _admin: User = Depends(admin_user)) -> CategoryResponse:
    command = CreateCategory(
        name=body.name,
        description=body.description,
        image=body.image,
        parent_category_id=body.parent_category_id,
        display_order=body.display_order,
    )
    category_id = current_domain.process(command, asynchronous=False)
    return CategoryResponse.from_category(current_domain.repository_for(Category).get(category_id))


@category_router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str,
    body: UpdateCategoryRequest,
    _admin: User = Depends(admin_user),
) -> CategoryResponse:
    command = UpdateCategory(
        category_id=category_id,
        name=body.name,
        description=body.description,
        image=body.image,
        parent_category_id=body.parent_category_id,
        display_order=body.display_order,
    )
    current_domain.process(command, asynchronous=False)
    return CategoryResponse.from_category(current_domain.repository_for(Category).get(category_id))


@category_router.delete("/{category_id}", response_model=StatusResponse)
async def delete_category(category_id: str, _admin: User = Depends(admin_user)) -> StatusResponse:
    current_domain.process(DeleteCategory(category_id=category_id), asynchronous=False)
    return StatusResponse(status="deactivated")
