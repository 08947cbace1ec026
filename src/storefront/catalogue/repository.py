"""Repositories for the Product and Category aggregates.

Catalog listings filter, sort and page in the query where the provider can.
Keyword, skin type and price filters, and the price and name sorts, work on
derived values (the effective price, JSON-encoded lists), so such listings
read every matching active product and finish in Python.
"""

import math
from dataclasses import dataclass

from protean.core.repository import BaseRepository
from protean.exceptions import ObjectNotFoundError

from storefront.catalogue.category import Category
from storefront.catalogue.product import Product
from storefront.domain import storefront

DEFAULT_PAGE_SIZE = 12

_SORTS = {
    "newest": (lambda p: p.created_at, True),
    "price-asc": (lambda p: p.actual_price, False),
    "price-desc": (lambda p: p.actual_price, True),
    "rating": (lambda p: (p.rating or 0, p.num_reviews or 0), True),
    "popular": (lambda p: p.sold or 0, True),
    "name": (lambda p: p.name.lower(), False),
}

# Sorts the provider can apply on stored columns
_QUERY_SORTS = {
    "newest": ["-created_at"],
    "rating": ["-rating", "-num_reviews"],
    "popular": ["-sold"],
}


@dataclass
class ProductFilters:
    keyword: str | None = None
    category: str | None = None
    brand: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    skin_type: str | None = None
    featured: bool | None = None
    new: bool | None = None
    in_stock: bool | None = None

    def criteria(self) -> dict:
        """Lookups on stored columns, applied in the query."""
        lookups = {"is_active": True}
        if self.category:
            lookups["category__iexact"] = self.category
        if self.brand:
            lookups["brand__iexact"] = self.brand
        if self.featured is not None:
            lookups["is_featured"] = self.featured
        if self.new is not None:
            lookups["is_new"] = self.new
        if self.in_stock:
            lookups["stock__gt"] = 0
        return lookups

    @property
    def needs_scan(self) -> bool:
        return bool(self.keyword or self.skin_type) or self.min_price is not None or self.max_price is not None

    def matches(self, product: Product) -> bool:
        """Checks on derived values that no lookup can express."""
        if self.keyword:
            needle = self.keyword.lower()
            haystack = [product.name, product.brand, product.description or "", *product.tag_list]
            if not any(needle in (text or "").lower() for text in haystack):
                return False
        if self.min_price is not None and product.actual_price < self.min_price:
            return False
        if self.max_price is not None and product.actual_price > self.max_price:
            return False
        if self.skin_type and self.skin_type not in product.skin_type_list and "All" not in product.skin_type_list:
            return False
        return True


@dataclass
class ProductPage:
    products: list[Product]
    page: int
    pages: int
    total: int


@storefront.repository(part_of=Product)
class ProductRepository(BaseRepository):
    def add(self, product: Product) -> Product:
        # Rating and review count are always derived from the full review list on save
        product.recalculate_rating()
        return super().add(product)

    def active(self) -> list[Product]:
        return self._dao.query.filter(is_active=True).limit(None).all().items

    def get_active(self, product_id: str) -> Product:
        product = self.get(product_id)
        if not product.is_active:
            raise ObjectNotFoundError(f"Product {product_id} not found")
        return product

    def search(
        self,
        filters: ProductFilters | None = None,
        sort: str = "newest",
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> ProductPage:
        filters = filters or ProductFilters()
        sort = sort if sort in _SORTS else "newest"
        limit = max(1, limit)
        page = max(1, page)
        start = (page - 1) * limit

        query = self._dao.query.filter(**filters.criteria())

        if not filters.needs_scan and sort in _QUERY_SORTS:
            result = query.order_by(_QUERY_SORTS[sort]).offset(start).limit(limit).all()
            return ProductPage(
                products=result.items,
                page=page,
                pages=math.ceil(result.total / limit),
                total=result.total,
            )

        matched = [p for p in query.limit(None).all().items if filters.matches(p)]
        key, reverse = _SORTS[sort]
        matched.sort(key=key, reverse=reverse)
        return ProductPage(
            products=matched[start : start + limit],
            page=page,
            pages=math.ceil(len(matched) / limit),
            total=len(matched),
        )

    def featured(self, limit: int = 8) -> list[Product]:
        return self.search(ProductFilters(featured=True), sort="newest", limit=limit).products

    def new_arrivals(self, limit: int = 8) -> list[Product]:
        return self.search(ProductFilters(new=True), sort="newest", limit=limit).products

    def top_rated(self, limit: int = 5) -> list[Product]:
        return self.search(sort="rating", limit=limit).products

    def brands(self) -> list[str]:
        return sorted({p.brand for p in self.active()}, key=str.lower)

    def categories_in_use(self) -> list[str]:
        return sorted({p.category for p in self.active()}, key=str.lower)

    def count_in_category(self, category_name: str) -> int:
        return self._dao.query.filter(is_active=True, category__iexact=category_name).count()


@storefront.repository(part_of=Category)
class CategoryRepository:
    def active(self) -> list[Category]:
        categories = self._dao.query.filter(is_active=True).limit(None).all().items
        return sorted(categories, key=lambda c: (c.display_order or 0, c.name.lower()))

    def find_by_slug(self, slug: str) -> Category | None:
        return self._dao.query.filter(slug=slug, is_active=True).all().first

    def find_by_name(self, name: str) -> Category | None:
        return self._dao.query.filter(name=name.strip()).all().first

    def tree(self) -> list[dict]:
        """Active categories nested under their parents, roots first."""
        categories = self.active()
        nodes = {c.id: {"category": c, "children": []} for c in categories}
        roots = []
        for category in categories:
            node = nodes[category.id]
            parent = nodes.get(category.parent_category_id) if category.parent_category_id else None
            if parent is not None:
                parent["children"].append(node)
            else:
                roots.append(node)
        return roots
