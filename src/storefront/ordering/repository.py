"""Repository for the Order aggregate, with the read queries behind order pages."""

import math
from dataclasses import dataclass

from storefront.domain import storefront
from storefront.ordering.order import Order, OrderStatus
from storefront.shared.email import normalize_email

ADMIN_PAGE_SIZE = 10


@dataclass
class OrderPage:
    orders: list[Order]
    page: int
    pages: int
    total: int


@storefront.repository(part_of=Order)
class OrderRepository:
    def _query(self, **filters):
        query = self._dao.query
        return query.filter(**filters) if filters else query

    def _newest_first(self, **filters):
        return self._query(**filters).order_by("-created_at")

    def for_user(self, user_id: str) -> list[Order]:
        return self._newest_first(user_id=user_id).limit(None).all().items

    def for_guest_email(self, email: str) -> list[Order]:
        return self._newest_first(guest_email=normalize_email(email)).limit(None).all().items

    def page(self, page: int = 1, status: str | None = None, page_size: int = ADMIN_PAGE_SIZE) -> OrderPage:
        page = max(1, page)
        query = self._newest_first(status=status) if status else self._newest_first()
        result = query.offset((page - 1) * page_size).limit(page_size).all()
        return OrderPage(
            orders=result.items,
            page=page,
            pages=math.ceil(result.total / page_size),
            total=result.total,
        )

    def recent(self, count: int) -> list[Order]:
        return self._newest_first().limit(count).all().items

    def has_purchased(self, user_id: str, product_id: str) -> bool:
        """True when the user has a non-cancelled order containing the product."""
        orders = (
            self._dao.query.filter(user_id=user_id).exclude(status=OrderStatus.CANCELLED.value).limit(None).all()
        )
        return any(i.product_id == product_id for o in orders.items for i in o.order_items)

    def count(self, **filters) -> int:
        return self._query(**filters).count()

    def revenue(self, **filters) -> float:
        """Sum of `total_price` over paid orders matching `filters`."""
        paid = self._query(is_paid=True, **filters).limit(None).all()
        return round(sum(o.total_price for o in paid.items), 2)
