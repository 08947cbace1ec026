"""Sales figures for the admin dashboard."""

from datetime import datetime

from protean.utils.globals import current_domain

from storefront.ordering.order import Order, OrderStatus


def order_stats(now: datetime | None = None, recent: int = 5) -> dict:
    now = now or datetime.now()
    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    year_start = month_start.replace(month=1)

    repo = current_domain.repository_for(Order)

    return {
        "total_orders": repo.count(),
        "monthly_orders": repo.count(created_at__gte=month_start),
        "yearly_orders": repo.count(created_at__gte=year_start),
        "total_revenue": repo.revenue(),
        "monthly_revenue": repo.revenue(created_at__gte=month_start),
        "orders_by_status": {status.value: repo.count(status=status.value) for status in OrderStatus},
        "recent_orders": repo.recent(recent),
    }
