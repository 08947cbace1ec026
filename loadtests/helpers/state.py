"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance keeps its own state; nothing is shared across
users. State holds ids and tokens returned by earlier steps so follow-up
requests can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """A single simulated shopper from sign-up to checkout."""

    token: str | None = None
    user_id: str | None = None
    email: str | None = None
    browsed_product_ids: list[str] = field(default_factory=list)
    cart_item_ids: list[str] = field(default_factory=list)
    order_id: str | None = None
    order_total: float = 0.0

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}


@dataclass
class GuestState:
    """A shopper checking out without an account."""

    email: str | None = None
    product_ids: list[str] = field(default_factory=list)
    lines: list[dict] = field(default_factory=list)
    order_id: str | None = None


@dataclass
class AdminState:
    token: str | None = None
    product_ids: list[str] = field(default_factory=list)
    category_ids: list[str] = field(default_factory=list)
    order_ids: list[str] = field(default_factory=list)

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}
