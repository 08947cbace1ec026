"""Order aggregate: a frozen record of a purchase and its fulfilment state.

Line items, shipping address and totals are fixed at placement. Afterwards
only the status, payment and tracking fields change. Status changes are
admin-driven and not checked against a transition table; only
cancellation is restricted.
"""

from datetime import datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from storefront.domain import storefront
from storefront.ordering.pricing import calculate_totals, line_total
from storefront.shared.email import normalize_email


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    RETURNED = "Returned"


class PaymentMethod(Enum):
    COD = "COD"
    CREDIT_CARD = "Credit Card"
    DEBIT_CARD = "Debit Card"
    JAZZCASH = "JazzCash"
    EASYPAISA = "Easypaisa"
    BANK_TRANSFER = "Bank Transfer"


_CANCELLABLE_STATES = {OrderStatus.PENDING, OrderStatus.PROCESSING}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    """Where the order goes, as entered at checkout."""

    name = String(required=True, max_length=100)
    address = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(max_length=100, default="Pakistan")
    phone = String(required=True, max_length=20)


@storefront.value_object(part_of="Order")
class GuestUser:
    """Contact details of a shopper checking out without an account."""

    name = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    phone = String(max_length=20)


@storefront.value_object(part_of="Order")
class PaymentResult:
    transaction_id = String(max_length=255)
    status = String(max_length=50)
    update_time = String(max_length=50)
    email_address = String(max_length=254)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """Snapshot of a product line at purchase time. Never linked back to live data."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    quantity = Integer(required=True, min_value=1)
    image = String(max_length=500)
    price = Float(required=True, min_value=0.0)
    variant = String(max_length=100)


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    user_id = Identifier()
    guest_user = ValueObject(GuestUser)
    guest_email = String(max_length=254)  # normalized copy of guest_user.email, for lookups
    order_items = HasMany(OrderItem)
    shipping_address = ValueObject(ShippingAddress, required=True)
    payment_method = String(required=True, choices=PaymentMethod)
    payment_result = ValueObject(PaymentResult)
    items_price = Float(default=0.0)
    tax_price = Float(default=0.0)
    shipping_price = Float(default=0.0)
    total_price = Float(default=0.0)
    is_paid = Boolean(default=False)
    paid_at = DateTime()
    is_delivered = Boolean(default=False)
    delivered_at = DateTime()
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    tracking_number = String(max_length=100)
    notes = Text()
    created_at = DateTime(default=datetime.now)
    updated_at = DateTime(default=datetime.now)

    @invariant.post
    def owned_by_user_or_guest(self):
        if bool(self.user_id) == bool(self.guest_user):
            raise ValidationError({"owner": ["An order belongs to either a user or a guest"]})

    @classmethod
    def place(cls, items, shipping_address, payment_method, user_id=None, guest_user=None, notes=None):
        """Create an order from priced line snapshots.

        `items` are dicts with product_id, name, quantity, price and
        optionally image and variant.
        """
        from storefront.ordering.events import OrderPlaced

        if not items:
            raise ValidationError({"order_items": ["No order items"]})

        lines = [
            OrderItem(
                product_id=item["product_id"],
                name=item["name"],
                quantity=item["quantity"],
                image=item.get("image"),
                price=item["price"],
                variant=item.get("variant") or None,
            )
            for item in items
        ]
        totals = calculate_totals(line_total(lines))
        now = datetime.now()

        order = cls(
            user_id=user_id,
            guest_user=guest_user,
            guest_email=normalize_email(guest_user.email) if guest_user else None,
            shipping_address=shipping_address,
            payment_method=payment_method,
            items_price=totals.items_price,
            shipping_price=totals.shipping_price,
            tax_price=totals.tax_price,
            total_price=totals.total_price,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        with atomic_change(order):
            for line in lines:
                order.add_order_items(line)

        order.raise_(
            OrderPlaced(
                order_id=order.id,
                user_id=user_id,
                guest_email=guest_user.email if guest_user else None,
                item_count=sum(line.quantity for line in lines),
                total_price=totals.total_price,
                payment_method=payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Ownership
    # -------------------------------------------------------------------
    def is_owned_by(self, user_id) -> bool:
        return bool(user_id) and self.user_id == user_id

    def belongs_to_guest(self, email) -> bool:
        return bool(self.guest_email and email) and self.guest_email == normalize_email(email)

    @property
    def is_cancellable(self) -> bool:
        return OrderStatus(self.status) in _CANCELLABLE_STATES

    # -------------------------------------------------------------------
    # Payment and fulfilment
    # -------------------------------------------------------------------
    def mark_paid(self, payment_id=None, payment_status=None, update_time=None, email_address=None):
        from storefront.ordering.events import OrderPaid

        now = datetime.now()
        with atomic_change(self):
            self.is_paid = True
            self.paid_at = now
            self.payment_result = PaymentResult(
                transaction_id=payment_id,
                status=payment_status,
                update_time=update_time,
                email_address=email_address,
            )
            self.updated_at = now

        self.raise_(OrderPaid(order_id=self.id, payment_id=payment_id, paid_at=now))

    def mark_delivered(self):
        self.update_status(OrderStatus.DELIVERED.value)

    def update_status(self, status, tracking_number=None, notes=None):
        """Set any status from any other; tracking number and notes ride along."""
        from storefront.ordering.events import OrderStatusChanged

        previous = self.status
        now = datetime.now()
        with atomic_change(self):
            self.status = status
            if tracking_number is not None:
                self.tracking_number = tracking_number
            if notes is not None:
                self.notes = notes
            if status == OrderStatus.DELIVERED.value:
                self.is_delivered = True
                self.delivered_at = now
            self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=self.id,
                previous_status=previous,
                new_status=status,
                tracking_number=self.tracking_number,
                changed_at=now,
            )
        )

    def cancel(self, reason=None):
        from storefront.ordering.events import OrderCancelled

        if not self.is_cancellable:
            raise ValidationError({"status": [f"Order cannot be cancelled. Current status: {self.status}"]})

        now = datetime.now()
        with atomic_change(self):
            self.status = OrderStatus.CANCELLED.value
            if reason:
                self.notes = f"{self.notes}\n{reason}" if self.notes else reason
            self.updated_at = now

        self.raise_(OrderCancelled(order_id=self.id, reason=reason, cancelled_at=now))
