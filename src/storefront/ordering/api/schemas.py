"""Pydantic request/response schemas for the Ordering API."""

from datetime import datetime

from pydantic import BaseModel, Field

from storefront.ordering.order import Order


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ShippingAddressSchema(BaseModel):
    name: str = Field(..., max_length=100)
    address: str = Field(..., max_length=255)
    city: str = Field(..., max_length=100)
    state: str | None = Field(None, max_length=100)
    postal_code: str = Field(..., max_length=20)
    country: str | None = Field("Pakistan", max_length=100)
    phone: str = Field(..., max_length=20)


class GuestUserSchema(BaseModel):
    name: str = Field(..., max_length=100)
    email: str = Field(..., max_length=254)
    phone: str | None = Field(None, max_length=20)


class OrderLineRequest(BaseModel):
    product_id: str
    quantity: int = Field(1, ge=1)
    variant: str | None = Field(None, max_length=100)


class OrderItemSchema(BaseModel):
    id: str
    product_id: str
    name: str
    quantity: int
    image: str | None = None
    price: float
    variant: str | None = None


class PaymentResultSchema(BaseModel):
    id: str | None = None
    status: str | None = None
    update_time: str | None = None
    email_address: str | None = None


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "order_items": [{"product_id": "prod-001", "quantity": 2}],
                    "shipping_address": {
                        "name": "Ayesha Khan",
                        "address": "12 Mall Road",
                        "city": "Lahore",
                        "postal_code": "54000",
                        "phone": "+923001234567",
                    },
                    "payment_method": "COD",
                }
            ]
        }
    }

    order_items: list[OrderLineRequest]
    shipping_address: ShippingAddressSchema
    payment_method: str
    guest_user: GuestUserSchema | None = None
    notes: str | None = None


class PayOrderRequest(BaseModel):
    id: str | None = Field(None, max_length=255)
    status: str | None = Field(None, max_length=50)
    update_time: str | None = Field(None, max_length=50)
    email_address: str | None = Field(None, max_length=254)


class UpdateStatusRequest(BaseModel):
    status: str
    tracking_number: str | None = Field(None, max_length=100)
    notes: str | None = None


class CancelOrderRequest(BaseModel):
    reason: str | None = Field(None, max_length=500)
    guest_email: str | None = Field(None, max_length=254)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class OrderResponse(BaseModel):
    id: str
    user_id: str | None = None
    guest_user: GuestUserSchema | None = None
    order_items: list[OrderItemSchema]
    shipping_address: ShippingAddressSchema
    payment_method: str
    payment_result: PaymentResultSchema | None = None
    items_price: float
    tax_price: float
    shipping_price: float
    total_price: float
    is_paid: bool
    paid_at: datetime | None = None
    is_delivered: bool
    delivered_at: datetime | None = None
    status: str
    tracking_number: str | None = None
    notes: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        address = order.shipping_address
        guest = order.guest_user
        payment = order.payment_result
        return cls(
            id=str(order.id),
            user_id=str(order.user_id) if order.user_id else None,
            guest_user=GuestUserSchema(name=guest.name, email=guest.email, phone=guest.phone) if guest else None,
            order_items=[
                OrderItemSchema(
                    id=str(i.id),
                    product_id=str(i.product_id),
                    name=i.name,
                    quantity=i.quantity,
                    image=i.image,
                    price=i.price,
                    variant=i.variant,
                )
                for i in order.order_items
            ],
            shipping_address=ShippingAddressSchema(
                name=address.name,
                address=address.address,
                city=address.city,
                state=address.state,
                postal_code=address.postal_code,
                country=address.country,
                phone=address.phone,
            ),
            payment_method=order.payment_method,
            payment_result=(
                PaymentResultSchema(
                    id=payment.transaction_id,
                    status=payment.status,
                    update_time=payment.update_time,
                    email_address=payment.email_address,
                )
                if payment
                else None
            ),
            items_price=order.items_price,
            tax_price=order.tax_price,
            shipping_price=order.shipping_price,
            total_price=order.total_price,
            is_paid=bool(order.is_paid),
            paid_at=order.paid_at,
            is_delivered=bool(order.is_delivered),
            delivered_at=order.delivered_at,
            status=order.status,
            tracking_number=order.tracking_number,
            notes=order.notes,
            created_at=order.created_at,
        )


class OrderPageResponse(BaseModel):
    orders: list[OrderResponse]
    page: int
    pages: int
    total: int


class OrderStatsResponse(BaseModel):
    total_orders: int
    monthly_orders: int
    yearly_orders: int
    total_revenue: float
    monthly_revenue: float
    orders_by_status: dict[str, int]
    recent_orders: list[OrderResponse]
