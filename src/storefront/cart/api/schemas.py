"""Pydantic request/response schemas for the Cart API."""

from pydantic import BaseModel, Field

from storefront.cart.pricing import PricedCart, PricedLine


class CartLineRequest(BaseModel):
    product_id: str
    quantity: int = Field(1, ge=1)
    variant: str | None = Field(None, max_length=100)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(..., ge=1)


class GuestCartRequest(BaseModel):
    guest_cart: list[CartLineRequest] = []


class CartLineResponse(BaseModel):
    item_id: str | None = None
    product_id: str
    name: str
    image: str | None = None
    price: float
    actual_price: float
    stock: int
    quantity: int
    variant: str | None = None
    line_total: float

    @classmethod
    def from_line(cls, line: PricedLine) -> "CartLineResponse":
        product = line.product
        return cls(
            item_id=str(line.item_id) if line.item_id else None,
            product_id=str(product.id),
            name=product.name,
            image=product.primary_image,
            price=product.price,
            actual_price=product.actual_price,
            stock=product.stock or 0,
            quantity=line.quantity,
            variant=line.variant,
            line_total=line.line_total,
        )


class CartResponse(BaseModel):
    items: list[CartLineResponse] = []
    cart_total: float = 0.0
    items_count: int = 0

    @classmethod
    def from_cart(cls, cart: PricedCart) -> "CartResponse":
        return cls(
            items=[CartLineResponse.from_line(line) for line in cart.lines],
            cart_total=cart.cart_total,
            items_count=cart.items_count,
        )
