"""FastAPI endpoints for the shopping cart.

Signed-in shoppers have a stored cart. Guests keep their cart on the
client; the API prices it and validates additions but stores nothing.
"""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.cart.api.schemas import CartLineRequest, CartResponse, GuestCartRequest, UpdateCartItemRequest
from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartItem, ensure_in_stock
from storefront.cart.pricing import PricedCart, PricedLine, price_lines, price_user_cart
from storefront.cart.sync import SyncGuestCart
from storefront.catalogue.product import Product
from storefront.identity.guards import current_user, optional_user
from storefront.identity.user import User

cart_router = APIRouter(prefix="/cart", tags=["cart"])


def _stored_cart(user: User) -> CartResponse:
    return CartResponse.from_cart(price_user_cart(current_domain.repository_for(User).get(user.id)))


@cart_router.get("", response_model=CartResponse)
async def get_cart(user: User | None = Depends(optional_user)) -> CartResponse:
    if user is None:
        return CartResponse()
    return CartResponse.from_cart(price_user_cart(user))


@cart_router.post("/price", response_model=CartResponse)
async def price_guest_cart(body: GuestCartRequest) -> CartResponse:
    return CartResponse.from_cart(price_lines(line.model_dump() for line in body.guest_cart))


@cart_router.post("", response_model=CartResponse)
async def add_to_cart(body: CartLineRequest, user: User | None = Depends(optional_user)) -> CartResponse:
    if user is None:
        product = current_domain.repository_for(Product).get_active(body.product_id)
        ensure_in_stock(product, body.quantity)
        line = PricedLine(product=product, quantity=body.quantity, variant=body.variant)
        return CartResponse.from_cart(PricedCart(lines=[line]))

    command = AddToCart(
        user_id=user.id,
        product_id=body.product_id,
        quantity=body.quantity,
        variant=body.variant,
    )
    current_domain.process(command, asynchronous=False)
    return _stored_cart(user)


@cart_router.post("/sync", response_model=CartResponse)
async def sync_cart(body: GuestCartRequest, user: User = Depends(current_user)) -> CartResponse:
    command = SyncGuestCart(
        user_id=user.id,
        guest_cart=json.dumps([line.model_dump() for line in body.guest_cart]),
    )
    current_domain.process(command, asynchronous=False)
    return _stored_cart(user)


@cart_router.put("/{item_id}", response_model=CartResponse)
async def update_cart_item(
    item_id: str,
    body: UpdateCartItemRequest,
    user: User = Depends(current_user),
) -> CartResponse:
    command = UpdateCartItem(user_id=user.id, item_id=item_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return _stored_cart(user)


@cart_router.delete("/{item_id}", response_model=CartResponse)
async def remove_from_cart(item_id: str, user: User = Depends(current_user)) -> CartResponse:
    current_domain.process(RemoveFromCart(user_id=user.id, item_id=item_id), asynchronous=False)
    return _stored_cart(user)


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(user: User = Depends(current_user)) -> CartResponse:
    current_domain.process(ClearCart(user_id=user.id), asynchronous=False)
    return _stored_cart(user)
