"""FastAPI routes for the Ordering domain: a customer's cart and orders."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from identity.auth.dependencies import CurrentUser, ensure_owner
from ordering.api.schemas import (
    AddCartItemsRequest,
    CartCountResponse,
    CartItemResponse,
    CreateOrderRequest,
    OrderResponse,
)
from ordering.cart.cart import CartItem
from ordering.order.order import Order
from ordering.service import OrderingService


def get_ordering_service(request: Request) -> OrderingService:
    return request.app.state.ordering_service


Ordering = Annotated[OrderingService, Depends(get_ordering_service)]

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/customers/{customer_id}/cart", tags=["cart"])


@cart_router.get("", response_model=list[CartItemResponse])
def get_cart_items(customer_id: int, user: CurrentUser, ordering: Ordering) -> list[CartItemResponse]:
    ensure_owner(user, customer_id)
    return [CartItemResponse.model_validate(item) for item in ordering.cart_items(customer_id)]


@cart_router.post("", response_model=list[CartItemResponse])
def add_cart_items(
    customer_id: int,
    body: AddCartItemsRequest,
    user: CurrentUser,
    ordering: Ordering,
) -> list[CartItemResponse]:
    ensure_owner(user, customer_id)
    items = [CartItem(product_id=i.product_id, quantity=i.quantity) for i in body.items]
    return [CartItemResponse.model_validate(item) for item in ordering.add_cart_items(customer_id, items)]


@cart_router.get("/count", response_model=CartCountResponse)
def cart_item_count(customer_id: int, user: CurrentUser, ordering: Ordering) -> CartCountResponse:
    ensure_owner(user, customer_id)
    return CartCountResponse(count=ordering.cart_item_count(customer_id))


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/customers/{customer_id}/orders", tags=["orders"])


@order_router.get("", response_model=list[OrderResponse])
def get_customer_orders(customer_id: int, user: CurrentUser, ordering: Ordering) -> list[OrderResponse]:
    ensure_owner(user, customer_id)
    return [OrderResponse.model_validate(o) for o in ordering.orders_by_customer(customer_id)]


@order_router.post("", status_code=201, response_model=OrderResponse)
def create_order(
    customer_id: int,
    body: CreateOrderRequest,
    user: CurrentUser,
    ordering: Ordering,
) -> OrderResponse:
    ensure_owner(user, customer_id)
    order = Order(
        customer_id=customer_id,
        product_id=body.product_id,
        quantity=body.quantity,
        shipping_address_id=body.shipping_address_id,
    )
    return OrderResponse.model_validate(ordering.create_order(order))
