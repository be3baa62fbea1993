"""Shopping cart and checkout endpoints"""
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from typing import List
import logging

from auth import SessionContext
from dependencies import get_session_context, get_store, get_notification_service
from exceptions import NotFoundError
from models import CartItem, Order
from schemas import (
    CartItemAdd, CartQuantityUpdate, CartItemResponse, CartLineResponse, CartResponse,
    CartUpdateResponse, CheckoutRequest, OrderItemResponse, OrderResponse
)
from services.cart_manager import CartManager, compute_total
from store import Store, kind_of
from utils.cache import query_cache
from utils.notification_service import NotificationService, reported

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Cart"])


def _order_response(manager: CartManager, order: Order) -> OrderResponse:
    return OrderResponse(
        id=order.id,
        status=order.status,
        total_amount=order.total_amount,
        shipping_address=order.shipping_address,
        created_at=order.created_at,
        items=[OrderItemResponse.model_validate(item) for item in manager.order_items(order)],
    )


@router.get("/cart", response_model=CartResponse)
def get_cart(
    ctx: SessionContext = Depends(get_session_context),
    store: Store = Depends(get_store)
):
    """Current user's cart with its total (read-through cached)"""
    def load():
        lines = CartManager(store).list_items(ctx)
        return CartResponse(
            items=[CartLineResponse.model_validate(line) for line in lines],
            item_count=len(lines),
            total=compute_total(lines),
        ).model_dump(mode="json")

    return query_cache.get_or_load(kind_of(CartItem), ctx.user_id, load)


@router.post("/cart/items", response_model=CartItemResponse)
def add_to_cart(
    item_data: CartItemAdd,
    background_tasks: BackgroundTasks,
    ctx: SessionContext = Depends(get_session_context),
    store: Store = Depends(get_store),
    notifier: NotificationService = Depends(get_notification_service)
):
    """Add one (or `quantity`) of a medicine to the cart"""
    with reported(notifier, background_tasks, ctx,
                  ("Added to cart", "Item added successfully"), "Could not add to cart"):
        item = CartManager(store).add_or_increment(ctx, item_data.medicine_id, item_data.quantity)
    return item


@router.put("/cart/items/{medicine_id}", response_model=CartUpdateResponse)
def update_cart_quantity(
    medicine_id: str,
    update_data: CartQuantityUpdate,
    background_tasks: BackgroundTasks,
    ctx: SessionContext = Depends(get_session_context),
    store: Store = Depends(get_store),
    notifier: NotificationService = Depends(get_notification_service)
):
    """Set an absolute quantity; zero or less removes the item"""
    with reported(notifier, background_tasks, ctx,
                  ("Cart updated", "Quantity updated"), "Could not update cart"):
        item = CartManager(store).set_quantity(ctx, medicine_id, update_data.quantity)
        if item is None and update_data.quantity > 0:
            raise NotFoundError("Item is not in your cart")

    return CartUpdateResponse(
        medicine_id=medicine_id,
        quantity=item.quantity if item else 0,
        item=CartItemResponse.model_validate(item) if item else None,
    )


@router.post("/cart/checkout", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def checkout(
    checkout_data: CheckoutRequest,
    background_tasks: BackgroundTasks,
    ctx: SessionContext = Depends(get_session_context),
    store: Store = Depends(get_store),
    notifier: NotificationService = Depends(get_notification_service)
):
    """Turn the cart into a pending order"""
    manager = CartManager(store)
    with reported(notifier, background_tasks, ctx,
                  ("Order placed", "Your order has been placed"), "Could not place order"):
        order = manager.checkout(ctx, checkout_data.shipping_address)
    return _order_response(manager, order)


@router.get("/orders", response_model=List[OrderResponse])
def list_orders(
    ctx: SessionContext = Depends(get_session_context),
    store: Store = Depends(get_store)
):
    """Current user's orders, newest first"""
    manager = CartManager(store)
    return [_order_response(manager, order) for order in manager.list_orders(ctx)]


@router.get("/orders/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: str,
    ctx: SessionContext = Depends(get_session_context),
    store: Store = Depends(get_store)
):
    order = store.select_by_id(Order, order_id)
    if not order or order.user_id != ctx.user_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found"
        )
    return _order_response(CartManager(store), order)
