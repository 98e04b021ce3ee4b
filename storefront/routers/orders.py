# storefront/routers/orders.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import require_auth
from storefront.database import get_session
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.order import (
    OrderCreate,
    OrderCreated,
    OrderStatusUpdate,
    OrderWithItemsRead,
)
from storefront.schemas.user import MessageRead
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
cart_repo = CartRepository()
product_repo = ProductRepository()
service = OrderService(order_repo, cart_repo, product_repo)


@router.post(
    "",
    response_model=OrderCreated,
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    user_id: int = Depends(require_auth),
):
    """
    Create an order from the selected cart items.

    Errors:
      - 400 empty_cart_selection: none of the ids are in the caller's cart
      - 400 insufficient_stock: a product cannot cover its line
    """
    order_id = service.create_order(session, user_id, payload.cart_items)
    return OrderCreated(order_id=order_id, message="Order created")


@router.get("", response_model=list[OrderWithItemsRead])
def list_my_orders(
    session: Session = Depends(get_session),
    user_id: int = Depends(require_auth),
):
    """
    List the authenticated user's orders, newest first, with items.
    """
    return service.list_user_orders(session, user_id)


@router.get("/{order_id}", response_model=OrderWithItemsRead)
def get_my_order(
    order_id: int,
    session: Session = Depends(get_session),
    user_id: int = Depends(require_auth),
):
    """
    Get a single order (with items) belonging to the current user.
    """
    return service.get_user_order(session, user_id, order_id)


@router.put("/{order_id}/status", response_model=MessageRead)
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
    user_id: int = Depends(require_auth),
):
    """
    Set the status of one of the caller's orders.

    Allowed values: paid, shipped, delivered, cancelled.
    """
    service.update_status(session, user_id, order_id, payload)
    return MessageRead(message="Order status updated")
