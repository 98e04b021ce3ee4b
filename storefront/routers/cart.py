# storefront/routers/cart.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import require_auth
from storefront.database import get_session
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import CartItemCreate, CartItemRead, CartItemUpdate
from storefront.schemas.user import MessageRead
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
product_repo = ProductRepository()
service = CartService(cart_repo, product_repo)


@router.get("", response_model=list[CartItemRead])
def get_my_cart(
    session: Session = Depends(get_session),
    user_id: int = Depends(require_auth),
):
    """
    Get current user's cart, with product name, price and stock.
    """
    return service.list_items(session, user_id)


@router.post(
    "",
    response_model=MessageRead,
    status_code=status.HTTP_201_CREATED,
)
def add_to_cart(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    user_id: int = Depends(require_auth),
):
    """
    Add product to the current user's cart.

    400 if the product does not exist or has less stock than requested.
    """
    service.add_item(session, user_id, payload)
    return MessageRead(message="Product added to cart")


@router.put("/{item_id}", response_model=MessageRead)
def update_cart_item(
    item_id: int,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    user_id: int = Depends(require_auth),
):
    """
    Update quantity of a cart item.
    """
    service.update_quantity(
        session=session,
        user_id=user_id,
        item_id=item_id,
        payload=payload,
    )
    return MessageRead(message="Cart updated")


@router.delete("/{item_id}", response_model=MessageRead)
def remove_cart_item(
    item_id: int,
    session: Session = Depends(get_session),
    user_id: int = Depends(require_auth),
):
    service.remove_item(session, user_id, item_id)
    return MessageRead(message="Product removed from cart")
