# storefront/services/cart_service.py
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from storefront.core.errors import (
    ConflictError,
    InsufficientStock,
    NotFoundError,
    ValidationError,
)
from storefront.models.cart import CartItem
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import CartItemCreate, CartItemUpdate, CartItemRead


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - validate product existence and stock on add / update
      - merge repeated adds of the same product into one row
      - keep every operation scoped to the calling user
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    def list_items(self, session: Session, user_id: int) -> list[CartItemRead]:
        """
        Return the user's cart joined with product name, price and stock.
        """
        return [
            CartItemRead(
                id=item.id,
                user_id=item.user_id,
                product_id=item.product_id,
                quantity=item.quantity,
                name=product.name,
                price=product.price,
                stock=product.stock,
            )
            for item, product in self.cart_repo.list_for_user(session, user_id)
        ]

    def add_item(
        self,
        session: Session,
        user_id: int,
        payload: CartItemCreate,
    ) -> CartItem:
        """
        Add a product to the user's cart.

        Rules:
          - product must exist and have at least `quantity` in stock
          - if the product is already in the cart, its quantity grows
        """
        product = self.product_repo.get_by_id(session, payload.product_id)
        if not product or product.stock < payload.quantity:
            raise ValidationError(
                "Product not found or insufficient stock",
                product_id=payload.product_id,
            )

        existing = self.cart_repo.get_item(session, user_id, payload.product_id)
        if existing:
            existing.quantity += payload.quantity
            return self.cart_repo.update(session, existing)

        item = CartItem(
            user_id=user_id,
            product_id=payload.product_id,
            quantity=payload.quantity,
        )
        try:
            return self.cart_repo.create(session, item)
        except IntegrityError as exc:
            # A concurrent add inserted the same product first; merge into it.
            session.rollback()
            existing = self.cart_repo.get_item(session, user_id, payload.product_id)
            if existing is None:
                raise ConflictError("Cart item could not be added") from exc
            existing.quantity += payload.quantity
            return self.cart_repo.update(session, existing)

    def update_quantity(
        self,
        session: Session,
        user_id: int,
        item_id: int,
        payload: CartItemUpdate,
    ) -> CartItem:
        """
        Set the quantity of one of the user's cart items.
        """
        item = self.cart_repo.get_owned(session, user_id, item_id)
        if not item:
            raise NotFoundError("Cart item")

        product = self.product_repo.get_by_id(session, item.product_id)
        if not product or product.stock < payload.quantity:
            raise InsufficientStock(item.product_id)

        item.quantity = payload.quantity
        return self.cart_repo.update(session, item)

    def remove_item(self, session: Session, user_id: int, item_id: int) -> None:
        item = self.cart_repo.get_owned(session, user_id, item_id)
        if not item:
            raise NotFoundError("Cart item")
        self.cart_repo.delete(session, item)
