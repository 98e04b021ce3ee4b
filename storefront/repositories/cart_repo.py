# storefront/repositories/cart_repo.py
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from sqlalchemy import delete
from sqlmodel import Session, select

from storefront.models.cart import CartItem
from storefront.models.product import Product


@dataclass(frozen=True)
class CartLine:
    """A cart item resolved against its product's current price and stock."""

    cart_item_id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    available_stock: int


class CartRepository:
    """
    Data access layer for cart_items.

    Single-row CRUD commits on its own. The checkout helpers
    (`lookup_lines`, `prune`, `delete_for_product`) only use the
    session they are handed and leave the commit to the caller.
    """

    # ---- Queries ----

    def list_for_user(
        self, session: Session, user_id: int
    ) -> list[tuple[CartItem, Product]]:
        stmt = (
            select(CartItem, Product)
            .join(Product, Product.id == CartItem.product_id)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.id)
        )
        return list(session.exec(stmt).all())

    def get_item(
        self, session: Session, user_id: int, product_id: int
    ) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.user_id == user_id, CartItem.product_id == product_id
        )
        return session.exec(stmt).first()

    def get_owned(
        self, session: Session, user_id: int, item_id: int
    ) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.id == item_id, CartItem.user_id == user_id
        )
        return session.exec(stmt).first()

    # ---- CRUD ----

    def create(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def update(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def delete(self, session: Session, item: CartItem) -> None:
        session.delete(item)
        session.commit()

    # ---- Checkout ----

    def lookup_lines(
        self,
        session: Session,
        user_id: int,
        cart_item_ids: Iterable[int],
    ) -> list[CartLine]:
        """
        Resolve cart item ids owned by `user_id` to priced lines.

        Ids that do not exist or belong to another user are dropped.
        Lines come back in ascending cart item id.
        """
        ids = list(cart_item_ids)
        if not ids:
            return []

        stmt = (
            select(
                CartItem.id,
                CartItem.product_id,
                CartItem.quantity,
                Product.price,
                Product.stock,
            )
            .join(Product, Product.id == CartItem.product_id)
            .where(CartItem.user_id == user_id, CartItem.id.in_(ids))
            .order_by(CartItem.id)
        )
        return [
            CartLine(
                cart_item_id=row[0],
                product_id=row[1],
                quantity=row[2],
                unit_price=Decimal(row[3]),
                available_stock=row[4],
            )
            for row in session.exec(stmt).all()
        ]

    def prune(
        self,
        session: Session,
        user_id: int,
        cart_item_ids: Iterable[int],
    ) -> int:
        """
        Delete the given cart items of `user_id`.

        Already-deleted ids are ignored. Returns the number of rows removed.
        """
        ids = list(cart_item_ids)
        if not ids:
            return 0

        stmt = delete(CartItem).where(
            CartItem.user_id == user_id, CartItem.id.in_(ids)
        )
        return session.exec(stmt).rowcount

    def delete_for_product(self, session: Session, product_id: int) -> int:
        stmt = delete(CartItem).where(CartItem.product_id == product_id)
        return session.exec(stmt).rowcount
