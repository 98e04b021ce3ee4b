# storefront/services/order_service.py
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from storefront.core.errors import (
    EmptyCartSelection,
    InsufficientStock,
    NotFoundError,
    PersistenceError,
)
from storefront.models.order import Order, OrderItem, OrderStatus
from storefront.repositories.cart_repo import CartLine, CartRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.order import (
    OrderItemRead,
    OrderStatusUpdate,
    OrderWithItemsRead,
)

logger = logging.getLogger(__name__)


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Checkout: turn selected cart items into an Order atomically
      - List / read the caller's orders with their items
      - Update order status (no transition rules, no restock)
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
    ):
        self.order_repo = order_repo
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # -------- Checkout --------

    def create_order(
        self,
        session: Session,
        user_id: int,
        cart_item_ids: Iterable[int],
    ) -> int:
        """
        Convert the given cart items of `user_id` into an Order.

        Steps (one transaction, committed at the end):
          1. De-duplicate ids and resolve them against the caller's cart,
             joined with current product price and stock.
          2. Nothing resolved => EmptyCartSelection.
          3. Check stock per line in ascending cart item id
             => InsufficientStock(product_id) on the first short line.
          4. total_amount = sum(current price * quantity), in Decimal.
          5. Insert Order (pending) and one OrderItem per line, each
             carrying the unit price used in the total.
          6. Decrement stock with a guarded UPDATE per line.
          7. Delete the consumed cart items.

        Any failure rolls back every step. Database errors surface as
        PersistenceError; business errors are re-raised unchanged.

        Returns:
            The new order id.
        """
        ids = sorted(set(cart_item_ids))

        try:
            lines = self.cart_repo.lookup_lines(session, user_id, ids)
            if not lines:
                raise EmptyCartSelection()

            for line in lines:
                if line.available_stock < line.quantity:
                    raise InsufficientStock(line.product_id)

            order = self.order_repo.create_order(
                session,
                Order(
                    user_id=user_id,
                    total_amount=self._total(lines),
                    status=OrderStatus.pending,
                ),
            )

            self.order_repo.create_items(
                session,
                [
                    OrderItem(
                        order_id=order.id,
                        product_id=line.product_id,
                        quantity=line.quantity,
                        price=line.unit_price,
                    )
                    for line in lines
                ],
            )

            for line in lines:
                self.product_repo.decrement_stock(
                    session, line.product_id, line.quantity
                )

            self.cart_repo.prune(
                session, user_id, [line.cart_item_id for line in lines]
            )

            order_id = order.id
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise PersistenceError("Order could not be saved") from exc
        except Exception:
            session.rollback()
            raise

        logger.info(
            "Created order %s for user %s (%d lines)",
            order_id,
            user_id,
            len(lines),
        )
        return order_id

    @staticmethod
    def _total(lines: list[CartLine]) -> Decimal:
        total = Decimal("0.00")
        for line in lines:
            total += line.unit_price * line.quantity
        return total

    # -------- Reads --------

    def list_user_orders(
        self,
        session: Session,
        user_id: int,
    ) -> list[OrderWithItemsRead]:
        """
        List the user's orders, newest first, each with its items.
        """
        orders = self.order_repo.list_for_user(session, user_id)
        rows = self.order_repo.list_items_with_names(
            session, [o.id for o in orders]
        )

        items_by_order: dict[int, list[OrderItemRead]] = {o.id: [] for o in orders}
        for item, name in rows:
            items_by_order[item.order_id].append(self._item_dto(item, name))

        return [self._order_dto(o, items_by_order[o.id]) for o in orders]

    def get_user_order(
        self,
        session: Session,
        user_id: int,
        order_id: int,
    ) -> OrderWithItemsRead:
        """
        Get a single order for the user, including items.

        - 404 if order not found or does not belong to this user.
        """
        order = self.order_repo.get_for_user(session, user_id, order_id)
        if not order:
            raise NotFoundError("Order")

        rows = self.order_repo.list_items_with_names(session, [order.id])
        return self._order_dto(order, [self._item_dto(it, name) for it, name in rows])

    # -------- Status --------

    def update_status(
        self,
        session: Session,
        user_id: int,
        order_id: int,
        payload: OrderStatusUpdate,
    ) -> Order:
        """
        Set the status of one of the user's orders.

        Any of paid / shipped / delivered / cancelled may be set from any
        state; cancelling does not return stock.
        """
        order = self.order_repo.get_for_user(session, user_id, order_id)
        if not order:
            raise NotFoundError("Order")

        order.status = OrderStatus(payload.status)
        order.updated_at = datetime.now(timezone.utc)
        self.order_repo.update_order(session, order)
        session.commit()
        session.refresh(order)
        return order

    # -------- Helper DTO builders --------

    @staticmethod
    def _item_dto(item: OrderItem, name: str | None) -> OrderItemRead:
        return OrderItemRead(
            id=item.id,
            order_id=item.order_id,
            product_id=item.product_id,
            quantity=item.quantity,
            price=item.price,
            name=name,
        )

    @staticmethod
    def _order_dto(order: Order, items: list[OrderItemRead]) -> OrderWithItemsRead:
        return OrderWithItemsRead(
            id=order.id,
            user_id=order.user_id,
            total_amount=order.total_amount,
            status=order.status,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=items,
        )
