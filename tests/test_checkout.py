"""Checkout workflow tests against the service layer."""

from decimal import Decimal

import pytest
from sqlalchemy import update
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from storefront.core.errors import (
    EmptyCartSelection,
    ErrorKind,
    InsufficientStock,
    PersistenceError,
)
from storefront.models.cart import CartItem
from storefront.models.order import Order, OrderItem, OrderStatus
from storefront.models.product import Product
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.services.order_service import OrderService


def _service(cart_repo=None, product_repo=None):
    return OrderService(
        OrderRepository(),
        cart_repo or CartRepository(),
        product_repo or ProductRepository(),
    )


def _count(session, model):
    return len(session.exec(select(model)).all())


class TestHappyPath:
    def test_creates_order_and_consumes_cart(
        self, session, make_user, make_product, make_cart_item
    ):
        user = make_user()
        product = make_product(price="9.99", stock=5)
        item = make_cart_item(user, product, quantity=2)
        item_id, product_id = item.id, product.id

        order_id = _service().create_order(session, user.id, [item_id])

        order = session.get(Order, order_id)
        assert order.user_id == user.id
        assert order.total_amount == Decimal("19.98")
        assert order.status == OrderStatus.pending

        assert session.get(Product, product_id).stock == 3
        assert session.get(CartItem, item_id) is None

        items = session.exec(select(OrderItem).where(OrderItem.order_id == order_id)).all()
        assert len(items) == 1
        assert items[0].quantity == 2
        assert items[0].price == Decimal("9.99")

    def test_total_is_exact_decimal_sum(
        self, session, make_user, make_product, make_cart_item
    ):
        user = make_user()
        lines = [("0.10", 1), ("0.20", 2), ("0.30", 3)]
        ids = [
            make_cart_item(user, make_product(price=p, stock=10, name=f"p{p}"), q).id
            for p, q in lines
        ]

        order_id = _service().create_order(session, user.id, ids)

        order = session.get(Order, order_id)
        assert order.total_amount == Decimal("1.40")
        prices = sorted(
            it.price
            for it in session.exec(select(OrderItem).where(OrderItem.order_id == order_id))
        )
        assert prices == [Decimal("0.10"), Decimal("0.20"), Decimal("0.30")]

    def test_uses_current_price_and_keeps_it_on_the_item(
        self, session, make_user, make_product, make_cart_item
    ):
        user = make_user()
        product = make_product(price="5.00", stock=5)
        item = make_cart_item(user, product, quantity=1)

        product.price = Decimal("7.50")
        session.add(product)
        session.commit()

        order_id = _service().create_order(session, user.id, [item.id])

        product = session.get(Product, product.id)
        product.price = Decimal("99.00")
        session.add(product)
        session.commit()

        order_item = session.exec(
            select(OrderItem).where(OrderItem.order_id == order_id)
        ).one()
        assert order_item.price == Decimal("7.50")
        assert session.get(Order, order_id).total_amount == Decimal("7.50")

    def test_duplicate_ids_are_charged_once(
        self, session, make_user, make_product, make_cart_item
    ):
        user = make_user()
        product = make_product(price="2.00", stock=5)
        item = make_cart_item(user, product, quantity=2)

        order_id = _service().create_order(session, user.id, [item.id, item.id])

        assert session.get(Order, order_id).total_amount == Decimal("4.00")
        assert session.get(Product, product.id).stock == 3
        assert _count(session, OrderItem) == 1

    def test_only_selected_items_are_consumed(
        self, session, make_user, make_product, make_cart_item
    ):
        user = make_user()
        chosen = make_cart_item(user, make_product(name="a"), 1)
        kept = make_cart_item(user, make_product(name="b"), 1)
        chosen_id, kept_id = chosen.id, kept.id

        _service().create_order(session, user.id, [chosen_id])

        assert session.get(CartItem, chosen_id) is None
        assert session.get(CartItem, kept_id) is not None


class TestRejections:
    def test_unknown_ids(self, session, make_user):
        user = make_user()

        with pytest.raises(EmptyCartSelection) as exc_info:
            _service().create_order(session, user.id, [404])

        assert exc_info.value.kind is ErrorKind.EMPTY_CART_SELECTION
        assert _count(session, Order) == 0

    def test_foreign_cart_item_is_not_orderable(
        self, session, make_user, make_product, make_cart_item
    ):
        owner = make_user()
        other = make_user()
        product = make_product(stock=5)
        item = make_cart_item(owner, product, quantity=1)
        item_id = item.id

        with pytest.raises(EmptyCartSelection):
            _service().create_order(session, other.id, [item_id])

        assert session.get(CartItem, item_id) is not None
        assert session.get(Product, product.id).stock == 5

    def test_foreign_ids_are_dropped_from_mixed_selection(
        self, session, make_user, make_product, make_cart_item
    ):
        owner = make_user()
        other = make_user()
        mine = make_cart_item(owner, make_product(name="a", price="1.00"), 1)
        theirs = make_cart_item(other, make_product(name="b", price="50.00"), 1)
        theirs_id = theirs.id

        order_id = _service().create_order(session, owner.id, [mine.id, theirs_id])

        assert session.get(Order, order_id).total_amount == Decimal("1.00")
        assert session.get(CartItem, theirs_id) is not None

    def test_insufficient_stock_leaves_everything_untouched(
        self, session, make_user, make_product, make_cart_item
    ):
        user = make_user()
        product = make_product(stock=1)
        item = make_cart_item(user, product, quantity=2)
        item_id, product_id = item.id, product.id

        with pytest.raises(InsufficientStock) as exc_info:
            _service().create_order(session, user.id, [item_id])

        assert exc_info.value.product_id == product_id
        assert exc_info.value.to_dict()["product_id"] == product_id
        assert session.get(CartItem, item_id) is not None
        assert session.get(Product, product_id).stock == 1
        assert _count(session, Order) == 0

    def test_first_short_line_by_cart_item_id_is_reported(
        self, session, make_user, make_product, make_cart_item
    ):
        user = make_user()
        first = make_product(name="first", stock=0)
        second = make_product(name="second", stock=0)
        a = make_cart_item(user, first, 1)
        b = make_cart_item(user, second, 1)

        with pytest.raises(InsufficientStock) as exc_info:
            _service().create_order(session, user.id, [b.id, a.id])

        assert exc_info.value.product_id == first.id


class _FailingProductRepository(ProductRepository):
    """Fails the second stock decrement with a database error."""

    def __init__(self):
        self.calls = 0

    def decrement_stock(self, session, product_id, quantity):
        self.calls += 1
        if self.calls == 2:
            raise OperationalError("UPDATE products", {}, Exception("connection lost"))
        super().decrement_stock(session, product_id, quantity)


class _StaleCartRepository(CartRepository):
    """Returns lines, then drains stock as a competing checkout would."""

    def lookup_lines(self, session, user_id, cart_item_ids):
        lines = super().lookup_lines(session, user_id, cart_item_ids)
        session.exec(update(Product).values(stock=1))
        return lines


class TestAtomicity:
    def test_failure_after_order_insert_rolls_everything_back(
        self, session, make_user, make_product, make_cart_item
    ):
        user = make_user()
        p1 = make_product(name="a", stock=5)
        p2 = make_product(name="b", stock=5)
        i1 = make_cart_item(user, p1, 2)
        i2 = make_cart_item(user, p2, 3)
        ids = [i1.id, i2.id]
        product_ids = [p1.id, p2.id]

        with pytest.raises(PersistenceError) as exc_info:
            _service(product_repo=_FailingProductRepository()).create_order(
                session, user.id, ids
            )

        assert isinstance(exc_info.value.__cause__, OperationalError)
        assert _count(session, Order) == 0
        assert _count(session, OrderItem) == 0
        assert [session.get(Product, pid).stock for pid in product_ids] == [5, 5]
        assert all(session.get(CartItem, cid) is not None for cid in ids)

    def test_guarded_decrement_rejects_stale_stock_read(
        self, session, make_user, make_product, make_cart_item
    ):
        user = make_user()
        product = make_product(stock=3)
        item = make_cart_item(user, product, quantity=2)
        item_id, product_id = item.id, product.id

        with pytest.raises(InsufficientStock):
            _service(cart_repo=_StaleCartRepository()).create_order(
                session, user.id, [item_id]
            )

        assert _count(session, Order) == 0
        assert session.get(Product, product_id).stock == 3
        assert session.get(CartItem, item_id) is not None


class TestStockInvariant:
    def test_sequential_checkouts_stop_at_available_stock(
        self, session, make_user, make_product, make_cart_item
    ):
        product = make_product(stock=3)
        buyers = [make_user() for _ in range(3)]
        selections = [(u.id, make_cart_item(u, product, 2).id) for u in buyers]

        sold = 0
        for user_id, item_id in selections:
            try:
                _service().create_order(session, user_id, [item_id])
                sold += 2
            except InsufficientStock:
                pass

        assert sold == 2
        assert session.get(Product, product.id).stock == 1
        assert _count(session, Order) == 1
