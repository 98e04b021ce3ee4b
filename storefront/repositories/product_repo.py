# storefront/repositories/product_repo.py
from sqlalchemy import update
from sqlmodel import Session, select

from storefront.core.errors import InsufficientStock
from storefront.models.product import Product


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    # ----- Products -----

    def get_by_id(self, session: Session, product_id: int) -> Product | None:
        return session.get(Product, product_id)

    def list(
        self,
        session: Session,
        offset: int = 0,
        limit: int = 10,
    ) -> list[Product]:
        stmt = select(Product).order_by(Product.id).offset(offset).limit(limit)
        return list(session.exec(stmt).all())

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def delete(self, session: Session, product: Product) -> None:
        session.delete(product)
        session.commit()

    # ----- Inventory -----

    def decrement_stock(
        self,
        session: Session,
        product_id: int,
        quantity: int,
    ) -> None:
        """
        Take `quantity` units out of stock inside the caller's transaction.

        The guard lives in the UPDATE itself
        (`WHERE id = :id AND stock >= :q`), so two concurrent checkouts
        cannot both pass a stale read. Zero affected rows means the
        product is gone or short.

        Raises:
            InsufficientStock: if the decrement would go below zero.
        """
        stmt = (
            update(Product)
            .where(Product.id == product_id, Product.stock >= quantity)
            .values(stock=Product.stock - quantity)
        )
        result = session.exec(stmt)
        if result.rowcount != 1:
            raise InsufficientStock(product_id)
