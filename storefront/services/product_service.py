# storefront/services/product_service.py
from sqlmodel import Session

from storefront.core.errors import NotFoundError
from storefront.models.product import Product
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product import ProductCreate, ProductUpdate


class ProductService:
    """
    Business logic for the product catalog.
    """

    def __init__(self, repo: ProductRepository, cart_repo: CartRepository):
        self.repo = repo
        self.cart_repo = cart_repo

    def list_products(
        self,
        session: Session,
        offset: int = 0,
        limit: int = 10,
    ) -> list[Product]:
        return self.repo.list(session, offset=offset, limit=limit)

    def get_product(self, session: Session, product_id: int) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise NotFoundError("Product")
        return product

    def create_product(self, session: Session, payload: ProductCreate) -> Product:
        product = Product(
            name=payload.name,
            description=payload.description,
            price=payload.price,
            stock=payload.stock,
        )
        return self.repo.create(session, product)

    def update_product(
        self,
        session: Session,
        product_id: int,
        payload: ProductUpdate,
    ) -> Product:
        """
        Partial update of a product. Only fields present in the payload change.
        """
        product = self.get_product(session, product_id)

        for field, value in payload.model_dump(exclude_unset=True).items():
            if field != "description" and value is None:
                continue
            setattr(product, field, value)

        return self.repo.update(session, product)

    def delete_product(self, session: Session, product_id: int) -> None:
        """
        Delete a product together with any cart rows that point at it.
        """
        product = self.get_product(session, product_id)
        self.cart_repo.delete_for_product(session, product_id)
        self.repo.delete(session, product)
