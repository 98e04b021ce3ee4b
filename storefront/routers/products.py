# storefront/routers/products.py
from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from storefront.core.auth import require_auth
from storefront.database import get_session
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product import (
    ProductCreate,
    ProductCreated,
    ProductDetail,
    ProductRead,
    ProductUpdate,
)
from storefront.schemas.user import MessageRead
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
cart_repo = CartRepository()
service = ProductService(repo, cart_repo)


# -------- Public endpoints --------


@router.get("", response_model=list[ProductRead])
def list_products(
    session: Session = Depends(get_session),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=10, ge=1, le=100),
):
    """
    List products, paginated by offset/limit.
    """
    return service.list_products(session, offset=offset, limit=limit)


@router.get("/{product_id}", response_model=ProductDetail)
def get_product(
    product_id: int,
    session: Session = Depends(get_session),
):
    """
    Get a single product by id.
    """
    product = service.get_product(session, product_id)
    return ProductDetail(
        item=ProductRead.model_validate(product, from_attributes=True),
        msg="Query successful",
    )


# -------- Authenticated endpoints --------


@router.post(
    "",
    response_model=ProductCreated,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_auth)],
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    product = service.create_product(session, payload)
    return ProductCreated(id=product.id, message="Product created")


@router.put(
    "/{product_id}",
    response_model=MessageRead,
    dependencies=[Depends(require_auth)],
)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    """
    Partially update a product. 404 if it does not exist.
    """
    service.update_product(session, product_id, payload)
    return MessageRead(message="Product updated")


@router.delete(
    "/{product_id}",
    response_model=MessageRead,
    dependencies=[Depends(require_auth)],
)
def delete_product(
    product_id: int,
    session: Session = Depends(get_session),
):
    service.delete_product(session, product_id)
    return MessageRead(message="Product deleted")
