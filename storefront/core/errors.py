# storefront/core/errors.py
"""
Typed business errors raised by services and repositories.

Every error carries a machine-readable `kind` plus the HTTP status the API
layer should answer with. Routers never inspect messages; the exception
handler registered in `storefront.main` renders `to_dict()` as the body.
"""
from enum import Enum
from typing import Any

from fastapi import status


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    EMPTY_CART_SELECTION = "empty_cart_selection"
    INSUFFICIENT_STOCK = "insufficient_stock"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    PERSISTENCE = "persistence"


class StoreError(Exception):
    kind: ErrorKind = ErrorKind.VALIDATION
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, **fields: Any):
        super().__init__(message)
        self.message = message
        self.fields = fields

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.kind.value, "detail": self.message, **self.fields}


class ValidationError(StoreError):
    """Malformed or unacceptable input."""

    kind = ErrorKind.VALIDATION


class EmptyCartSelection(StoreError):
    """None of the requested cart items belong to the caller."""

    kind = ErrorKind.EMPTY_CART_SELECTION

    def __init__(self, message: str = "No matching cart items"):
        super().__init__(message)


class InsufficientStock(StoreError):
    """A product cannot cover the requested quantity."""

    kind = ErrorKind.INSUFFICIENT_STOCK

    def __init__(self, product_id: int):
        super().__init__(
            f"Insufficient stock for product {product_id}",
            product_id=product_id,
        )
        self.product_id = product_id


class NotFoundError(StoreError):
    kind = ErrorKind.NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str):
        super().__init__(f"{resource} not found")
        self.resource = resource


class ConflictError(StoreError):
    # Duplicates are reported as 400, matching the register endpoint contract.
    kind = ErrorKind.CONFLICT


class PersistenceError(StoreError):
    """Unexpected database failure; the transaction has been rolled back."""

    kind = ErrorKind.PERSISTENCE
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
