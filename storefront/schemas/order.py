# storefront/schemas/order.py
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from storefront.models.order import OrderStatus

# Statuses a client may set; "pending" is only ever assigned at checkout.
SettableStatus = Literal["paid", "shipped", "delivered", "cancelled"]


class OrderCreate(SQLModel):
    """
    Payload for checking out a selection of cart items.

    Backend derives:
      - user_id from token
      - status = 'pending'
      - total_amount from current product prices
    """

    model_config = ConfigDict(extra="forbid")

    cart_items: list[int] = Field(min_length=1)

    @field_validator("cart_items")
    @classmethod
    def positive_ids(cls, v: list[int]) -> list[int]:
        if any(item_id <= 0 for item_id in v):
            raise ValueError("cart item ids must be positive integers")
        return v


class OrderCreated(SQLModel):
    order_id: int
    message: str


class OrderItemRead(SQLModel):
    """
    Representation of a single order line item, with the product name.
    """

    id: int
    order_id: int
    product_id: int | None
    quantity: int
    price: Decimal
    name: str | None = None


class OrderWithItemsRead(SQLModel):
    id: int
    user_id: int
    total_amount: Decimal
    status: OrderStatus
    created_at: datetime
    updated_at: datetime
    items: list[OrderItemRead]


class OrderStatusUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    status: SettableStatus
