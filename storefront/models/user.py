# storefront/models/user.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Registered customer account.

    The password column only ever holds a bcrypt hash and is never
    part of a response schema.
    """

    __tablename__ = "users"

    id: int | None = Field(
        default=None,
        primary_key=True,
    )

    username: str = Field(
        max_length=50,
        unique=True,
        index=True,
        description="Login name (unique)",
    )

    password: str = Field(
        max_length=255,
        description="bcrypt hash of the user's password",
    )

    email: str = Field(
        max_length=100,
        unique=True,
        index=True,
        description="Contact email (unique)",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
