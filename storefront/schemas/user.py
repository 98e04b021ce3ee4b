# storefront/schemas/user.py
from datetime import datetime

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class UserRegister(SQLModel):
    """
    Payload for account registration.

    Validation rules:
      - username at least 3 characters, no surrounding whitespace
      - password at least 6 characters (bcrypt only reads 72 bytes)
      - email must be a valid EmailStr
    """

    model_config = ConfigDict(extra="forbid")

    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=6, max_length=72)
    email: EmailStr

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("username must be at least 3 characters")
        return v


class UserLogin(SQLModel):
    model_config = ConfigDict(extra="forbid")

    username: str
    password: str


class TokenRead(SQLModel):
    token: str


class UserRead(SQLModel):
    """Response schema returned to clients. Never includes the password."""

    id: int
    username: str
    email: str
    created_at: datetime


class MessageRead(SQLModel):
    message: str
