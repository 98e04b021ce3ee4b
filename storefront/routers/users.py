# storefront/routers/users.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import get_current_user
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.user import (
    MessageRead,
    TokenRead,
    UserLogin,
    UserRead,
    UserRegister,
)
from storefront.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

repo = UserRepository()
service = UserService(repo)


@router.post(
    "/register",
    response_model=MessageRead,
    status_code=status.HTTP_201_CREATED,
)
def register(
    payload: UserRegister,
    session: Session = Depends(get_session),
):
    """
    Create a new account.

    Duplicate username or email => 400.
    """
    service.register(session, payload)
    return MessageRead(message="Registration successful")


@router.post("/login", response_model=TokenRead)
def login(
    payload: UserLogin,
    session: Session = Depends(get_session),
):
    """
    Exchange username/password for a bearer token.
    """
    return TokenRead(token=service.login(session, payload))


@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(get_current_user)):
    """
    Return the authenticated user's profile (password excluded).
    """
    return current_user
