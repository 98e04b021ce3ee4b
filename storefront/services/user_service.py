# storefront/services/user_service.py
from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from storefront.core.errors import ConflictError
from storefront.core.security import (
    create_access_token,
    hash_password,
    verify_password,
)
from storefront.models.user import User
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.user import UserLogin, UserRegister


class UserService:
    """
    Business logic for User.

    Responsibilities:
      - registration with hashed passwords and unique username/email
      - credential check and token issuance on login
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    def register(self, session: Session, payload: UserRegister) -> User:
        """
        Create an account.

        Raises:
            ConflictError: if the username or email is already registered.
        """
        if self.repo.exists(session, payload.username, payload.email):
            raise ConflictError("Username or email already exists")

        user = User(
            username=payload.username,
            password=hash_password(payload.password),
            email=payload.email,
        )
        try:
            return self.repo.create(session, user)
        except IntegrityError as exc:
            # Lost a race with a concurrent registration.
            session.rollback()
            raise ConflictError("Username or email already exists") from exc

    def login(self, session: Session, payload: UserLogin) -> str:
        """
        Verify credentials and return a signed access token.

        Raises:
            HTTPException(401): unknown username or wrong password.
        """
        user = self.repo.get_by_username(session, payload.username)
        if not user or not verify_password(payload.password, user.password):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid username or password",
            )
        return create_access_token(user.id, user.username)
