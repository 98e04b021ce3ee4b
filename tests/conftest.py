import os
from decimal import Decimal

# Settings are read at import time; the app engine is replaced below.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session

from storefront.core.security import create_access_token, hash_password
from storefront.database import build_engine, get_session
from storefront.main import app
from storefront.models.cart import CartItem
from storefront.models.product import Product
from storefront.models.user import User

# One shared in-memory connection so the schema is visible to the
# TestClient worker thread. Only the test suite pins the pool this way.
engine = build_engine("sqlite://", poolclass=StaticPool)


@pytest.fixture(autouse=True)
def _tables():
    """Fresh schema for every test."""
    SQLModel.metadata.create_all(engine)
    yield
    SQLModel.metadata.drop_all(engine)


@pytest.fixture()
def session():
    with Session(engine) as session:
        yield session


@pytest.fixture()
def client():
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture()
def file_engine(tmp_path):
    """File-backed SQLite engine with the runtime pool (one connection per session)."""
    file_engine = build_engine(f"sqlite:///{tmp_path / 'shop.db'}")
    SQLModel.metadata.create_all(file_engine)
    yield file_engine
    file_engine.dispose()


@pytest.fixture()
def make_user(session):
    counter = {"n": 0}

    def _make(username=None, password="secret123"):
        counter["n"] += 1
        username = username or f"user{counter['n']}"
        user = User(
            username=username,
            password=hash_password(password),
            email=f"{username}@example.com",
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture()
def make_product(session):
    def _make(price="9.99", stock=5, name="Widget"):
        product = Product(name=name, price=Decimal(price), stock=stock)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make


@pytest.fixture()
def make_cart_item(session):
    def _make(user, product, quantity=1):
        item = CartItem(user_id=user.id, product_id=product.id, quantity=quantity)
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    return _make


@pytest.fixture()
def auth_headers():
    def _headers(user):
        token = create_access_token(user.id, user.username)
        return {"Authorization": f"Bearer {token}"}

    return _headers
