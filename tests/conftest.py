"""Shared pytest fixtures: in-memory SQLite database, seed helpers and an API client."""
from __future__ import annotations

import os
from decimal import Decimal

# Settings are read at import time; keep tests away from any local .env database
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from models.users import User
from models.profile import Profile
from models.product import Category, Product
from models.cart import CartEntry
import models.order  # noqa: F401
import models.log  # noqa: F401
from utils.tokenJWT import create_access_token


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_user(db):
    def _make(username="george", with_profile=True, **profile_fields):
        user = User(username=username, hashed_password="not-a-real-hash", role="ROLE_USER")
        db.add(user)
        db.flush()
        if with_profile:
            fields = {
                "first_name": "George",
                "last_name": "Jetson",
                "address": "1 Orbit Way",
                "city": "Dallas",
                "state": "TX",
                "zip": "75051",
            }
            fields.update(profile_fields)
            db.add(Profile(user_id=user.id, **fields))
        db.commit()
        return user
    return _make


@pytest.fixture()
def make_product(db):
    def _make(name="Widget", price="10.00"):
        category = db.query(Category).first()
        if category is None:
            category = Category(name="Electronics", description="Gadgets")
            db.add(category)
            db.flush()
        product = Product(name=name, price=Decimal(price), category_id=category.id, stock=100, featured=False)
        db.add(product)
        db.commit()
        return product
    return _make


@pytest.fixture()
def put_in_cart(db):
    def _put(user, product, quantity=1):
        db.add(CartEntry(user_id=user.id, product_id=product.id, quantity=quantity))
        db.commit()
    return _put


@pytest.fixture()
def app(session_factory):
    from main import create_app

    application = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    application.dependency_overrides[get_db] = override_get_db
    return application


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def auth_headers():
    def _headers(username):
        token = create_access_token(data={"sub": username, "role": "ROLE_USER"})
        return {"Authorization": f"Bearer {token}"}
    return _headers
