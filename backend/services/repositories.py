# backend/services/repositories.py
"""
SQLAlchemy-backed collaborators of the checkout workflow.

All repositories share the caller's Session and never commit; the owner of
the session decides where the transaction ends. Driver errors are logged and
re-raised as ``Internal``.
"""
import logging
from decimal import Decimal
from functools import wraps
from typing import Optional

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from models.users import User
from models.profile import Profile
from models.product import Product
from models.cart import CartEntry
from models.order import Order, OrderLineItem
from services.cart import ProductSnapshot, ShoppingCart, ShoppingCartItem
from services.errors import Internal, InvalidState, NotFound

logger = logging.getLogger(__name__)


def _storage_errors(message: str):
    """Wrap SQLAlchemy failures of a repository method into Internal."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except SQLAlchemyError as exc:
                logger.exception(message)
                raise Internal(message) from exc
        return wrapper
    return decorator


class IdentityResolver:
    def __init__(self, db: Session):
        self.db = db

    @_storage_errors("Error loading user")
    def get_by_username(self, username: str) -> User:
        user = self.db.scalars(select(User).where(User.username == username)).first()
        if user is None:
            raise NotFound("User not found")
        return user

    @_storage_errors("Error checking username")
    def exists(self, username: str) -> bool:
        return self.db.scalars(select(User.id).where(User.username == username)).first() is not None

    @_storage_errors("Error creating user")
    def create(self, username: str, hashed_password: str, role: str) -> User:
        user = User(username=username, hashed_password=hashed_password, role=role)
        self.db.add(user)
        try:
            self.db.flush()
        except IntegrityError:
            # A concurrent registration took the username after exists() said no
            raise InvalidState("User Already Exists.")
        return user


class CartRepository:
    def __init__(self, db: Session):
        self.db = db

    def _entries(self, user_id: int, lock: bool = False):
        stmt = select(CartEntry).where(CartEntry.user_id == user_id).order_by(CartEntry.product_id)
        if lock:
            # Ignored by SQLite, row locks on Postgres/MySQL
            stmt = stmt.with_for_update()
        return self.db.scalars(stmt).unique().all()

    @_storage_errors("Error retrieving shopping cart")
    def get_by_user_id(self, user_id: int, lock: bool = False) -> ShoppingCart:
        cart = ShoppingCart()
        for entry in self._entries(user_id, lock=lock):
            product = ProductSnapshot(
                product_id=entry.product.id,
                name=entry.product.name,
                price=Decimal(entry.product.price),
            )
            # shopping_cart has no discount column: every item loads undiscounted
            cart.add(ShoppingCartItem(product=product, quantity=entry.quantity))
        return cart

    @_storage_errors("Error adding product to cart")
    def add_product(self, user_id: int, product_id: int) -> None:
        if self.db.get(Product, product_id) is None:
            raise NotFound("Product not found")
        entry = self.db.get(CartEntry, (user_id, product_id))
        if entry:
            entry.quantity += 1
        else:
            self.db.add(CartEntry(user_id=user_id, product_id=product_id, quantity=1))
        self.db.flush()

    @_storage_errors("Error updating product quantity in cart")
    def update_quantity(self, user_id: int, product_id: int, quantity: int) -> None:
        entry = self.db.get(CartEntry, (user_id, product_id))
        if entry is None:
            raise NotFound("Product not in cart")
        entry.quantity = quantity
        self.db.flush()

    @_storage_errors("Error clearing shopping cart")
    def clear(self, user_id: int) -> int:
        result = self.db.execute(delete(CartEntry).where(CartEntry.user_id == user_id))
        return result.rowcount


class ProfileRepository:
    def __init__(self, db: Session):
        self.db = db

    @_storage_errors("Error retrieving profile")
    def get_by_user_id(self, user_id: int) -> Profile:
        profile = self.db.get(Profile, user_id)
        if profile is None:
            raise NotFound("User profile not found")
        return profile

    @_storage_errors("Error creating profile")
    def create(self, user_id: int, **fields) -> Profile:
        profile = Profile(user_id=user_id, **fields)
        self.db.add(profile)
        self.db.flush()
        return profile

    @_storage_errors("Error updating profile")
    def update(self, user_id: int, fields: dict) -> Profile:
        profile = self.get_by_user_id(user_id)
        for name, value in fields.items():
            setattr(profile, name, value)
        self.db.flush()
        return profile


class OrderStore:
    def __init__(self, db: Session):
        self.db = db

    @_storage_errors("Error inserting order")
    def insert_order(self, order: Order) -> Order:
        self.db.add(order)
        self.db.flush()
        if order.id is None:
            raise Internal("Insert failed, no order id obtained")
        logger.debug("Created order with ID: %s", order.id)
        return order

    @_storage_errors("Error inserting order line item")
    def insert_line_item(self, line: OrderLineItem) -> OrderLineItem:
        self.db.add(line)
        self.db.flush()
        if line.id is None:
            raise Internal("Insert failed, no line item id obtained")
        logger.debug("Created order line item with ID: %s", line.id)
        return line

    @_storage_errors("Error loading order")
    def get(self, order_id: int) -> Optional[Order]:
        return self.db.get(Order, order_id)
