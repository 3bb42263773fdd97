# backend/services/checkout.py
"""
Checkout: turn a user's shopping cart into an order.

The order row, its line items and the cart clean-up are written in one
transaction on the workflow's Session. Any failure after the first write
rolls all of them back, so a checkout either fully happens or leaves the
database untouched.
"""
import logging
import time
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.order import Order, OrderLineItem
from services.cart import ShoppingCart, money
from services.errors import Internal, InvalidState, NotFound, ServiceError
from services.locks import UserLockRegistry
from services.repositories import CartRepository, IdentityResolver, OrderStore, ProfileRepository

logger = logging.getLogger(__name__)


class CheckoutWorkflow:
    def __init__(
        self,
        db: Session,
        users: IdentityResolver,
        carts: CartRepository,
        profiles: ProfileRepository,
        orders: OrderStore,
        locks: UserLockRegistry,
        timeout: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.db = db
        self.users = users
        self.carts = carts
        self.profiles = profiles
        self.orders = orders
        self.locks = locks
        self.timeout = timeout
        self.clock = clock
        self.now = now

    def checkout(self, principal_username: str) -> Order:
        deadline = self.clock() + self.timeout if self.timeout else None

        user = self.users.get_by_username(principal_username)

        with self.locks.hold(user.id):
            try:
                order = self._place_order(user.id, deadline)
                self._check_deadline(deadline)
                self.db.commit()
            except ServiceError:
                self.db.rollback()
                raise
            except SQLAlchemyError as exc:
                self.db.rollback()
                logger.exception("Checkout of user %s failed on commit", user.id)
                raise Internal("Error processing checkout") from exc
            except Exception as exc:
                self.db.rollback()
                logger.exception("Unexpected error during checkout of user %s", user.id)
                raise Internal("Error processing checkout") from exc

        logger.info(
            "Order %s created for user %s: %d line items, total %s",
            order.id, user.id, len(order.items), order.shipping_amount,
        )
        return order

    def _place_order(self, user_id: int, deadline: Optional[float]) -> Order:
        cart = self.carts.get_by_user_id(user_id, lock=True)
        if cart.is_empty():
            raise InvalidState("Shopping cart is empty")

        try:
            profile = self.profiles.get_by_user_id(user_id)
        except NotFound:
            raise InvalidState("User profile not found")

        self._check_deadline(deadline)

        order = self.orders.insert_order(Order(
            user_id=user_id,
            date=self.now(),
            address=profile.address,
            city=profile.city,
            state=profile.state,
            zip=profile.zip,
            shipping_amount=money(cart.total),
        ))

        self._insert_line_items(order, cart, deadline)

        self._check_deadline(deadline)
        self.carts.clear(user_id)
        return order

    def _insert_line_items(self, order: Order, cart: ShoppingCart, deadline: Optional[float]) -> None:
        for item in cart:
            self._check_deadline(deadline)
            self.orders.insert_line_item(OrderLineItem(
                order=order,
                product_id=item.product_id,
                sales_price=item.product.price,
                quantity=item.quantity,
                discount=item.discount_percent,
            ))

    def _check_deadline(self, deadline: Optional[float]) -> None:
        if deadline is not None and self.clock() > deadline:
            logger.warning("Checkout exceeded %.1fs, rolling back", self.timeout)
            raise Internal("Checkout timed out")
