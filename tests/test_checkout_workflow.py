"""Checkout workflow against real repositories on SQLite."""
from __future__ import annotations

import itertools
from decimal import Decimal

import pytest

from models.cart import CartEntry
from models.order import Order, OrderLineItem
from models.profile import Profile
from services.checkout import CheckoutWorkflow
from services.errors import Internal, InvalidState, NotFound
from services.locks import UserLockRegistry
from services.repositories import CartRepository, IdentityResolver, OrderStore, ProfileRepository


class FailingOrderStore(OrderStore):
    """Raises on the n-th line item insert, as a broken connection would."""

    def __init__(self, db, fail_on: int):
        super().__init__(db)
        self.fail_on = fail_on
        self.line_calls = 0

    def insert_line_item(self, line):
        self.line_calls += 1
        if self.line_calls == self.fail_on:
            raise Internal("Error inserting order line item")
        return super().insert_line_item(line)


class RecordingOrderStore(OrderStore):
    def __init__(self, db):
        super().__init__(db)
        self.calls = []

    def insert_order(self, order):
        self.calls.append("order")
        return super().insert_order(order)

    def insert_line_item(self, line):
        self.calls.append("line")
        return super().insert_line_item(line)


class RecordingLocks(UserLockRegistry):
    def __init__(self):
        super().__init__(timeout=1)
        self.held = []

    def hold(self, user_id):
        self.held.append(user_id)
        return super().hold(user_id)


@pytest.fixture()
def build_workflow(db):
    def _build(orders=None, locks=None, **kwargs):
        return CheckoutWorkflow(
            db,
            users=IdentityResolver(db),
            carts=CartRepository(db),
            profiles=ProfileRepository(db),
            orders=orders if orders is not None else OrderStore(db),
            locks=locks if locks is not None else UserLockRegistry(timeout=1),
            **kwargs,
        )
    return _build


@pytest.fixture()
def stocked_cart(make_user, make_product, put_in_cart):
    user = make_user("george")
    product_a = make_product("Product A", "10.00")
    product_b = make_product("Product B", "25.00")
    put_in_cart(user, product_a, 2)
    put_in_cart(user, product_b, 1)
    return user, product_a, product_b


def _counts(db, user_id):
    return (
        db.query(Order).count(),
        db.query(OrderLineItem).count(),
        db.query(CartEntry).filter(CartEntry.user_id == user_id).count(),
    )


def test_checkout_creates_order_line_items_and_clears_cart(db, build_workflow, stocked_cart):
    user, product_a, product_b = stocked_cart

    order = build_workflow().checkout("george")

    assert order.id is not None
    assert order.user_id == user.id
    assert order.shipping_amount == Decimal("45.00")
    assert (order.address, order.city, order.state, order.zip) == ("1 Orbit Way", "Dallas", "TX", "75051")

    lines = db.query(OrderLineItem).filter(OrderLineItem.order_id == order.id).all()
    assert len(lines) == 2
    assert {(l.product_id, l.quantity, l.sales_price) for l in lines} == {
        (product_a.id, 2, Decimal("10.00")),
        (product_b.id, 1, Decimal("25.00")),
    }
    assert all(l.discount == 0 for l in lines)

    assert CartRepository(db).get_by_user_id(user.id).is_empty()


def test_line_items_reproduce_shipping_amount(db, build_workflow, make_user, make_product, put_in_cart):
    user = make_user("jane")
    for name, price, quantity in [("Pen", "1.99", 3), ("Pad", "4.35", 7), ("Ink", "0.10", 10)]:
        put_in_cart(user, make_product(name, price), quantity)

    order = build_workflow().checkout("jane")

    lines = db.query(OrderLineItem).filter(OrderLineItem.order_id == order.id).all()
    recomputed = sum((l.sales_price * l.quantity * (1 - l.discount) for l in lines), Decimal("0"))
    assert recomputed == order.shipping_amount
    assert order.shipping_amount == Decimal("37.42")


def test_line_item_count_matches_distinct_products(db, build_workflow, make_user, make_product, put_in_cart):
    user = make_user("kim")
    products = [make_product(f"Item {n}", "2.50") for n in range(5)]
    for product in products:
        put_in_cart(user, product, 1)

    order = build_workflow().checkout("kim")

    assert db.query(OrderLineItem).filter(OrderLineItem.order_id == order.id).count() == len(products)


def test_unknown_user_fails_before_any_write(db, build_workflow):
    orders = RecordingOrderStore(db)

    with pytest.raises(NotFound):
        build_workflow(orders=orders).checkout("nobody")

    assert orders.calls == []
    assert db.query(Order).count() == 0


def test_empty_cart_is_rejected_without_writes(db, build_workflow, make_user):
    make_user("george")
    orders = RecordingOrderStore(db)

    with pytest.raises(InvalidState) as exc:
        build_workflow(orders=orders).checkout("george")

    assert exc.value.detail == "Shopping cart is empty"
    assert orders.calls == []
    assert db.query(Order).count() == 0


def test_missing_profile_is_rejected_without_writes(db, build_workflow, make_user, make_product, put_in_cart):
    user = make_user("ghost", with_profile=False)
    put_in_cart(user, make_product(), 1)
    orders = RecordingOrderStore(db)

    with pytest.raises(InvalidState) as exc:
        build_workflow(orders=orders).checkout("ghost")

    assert exc.value.detail == "User profile not found"
    assert orders.calls == []
    assert _counts(db, user.id) == (0, 0, 1)


def test_failure_on_second_line_item_rolls_everything_back(db, build_workflow, stocked_cart):
    user, _, _ = stocked_cart
    orders = FailingOrderStore(db, fail_on=2)

    with pytest.raises(Internal):
        build_workflow(orders=orders).checkout("george")

    assert orders.line_calls == 2
    db.expire_all()
    assert _counts(db, user.id) == (0, 0, 2)
    assert CartRepository(db).get_by_user_id(user.id).total == Decimal("45.00")


def test_failed_checkout_can_be_retried(db, build_workflow, stocked_cart):
    user, _, _ = stocked_cart

    with pytest.raises(Internal):
        build_workflow(orders=FailingOrderStore(db, fail_on=1)).checkout("george")

    order = build_workflow().checkout("george")

    assert order.shipping_amount == Decimal("45.00")
    assert _counts(db, user.id) == (1, 2, 0)


def test_timeout_after_order_insert_rolls_back(db, build_workflow, stocked_cart):
    user, _, _ = stocked_cart
    # deadline, profile check and first line item are on time; the second line item is late
    ticks = itertools.chain([0.0, 0.0, 0.0], itertools.repeat(100.0))

    with pytest.raises(Internal) as exc:
        build_workflow(timeout=5.0, clock=lambda: next(ticks)).checkout("george")

    assert exc.value.detail == "Checkout timed out"
    db.expire_all()
    assert _counts(db, user.id) == (0, 0, 2)


def test_order_keeps_address_snapshot_after_profile_change(db, build_workflow, stocked_cart):
    user, _, _ = stocked_cart
    order = build_workflow().checkout("george")
    order_id = order.id

    profile = db.get(Profile, user.id)
    profile.address = "99 New Street"
    profile.city = "Austin"
    db.commit()

    db.expire_all()
    stored = db.get(Order, order_id)
    assert stored.address == "1 Orbit Way"
    assert stored.city == "Dallas"


def test_checkout_holds_the_user_lock(build_workflow, stocked_cart):
    user, _, _ = stocked_cart
    locks = RecordingLocks()

    build_workflow(locks=locks).checkout("george")

    assert locks.held == [user.id]


def test_busy_user_lock_fails_checkout_without_writes(db, build_workflow, stocked_cart):
    user, _, _ = stocked_cart
    locks = UserLockRegistry(timeout=0.05)

    with locks.hold(user.id):
        with pytest.raises(Internal):
            build_workflow(locks=locks).checkout("george")

    assert _counts(db, user.id) == (0, 0, 2)


def test_order_address_columns_fit_profile_columns():
    for column in ("address", "city", "state", "zip"):
        assert Order.__table__.c[column].type.length >= Profile.__table__.c[column].type.length


def test_checkout_snapshots_longest_profile_address(db, build_workflow, make_user, make_product, put_in_cart):
    long_address = "A" * Profile.__table__.c.address.type.length
    user = make_user("lena", address=long_address)
    put_in_cart(user, make_product(), 1)

    order = build_workflow().checkout("lena")

    db.expire_all()
    assert db.get(Order, order.id).address == long_address
