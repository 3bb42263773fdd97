# backend/services/cart.py
"""
In-memory shopping cart model.

A cart is rebuilt from ``shopping_cart`` rows on every read and priced with
exact decimal arithmetic; nothing here touches the database.
"""
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterator

CENT = Decimal("0.01")


def money(value) -> Decimal:
    """Round a monetary amount to cents the way it is stored."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class ProductSnapshot:
    product_id: int
    name: str
    price: Decimal


@dataclass
class ShoppingCartItem:
    product: ProductSnapshot
    quantity: int = 1
    discount_percent: Decimal = Decimal("0")

    def __post_init__(self):
        if self.discount_percent is None:
            self.discount_percent = Decimal("0")
        self.discount_percent = Decimal(self.discount_percent)
        if self.quantity < 1:
            raise ValueError("quantity must be at least 1")
        if not Decimal("0") <= self.discount_percent <= Decimal("1"):
            raise ValueError("discount_percent must be between 0 and 1")

    @property
    def product_id(self) -> int:
        return self.product.product_id

    @property
    def line_total(self) -> Decimal:
        subtotal = self.product.price * self.quantity
        return subtotal - subtotal * self.discount_percent


@dataclass
class ShoppingCart:
    items: Dict[int, ShoppingCartItem] = field(default_factory=dict)

    def add(self, item: ShoppingCartItem) -> None:
        # Same product replaces the previous entry
        self.items[item.product_id] = item

    def contains(self, product_id: int) -> bool:
        return product_id in self.items

    def get(self, product_id: int) -> ShoppingCartItem:
        return self.items.get(product_id)

    def is_empty(self) -> bool:
        return not self.items

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[ShoppingCartItem]:
        return iter(self.items.values())

    @property
    def total(self) -> Decimal:
        return sum((item.line_total for item in self.items.values()), Decimal("0"))
