from pydantic import BaseModel, Field
from typing import Dict
from decimal import Decimal

# Request schema for setting the quantity of a product already in the cart
class CartUpdateItem(BaseModel):
    quantity: int = Field(ge=1)

# Product data shown inside a cart item
class CartProductOut(BaseModel):
    productId: int
    name: str
    price: Decimal

# Response schema for a single cart entry
class CartItemOut(BaseModel):
    product: CartProductOut
    quantity: int
    discountPercent: Decimal
    lineTotal: Decimal

# Response schema for the whole cart, keyed by product id
class CartOut(BaseModel):
    items: Dict[int, CartItemOut]
    total: Decimal
