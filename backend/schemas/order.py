from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from decimal import Decimal


# Output schema for a single order line item
class OrderLineItemOut(BaseModel):
    orderLineId: int
    orderId: int
    productId: int
    salesPrice: Decimal
    quantity: int
    discount: Decimal


# Output schema of a created order; field names follow the public JSON contract
class OrderResponse(BaseModel):
    orderId: int
    userId: int
    date: datetime
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    shipping_amount: Decimal
    lineItems: List[OrderLineItemOut] = []
