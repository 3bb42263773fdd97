from pydantic import BaseModel
from typing import Optional
from decimal import Decimal


# Public view of a catalog product
class ProductResponse(BaseModel):
    productId: int
    name: str
    price: Decimal
    categoryId: int
    description: Optional[str] = None
    color: Optional[str] = None
    stock: int
    featured: bool = False
    imageUrl: Optional[str] = None


# Public view of a product category
class CategoryResponse(BaseModel):
    categoryId: int
    name: str
    description: Optional[str] = None
