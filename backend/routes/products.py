# backend/routes/products.py
from decimal import Decimal
from typing import Optional, List
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product
from schemas.product import ProductResponse

router = APIRouter(prefix="/products", tags=["Products"])


def product_to_out(p: Product) -> ProductResponse:
    return ProductResponse(
        productId=p.id,
        name=p.name,
        price=p.price,
        categoryId=p.category_id,
        description=p.description,
        color=p.color,
        stock=p.stock,
        featured=bool(p.featured),
        imageUrl=p.image_url,
    )


def search_products(
    db: Session,
    category_id: Optional[int] = None,
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
    color: Optional[str] = None,
) -> List[Product]:
    # Every filter is optional; omitted ones do not narrow the result
    query = db.query(Product)
    if category_id is not None: query = query.filter(Product.category_id == category_id)
    if min_price is not None: query = query.filter(Product.price >= min_price)
    if max_price is not None: query = query.filter(Product.price <= max_price)
    if color: query = query.filter(Product.color.ilike(color))
    return query.order_by(Product.id.asc()).all()


# =========================
# PRODUCT LIST
# =========================
@router.get("", response_model=List[ProductResponse])
def list_products(
    cat: Optional[int] = Query(None, description="Category id"),
    minPrice: Optional[Decimal] = Query(None, ge=0),
    maxPrice: Optional[Decimal] = Query(None, ge=0),
    color: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    products = search_products(db, category_id=cat, min_price=minPrice, max_price=maxPrice, color=color)
    return [product_to_out(p) for p in products]


# =========================
# SINGLE PRODUCT
# =========================
@router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_db)):
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product_to_out(product)
