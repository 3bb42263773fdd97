# backend/routes/categories.py
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from models.product import Category
from routes.products import product_to_out, search_products
from schemas.product import CategoryResponse, ProductResponse

router = APIRouter(prefix="/categories", tags=["Categories"])


def _category_to_out(c: Category) -> CategoryResponse:
    return CategoryResponse(categoryId=c.id, name=c.name, description=c.description)


def _get_category_or_404(db: Session, category_id: int) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


# List all categories
@router.get("", response_model=List[CategoryResponse])
def list_categories(db: Session = Depends(get_db)):
    return [_category_to_out(c) for c in db.query(Category).order_by(Category.id.asc()).all()]


# Retrieve a single category
@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(category_id: int, db: Session = Depends(get_db)):
    return _category_to_out(_get_category_or_404(db, category_id))


# Products belonging to a category
@router.get("/{category_id}/products", response_model=List[ProductResponse])
def list_category_products(category_id: int, db: Session = Depends(get_db)):
    _get_category_or_404(db, category_id)
    return [product_to_out(p) for p in search_products(db, category_id=category_id)]
