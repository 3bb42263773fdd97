# backend/routes/cart.py
from fastapi import APIRouter, Depends, status, Request
from sqlalchemy.orm import Session
from database import get_db
from utils.tokenJWT import get_current_user
from utils.audit import write_log, client_ip
from models.users import User
from schemas.cart import CartUpdateItem, CartOut, CartItemOut, CartProductOut
from services.cart import ShoppingCart
from services.repositories import CartRepository

router = APIRouter(prefix="/cart", tags=["Cart"])

def _cart_to_out(cart: ShoppingCart) -> CartOut:
    items_out = {}
    for it in cart:
        items_out[it.product_id] = CartItemOut(
            product=CartProductOut(productId=it.product_id, name=it.product.name, price=it.product.price),
            quantity=it.quantity,
            discountPercent=it.discount_percent,
            lineTotal=it.line_total,
        )
    return CartOut(items=items_out, total=cart.total)

@router.get("", response_model=CartOut)
def get_cart(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return _cart_to_out(CartRepository(db).get_by_user_id(current_user.id))

@router.post("/products/{product_id}", response_model=CartOut, status_code=status.HTTP_201_CREATED)
def add_to_cart(
    product_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    carts = CartRepository(db)
    try:
        carts.add_product(current_user.id, product_id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    out = _cart_to_out(carts.get_by_user_id(current_user.id))
    write_log(
        db,
        user_id=current_user.id,
        action="CART_ADD",
        resource="cart",
        status="SUCCESS",
        ip=client_ip(request),
        meta={"product_id": product_id, "cart_items": len(out.items), "total": str(out.total)},
    )
    return out

@router.put("/products/{product_id}", response_model=CartOut)
def update_cart_item(
    product_id: int,
    payload: CartUpdateItem,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    carts = CartRepository(db)
    try:
        carts.update_quantity(current_user.id, product_id, payload.quantity)
        db.commit()
    except Exception:
        db.rollback()
        raise

    out = _cart_to_out(carts.get_by_user_id(current_user.id))
    write_log(
        db,
        user_id=current_user.id,
        action="CART_UPDATE",
        resource="cart",
        status="SUCCESS",
        ip=client_ip(request),
        meta={"product_id": product_id, "qty": payload.quantity, "total": str(out.total)},
    )
    return out

@router.delete("", response_model=CartOut, status_code=status.HTTP_202_ACCEPTED)
def clear_cart(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    carts = CartRepository(db)
    try:
        removed = carts.clear(current_user.id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    write_log(
        db,
        user_id=current_user.id,
        action="CART_CLEAR",
        resource="cart",
        status="SUCCESS",
        ip=client_ip(request),
        meta={"removed": removed},
    )
    return _cart_to_out(ShoppingCart())
