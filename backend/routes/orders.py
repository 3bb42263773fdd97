# backend/routes/orders.py
import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from utils.tokenJWT import get_current_username
from utils.audit import write_log, client_ip
from models.order import Order
from schemas.order import OrderResponse, OrderLineItemOut
from services.checkout import CheckoutWorkflow
from services.repositories import CartRepository, IdentityResolver, OrderStore, ProfileRepository

router = APIRouter(prefix="/orders", tags=["Orders"])
logger = logging.getLogger(__name__)

# Wire the workflow to repositories sharing the request's session
def get_checkout_workflow(request: Request, db: Session = Depends(get_db)) -> CheckoutWorkflow:
    return CheckoutWorkflow(
        db,
        users=IdentityResolver(db),
        carts=CartRepository(db),
        profiles=ProfileRepository(db),
        orders=OrderStore(db),
        locks=request.app.state.checkout_locks,
        timeout=settings.CHECKOUT_TIMEOUT_SECONDS,
    )

# Map Order model to OrderResponse schema
def _order_to_out(order: Order) -> OrderResponse:
    items = [OrderLineItemOut(
        orderLineId=it.id,
        orderId=it.order_id,
        productId=it.product_id,
        salesPrice=it.sales_price,
        quantity=it.quantity,
        discount=it.discount,
    ) for it in order.items]
    return OrderResponse(
        orderId=order.id,
        userId=order.user_id,
        date=order.date,
        address=order.address,
        city=order.city,
        state=order.state,
        zip=order.zip,
        shipping_amount=order.shipping_amount,
        lineItems=items,
    )

# Checkout: convert the current user's cart into an order and clear the cart
@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def checkout(
    request: Request,
    username: str = Depends(get_current_username),
    workflow: CheckoutWorkflow = Depends(get_checkout_workflow),
):
    order = workflow.checkout(username)
    out = _order_to_out(order)

    # The order is already committed; a lost audit row must not turn it into an error
    try:
        write_log(
            workflow.db,
            user_id=order.user_id,
            action="ORDER_CREATE",
            resource="orders",
            status="SUCCESS",
            ip=client_ip(request),
            meta={"order_id": out.orderId, "items": len(out.lineItems), "total": str(out.shipping_amount)},
        )
    except SQLAlchemyError:
        workflow.db.rollback()
        logger.exception("Failed to write audit log for order %s", out.orderId)
    return out
