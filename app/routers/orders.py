# app/routers/orders.py
import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session

from app.core.auth import require_auth
from app.core.errors import raise_for_failure
from app.database import get_session
from app.models.user import User
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.order import OrderRead, OrderWithItemsRead
from app.services.cart_session import CartContext, get_cart_context
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
product_repo = ProductRepository()
service = OrderService(order_repo, product_repo)


@router.post(
    "",
    response_model=OrderWithItemsRead,
    status_code=status.HTTP_201_CREATED,
)
def place_order(
    response: Response,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    ctx: CartContext = Depends(get_cart_context),
):
    """
    Place an order from the cart cookie.

    Requires the shipping and payment steps to be complete. On success the
    cart items are cleared (address and payment method are kept).
    """
    order = raise_for_failure(service.place_order(session, current_user, ctx))
    ctx.persist(response)
    return order


@router.get("/history", response_model=list[OrderRead])
def order_history(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    skip: int = 0,
    limit: int = 50,
):
    """
    The caller's orders, newest first (without items).
    """
    return service.list_user_orders(session, current_user.id, skip, limit)


@router.get("/{order_id}", response_model=OrderWithItemsRead)
def get_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    A single order with items. Admins may read any order.
    """
    return service.get_order(session, current_user, order_id)
