# app/routers/admin.py
import uuid

from fastapi import (
    APIRouter,
    Depends,
    File,
    HTTPException,
    UploadFile,
    status,
)
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.models.user import User
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.review_repo import ReviewRepository
from app.repositories.user_repo import UserRepository
from app.schemas.order import OrderRead
from app.schemas.product import ProductCreate, ProductRead, ProductUpdate
from app.schemas.user import UserRead, UserRoleUpdate
from app.services.order_service import OrderService
from app.services.product_service import ProductService
from app.services.user_service import UserService

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)

product_repo = ProductRepository()
order_repo = OrderRepository()
user_service = UserService(UserRepository())
order_service = OrderService(order_repo, product_repo)
product_service = ProductService(product_repo, ReviewRepository(), order_repo)


# -------- Users --------


@router.get("/users", response_model=list[UserRead])
def list_users(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
):
    return user_service.list_users(session, skip, limit)


@router.get("/users/{user_id}", response_model=UserRead)
def get_user(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return user_service.get_user(session, user_id)


@router.patch("/users/{user_id}/role", response_model=UserRead)
def change_role(
    user_id: uuid.UUID,
    payload: UserRoleUpdate,
    session: Session = Depends(get_session),
    current_admin: User = Depends(require_admin),
):
    """
    Update a user's role. Allowed roles: user, admin.
    """
    return user_service.update_role(session, current_admin, user_id, payload)


# -------- Orders --------


@router.get("/orders", response_model=list[OrderRead])
def list_orders(
    session: Session = Depends(get_session),
    delivered: bool | None = None,
    skip: int = 0,
    limit: int = 50,
):
    """
    All orders, newest first. `delivered=false` lists orders still to ship.
    """
    return order_service.list_all_orders(session, skip, limit, delivered=delivered)


@router.put("/orders/{order_id}/deliver", response_model=OrderRead)
def deliver_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Mark an order as delivered.
    """
    return order_service.mark_delivered(session, order_id)


# -------- Products --------


@router.post(
    "/products",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    return product_service.create_product(session, payload)


@router.patch("/products/{product_id}", response_model=ProductRead)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    return product_service.update_product(session, product_id, payload)


@router.delete(
    "/products/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Delete a product, its reviews and its Storage image.
    """
    product_service.delete_product(session, product_id)
    return None


@router.post(
    "/products/{product_id}/image",
    response_model=ProductRead,
    summary="Upload or replace the image of a product",
)
def upload_product_image(
    product_id: uuid.UUID,
    file: UploadFile = File(...),
    session: Session = Depends(get_session),
):
    """
    Upload a new product image (JPEG, PNG or WEBP, max 5MB).
    """
    if not file.content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing content-type for uploaded file",
        )

    file_bytes = file.file.read()
    return product_service.set_image(
        session=session,
        product_id=product_id,
        content_type=file.content_type,
        file_bytes=file_bytes,
    )
