# app/routers/products.py
import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session

from app.core.auth import require_auth
from app.core.errors import raise_for_failure
from app.database import get_session
from app.models.user import User
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.review_repo import ReviewRepository
from app.schemas.product import ProductRead
from app.schemas.review import ReviewCreate, ReviewRead, ReviewSubmitRead
from app.services.product_service import ProductService
from app.services.review_service import ReviewService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
review_repo = ReviewRepository()
service = ProductService(repo, review_repo, OrderRepository())
review_service = ReviewService(repo, review_repo)


@router.get("", response_model=list[ProductRead])
def list_products(
    session: Session = Depends(get_session),
    category: str | None = None,
    query: str | None = None,
    featured: bool = False,
    skip: int = 0,
    limit: int = 50,
):
    """
    List products, newest first.

    - `category`: exact category match
    - `query`: case-insensitive substring of the name
    - `featured`: only featured products (home page carousel)
    """
    return service.list_products(
        session,
        skip=skip,
        limit=limit,
        category=category,
        query=query,
        featured_only=featured,
    )


@router.get("/categories", response_model=list[str])
def list_categories(session: Session = Depends(get_session)):
    """
    Distinct product categories, alphabetical.
    """
    return service.list_categories(session)


@router.get("/slug/{slug}", response_model=ProductRead)
def get_product_by_slug(slug: str, session: Session = Depends(get_session)):
    return service.get_by_slug(session, slug)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get a single product by id, with its current stock.
    """
    return service.get_product(session, product_id)


# -------- Reviews --------


@router.get("/{product_id}/reviews", response_model=list[ReviewRead])
def list_reviews(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Reviews of a product, oldest first.
    """
    return raise_for_failure(review_service.list_reviews(session, product_id))


@router.post(
    "/{product_id}/reviews",
    response_model=ReviewSubmitRead,
    status_code=status.HTTP_201_CREATED,
    responses={200: {"description": "Existing review updated"}},
)
def submit_review(
    product_id: uuid.UUID,
    payload: ReviewCreate,
    response: Response,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Submit a review, or update the caller's existing review.

    - 201 "Review submitted" for a first review
    - 200 "Review updated" for a resubmission
    - 400 missing comment / rating outside 1..5
    - 404 unknown product
    """
    result = raise_for_failure(
        review_service.submit_review(session, product_id, current_user, payload)
    )
    if not result.created:
        response.status_code = status.HTTP_200_OK
    return result
