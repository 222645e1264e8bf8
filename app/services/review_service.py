# app/services/review_service.py
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable

from sqlmodel import Session

from app.core.errors import Failure, Result, Success
from app.models.product import Product, Review
from app.models.user import User
from app.repositories.product_repo import ProductRepository
from app.repositories.review_repo import ReviewRepository
from app.schemas.review import ReviewCreate, ReviewSubmitRead

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


@dataclass(frozen=True)
class RatingSummary:
    num_reviews: int
    rating: float


def summarize_ratings(ratings: Iterable[int]) -> RatingSummary:
    """
    Review count and arithmetic mean of the ratings.

    The mean is kept raw; rounding is a display concern. No reviews gives
    (0, 0.0).
    """
    values = list(ratings)
    if not values:
        return RatingSummary(num_reviews=0, rating=0.0)
    return RatingSummary(num_reviews=len(values), rating=sum(values) / len(values))


def parse_rating(value: Any) -> int | None:
    """
    Whole-number rating from a JSON value: 4, 4.0 and "4" all give 4.
    Anything else (4.5, "abc", true) gives None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def validate_review(payload: ReviewCreate) -> Failure | None:
    if payload.comment is None or not payload.comment.strip():
        return Failure.validation("Please enter comment")
    if payload.rating is None or payload.rating == "":
        return Failure.validation("Please enter rating")
    rating = parse_rating(payload.rating)
    if rating is None or not MIN_RATING <= rating <= MAX_RATING:
        return Failure.validation(
            f"Rating must be between {MIN_RATING} and {MAX_RATING}"
        )
    return None


class ReviewService:
    """
    Product reviews and the product's rating aggregate.

    One review per (product, user): resubmitting updates it in place.
    After every write, num_reviews and rating are recomputed from all of
    the product's reviews and saved with the review in one commit.

    Two submissions for the same product from different sessions are not
    serialized; the last commit of the aggregate fields wins.
    """

    def __init__(self, product_repo: ProductRepository, review_repo: ReviewRepository):
        self.product_repo = product_repo
        self.review_repo = review_repo

    def _get_product(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return self.product_repo.get_by_id(session, product_id)

    def list_reviews(self, session: Session, product_id: uuid.UUID) -> Result[list[Review]]:
        product = self._get_product(session, product_id)
        if not product:
            return Failure.not_found("Product not found")
        return Success(self.review_repo.list_for_product(session, product.id))

    def submit_review(
        self,
        session: Session,
        product_id: uuid.UUID,
        user: User,
        payload: ReviewCreate,
    ) -> Result[ReviewSubmitRead]:
        """
        Create the user's review of a product, or update it if one exists.

        Rules:
          - comment is required, rating must be 1..5 (checked first)
          - product must exist
          - nothing is written when any check fails
        """
        invalid = validate_review(payload)
        if invalid is not None:
            return invalid

        product = self._get_product(session, product_id)
        if not product:
            return Failure.not_found("Product not found")

        comment = payload.comment.strip()
        rating = parse_rating(payload.rating)
        existing = self.review_repo.get_for_user(session, product.id, user.id)

        if existing:
            existing.rating = rating
            existing.comment = comment
            existing.updated_at = datetime.now(timezone.utc)
            self.review_repo.add(session, existing)
            created = False
        else:
            self.review_repo.add(
                session,
                Review(
                    product_id=product.id,
                    user_id=user.id,
                    name=user.name,
                    rating=rating,
                    comment=comment,
                ),
            )
            created = True

        reviews = self.review_repo.list_for_product(session, product.id)
        summary = summarize_ratings(r.rating for r in reviews)
        product.num_reviews = summary.num_reviews
        product.rating = summary.rating
        session.add(product)
        session.commit()

        logger.info(
            "Review %s for product %s: num_reviews=%s rating=%.2f",
            "created" if created else "updated",
            product.id,
            summary.num_reviews,
            summary.rating,
        )

        return Success(
            ReviewSubmitRead(
                message="Review submitted" if created else "Review updated",
                created=created,
                num_reviews=summary.num_reviews,
                rating=summary.rating,
            )
        )
