# app/schemas/review.py
import uuid
from datetime import datetime
from typing import Any

from sqlmodel import SQLModel


class ReviewCreate(SQLModel):
    """
    Payload for submitting (or resubmitting) a review.

    Both fields are taken as sent; missing, non-integer or out-of-range
    values are rejected by the review service with a 400.
    """

    rating: Any = None
    comment: str | None = None


class ReviewRead(SQLModel):
    id: uuid.UUID
    product_id: uuid.UUID
    user_id: uuid.UUID
    name: str
    rating: int
    comment: str
    created_at: datetime


class ReviewSubmitRead(SQLModel):
    """
    Result of a submission, with the product's recomputed aggregate.
    """

    message: str
    created: bool
    num_reviews: int
    rating: float
