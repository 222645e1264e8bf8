# app/models/product.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Product catalog entry.

    `rating` and `num_reviews` are derived from the product's reviews and
    rewritten on every review submission (raw mean, not rounded).
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=100,
        min_length=3,
        index=True,
        description="Display name of the product",
    )

    slug: str = Field(
        max_length=255,
        unique=True,
        index=True,
        description="URL-friendly identifier (unique)",
    )

    category: str = Field(
        max_length=50,
        index=True,
        description="Category used by the storefront sidebar and search",
    )

    image: str | None = Field(
        default=None,
        description="Main image URL",
    )

    price: float = Field(
        gt=0,
        description="Unit price",
    )

    count_in_stock: int = Field(
        default=0,
        ge=0,
        description="How many units currently in stock",
    )

    color: str | None = None

    description: str | None = Field(
        default=None,
        description="Optional long description",
    )

    rating: float = Field(
        default=0,
        ge=0,
        description="Mean of review ratings",
    )

    num_reviews: int = Field(
        default=0,
        ge=0,
        description="Number of reviews",
    )

    is_featured: bool = Field(
        default=False,
        index=True,
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )


class Review(SQLModel, table=True):
    """
    Customer review of a product.
    One user cannot have 2 reviews for the same product.
    """

    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("product_id", "user_id", name="uq_reviews_product_user"),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    # Reviewer display name at time of first submission
    name: str

    rating: int = Field(
        ge=1,
        le=5,
        description="1 to 5 stars",
    )

    comment: str

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
