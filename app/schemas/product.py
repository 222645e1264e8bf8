# app/schemas/product.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    name: str
    slug: str
    category: str
    image: str | None = None
    price: float
    count_in_stock: int
    color: str | None = None
    description: str | None = None
    rating: float
    num_reviews: int
    is_featured: bool
    created_at: datetime


class ProductCreate(SQLModel):
    """
    Payload for creating a product.

    - slug is optional: if omitted, generated from `name`.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    slug: str | None = None
    category: str = Field(max_length=50)
    image: str | None = None
    price: float = Field(gt=0)
    count_in_stock: int = Field(default=0, ge=0)
    color: str | None = None
    description: str | None = None
    is_featured: bool = False

    @field_validator("name", "category")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("slug")
    @classmethod
    def normalize_slug(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("slug cannot be empty if provided")
        return v


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.
    All fields are optional. Rating and review count are not editable.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    slug: str | None = None
    category: str | None = Field(default=None, max_length=50)
    image: str | None = None
    price: float | None = Field(default=None, gt=0)
    count_in_stock: int | None = Field(default=None, ge=0)
    color: str | None = None
    description: str | None = None
    is_featured: bool | None = None

    @field_validator("name", "category", "slug")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v
