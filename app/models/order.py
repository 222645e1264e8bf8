# app/models/order.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Customer order placed from a cart snapshot.

    Shipping address and payment method are copied from the snapshot;
    prices are computed once at placement and never recomputed.
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    # Shipping address
    full_name: str
    address: str
    city: str
    postal_code: str
    country: str

    # PayPal | Stripe | Cash
    payment_method: str = Field(
        description="Payment method chosen at checkout",
    )

    items_price: float = Field(ge=0)
    shipping_price: float = Field(ge=0)
    tax_price: float = Field(ge=0)
    total_price: float = Field(ge=0)

    is_paid: bool = Field(default=False, index=True)
    paid_at: datetime | None = None

    is_delivered: bool = Field(default=False, index=True)
    delivered_at: datetime | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order, snapshotting the product at checkout.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    name: str
    slug: str
    image: str | None = None

    quantity: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    price: float = Field(
        description="Unit price at time of order",
    )

    # Index of the line in the cart it was ordered from
    position: int = Field(default=0, ge=0)
