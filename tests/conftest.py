import os
import uuid
from datetime import datetime, timedelta, timezone

# Settings are read on import; point them at an in-memory database first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SUPABASE_JWT_SECRET"] = "test-secret"
os.environ["GOOGLE_API_KEY"] = "google-test-key"

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlmodel import Session, SQLModel

from app.database import engine
from app.main import app
from app.models.product import Product
from app.models.user import User

API = "/api/v1"


def make_token(user_id: uuid.UUID, email: str, name: str | None = None, **claims) -> str:
    payload = {
        "sub": str(user_id),
        "email": email,
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
    }
    if name:
        payload["user_metadata"] = {"name": name}
    payload.update(claims)
    return jwt.encode(payload, "test-secret", algorithm="HS256")


def bearer(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user.id, user.email)}"}


@pytest.fixture(autouse=True)
def db():
    SQLModel.metadata.create_all(engine)
    yield
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(db):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client():
    return TestClient(app)


def _make_user(session: Session, name: str, role: str) -> User:
    user = User(
        id=uuid.uuid4(),
        email=f"{name.lower()}@floralshop.com",
        name=name,
        role=role,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def customer(session):
    return _make_user(session, "Alice", "user")


@pytest.fixture
def other_customer(session):
    return _make_user(session, "Victor", "user")


@pytest.fixture
def admin(session):
    return _make_user(session, "Admin", "admin")


@pytest.fixture
def auth_headers(customer):
    return bearer(customer)


@pytest.fixture
def admin_headers(admin):
    return bearer(admin)


@pytest.fixture
def make_product(session):
    counter = iter(range(1, 1000))

    def _make(**overrides) -> Product:
        n = next(counter)
        fields = {
            "name": f"Red Roses {n}",
            "slug": f"red-roses-{n}",
            "category": "Roses",
            "image": f"/images/roses-{n}.jpg",
            "price": 10.0,
            "count_in_stock": 10,
        }
        fields.update(overrides)
        product = Product(**fields)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make
