"""
Shared pytest fixtures.

Every test gets its own application built on a private in-memory SQLite
database, so no state leaks between tests.
"""
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from storefront.core.config import Settings
from storefront.database import create_db_and_tables, make_engine
from storefront.main import create_app
from storefront.models.item import Item
from storefront.models.user import User
from storefront.repositories.item_repo import ItemRepository
from storefront.repositories.user_repo import UserRepository

TEST_PASSWORD = "secret123"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        DATABASE_URL="sqlite://",
        JWT_SECRET="test-secret",
        BCRYPT_ROUNDS=4,
        RATE_LIMIT_MAX=1000,
        ENVIRONMENT="test",
        CORS_ORIGINS=["http://localhost:3000"],
    )


@pytest.fixture
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture
def test_client(app) -> TestClient:
    """TestClient with the lifespan run, so tables exist."""
    with TestClient(app) as client:
        yield client


# ==================== Service-level fixtures ====================


@pytest.fixture
def engine():
    engine = make_engine("sqlite://")
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine) -> Session:
    with Session(engine) as session:
        yield session


@pytest.fixture
def user(session: Session) -> User:
    return UserRepository().create(
        session,
        User(name="Alice", email="alice@example.com", password_hash="not-a-real-hash"),
    )


@pytest.fixture
def make_item(session: Session):
    """Factory creating catalog items directly in the store."""
    repo = ItemRepository()

    def _make(name: str = "Mug", price: str = "19.99", category: str = "Kitchen") -> Item:
        return repo.create(
            session,
            Item(name=name, category=category, price=Decimal(price)),
        )

    return _make


# ==================== HTTP helpers ====================


def signup(client: TestClient, email: str = "bob@example.com", name: str = "Bob") -> dict:
    response = client.post(
        "/auth/signup",
        json={"name": name, "email": email, "password": TEST_PASSWORD},
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def auth_headers(test_client: TestClient) -> dict[str, str]:
    token = signup(test_client)["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def create_item(test_client: TestClient, auth_headers: dict[str, str]):
    """Factory creating catalog items through the API."""

    def _create(
        name: str = "Mug",
        price: float | str = 19.99,
        category: str = "Kitchen",
        description: str | None = None,
    ) -> dict:
        body = {"name": name, "category": category, "price": price}
        if description is not None:
            body["description"] = description
        response = test_client.post("/items", json=body, headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()["item"]

    return _create
