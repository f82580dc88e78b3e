import os
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app

# In-memory SQLite by default; set TEST_DATABASE_URL to run against PostgreSQL
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite://")


def _create_engine():
    if TEST_DATABASE_URL.startswith("sqlite"):
        return create_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(TEST_DATABASE_URL, pool_pre_ping=True)


@pytest.fixture(scope="function")
def engine():
    """Fresh schema for each test."""
    # Import models to register them
    from app.auth import models as auth_models  # noqa: F401
    from app.cart import models as cart_models  # noqa: F401
    from app.complaints import models as complaints_models  # noqa: F401
    from app.fertilizers import models as fertilizers_models  # noqa: F401
    from app.intake import models as intake_models  # noqa: F401
    from app.points import models as points_models  # noqa: F401
    from app.purchases import models as purchases_models  # noqa: F401

    test_engine = _create_engine()
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database session."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def test_user_data():
    """Sample user registration data."""
    return {
        "email": "test@example.com",
        "password": "securepassword123",
        "display_name": "Test User",
    }


@pytest.fixture
def registered_user(client, test_user_data):
    """Register a user and return the response data."""
    response = client.post("/api/v1/auth/register", json=test_user_data)
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def auth_headers(registered_user):
    """Get authorization headers for a registered user."""
    return {"Authorization": f"Bearer {registered_user['tokens']['access_token']}"}


@pytest.fixture
def user_id(registered_user):
    return registered_user["user"]["id"]


@pytest.fixture
def admin_user(client, db_session):
    """Register a user with admin role and return response data."""
    from app.auth.models import UserProfile, UserRole

    response = client.post("/api/v1/auth/register", json={
        "email": "admin@example.com",
        "password": "adminpassword123",
        "display_name": "Admin User",
    })
    assert response.status_code == 201
    data = response.json()

    # Role is read from the database on every request, so the token stays valid
    stmt = select(UserProfile).where(UserProfile.id == data["user"]["id"])
    user = db_session.execute(stmt).scalar_one()
    user.role = UserRole.ADMIN
    db_session.commit()
    return data


@pytest.fixture
def admin_headers(admin_user):
    """Get authorization headers for an admin user."""
    return {"Authorization": f"Bearer {admin_user['tokens']['access_token']}"}


@pytest.fixture
def make_fertilizer(db_session):
    """Factory for catalog entries."""
    from app.fertilizers.models import Fertilizer

    def _make(
        name: str = "Compost",
        price: str = "100.00",
        unit: str = "kg",
        available: bool = True,
    ) -> Fertilizer:
        fertilizer = Fertilizer(
            name=name,
            description=f"{name} for home gardens",
            price=Decimal(price),
            unit=unit,
            available=available,
        )
        db_session.add(fertilizer)
        db_session.commit()
        db_session.refresh(fertilizer)
        return fertilizer

    return _make


@pytest.fixture
def grant_points(db_session):
    """Credit points through the ledger, as a waste submission would."""
    from app.points.models import PointsTransactionType
    from app.points.service import PointsService

    def _grant(user_id: int, points: int) -> None:
        PointsService(db_session).add_points_transaction(
            user_id, points, PointsTransactionType.EARNED_WASTE, "Test credit"
        )

    return _grant
