"""
Shared test fixtures: SQLite test database, test client, auth helpers,
pricing config reset, fake mailer.
"""

import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set env before importing app modules
os.environ["JWT_SECRET"] = "test-secret-key-for-testing-only"
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["ADMIN_EMAILS"] = "admin@powderpro.test"

from powderpro.database import Base, get_db
from powderpro.main import app
from powderpro.mailer import get_mailer
from powderpro.pricing_config import pricing_config_store


TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


class FakeMailer:
    """Records contact form submissions instead of talking to SMTP."""

    def __init__(self):
        self.sent = []
        self.error = None

    def send_contact_form(self, form: dict) -> None:
        if self.error:
            raise self.error
        self.sent.append(form)


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def reset_pricing_config():
    """Every test starts from the default pricing config."""
    pricing_config_store.reset()
    yield
    pricing_config_store.reset()


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def db():
    """Direct database session for test setup/assertions."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_mailer():
    mailer = FakeMailer()
    app.dependency_overrides[get_mailer] = lambda: mailer
    yield mailer
    app.dependency_overrides.pop(get_mailer, None)


def _register(client, email, password="strongpassword123"):
    response = client.post("/api/auth/register", json={
        "email": email,
        "password": password,
    })
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def auth_headers(client):
    """Register a customer and return auth headers."""
    return _register(client, "customer@example.com")


@pytest.fixture
def other_headers(client):
    """A second customer, for ownership checks."""
    return _register(client, "other@example.com")


@pytest.fixture
def admin_headers(client):
    """Register the configured admin account and return auth headers."""
    return _register(client, "admin@powderpro.test")
