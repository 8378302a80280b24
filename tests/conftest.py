"""Pytest configuration and fixtures."""

import os
import tempfile

# Settings are read once and cached, so the environment must be in place
# before the application modules are imported.
TEST_IMAGE_DIR = tempfile.mkdtemp(prefix="recipe-images-")
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("PASSWORD_SALT", "test-salt")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ["IMAGE_DIR"] = TEST_IMAGE_DIR

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from recipes_api.api.dependencies import TOKEN_HEADER  # noqa: E402
from recipes_api.config import Settings, get_settings  # noqa: E402
from recipes_api.database import Base, get_db  # noqa: E402
from recipes_api.main import app  # noqa: E402

SQLALCHEMY_DATABASE_URL = os.environ["DATABASE_URL"]

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class AuthHeaders(dict):
    """Dict subclass that also stores the user's id, email and raw token."""

    def __init__(self, *args, user_id: str, email: str, token: str, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email
        self.token = token


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    from recipes_api import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def settings() -> Settings:
    """Settings the application is running with."""
    return get_settings()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def signup(client):
    """Factory that creates a user and returns header-based auth for it.

    The session cookie set by sign-up is dropped so requests are authorized
    only by the headers they explicitly send.
    """

    def _signup(email: str = "test@example.com", password: str = "testpass123") -> AuthHeaders:
        response = client.post("/users/signup", json={"email": email, "password": password})
        assert response.status_code == 201
        client.cookies.clear()
        token = response.headers[TOKEN_HEADER]
        return AuthHeaders({TOKEN_HEADER: token}, user_id=response.text, email=email, token=token)

    return _signup


@pytest.fixture
def auth_headers(signup):
    """Create a user and return auth headers with user info."""
    return signup()
