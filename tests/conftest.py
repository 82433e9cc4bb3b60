"""
Shared fixtures.

Settings are read once at import time, so the environment is prepared
before anything from storefront gets imported.
"""
import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="storefront-tests-")

os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'storefront.db')}"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-access-secret-0123456789abcdef0123"
os.environ["REFRESH_TOKEN_SECRET"] = "test-refresh-secret-0123456789abcdef01"
os.environ["STRICT_PASSWORD_ERRORS"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from storefront.api import create_app  # noqa: E402
from storefront.data.database import Base, SessionLocal, engine, init_db  # noqa: E402
from storefront.data.seed import seed  # noqa: E402

PASSWORD = "Secret@123"


@pytest.fixture(autouse=True)
def database():
    """Fresh schema for every test."""
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def catalog(db):
    seed(db)
    return db


@pytest.fixture
def test_client() -> TestClient:
    return TestClient(create_app(create_tables=False))


def login(client: TestClient, username: str, password: str = PASSWORD) -> dict:
    client.post("/register", json={"username": username, "password": password})
    response = client.post("/login", json={"username": username, "password": password})
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def auth_headers(test_client: TestClient) -> dict:
    token = login(test_client, "alice")["token"]
    return {"Authorization": f"Bearer {token}"}
