import os
import tempfile

# Settings are read at import time, so the environment must be in place first
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-wecare-suite-0123456789"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="wecare-uploads-")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from wecare.database import create_db_and_tables, get_session
from wecare.dependencies import get_login_rate_limiter, get_password_hasher
from wecare.domain.booking import Role
from wecare.infrastructure.persistence.sqlalchemy.repositories.account_repository_sql import SqlAccountRepository
from wecare.infrastructure.rate_limit.memory_rate_limiter import InMemoryRateLimiter
from wecare.main import app
from wecare.utils import create_jwt_token


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(bind=engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def override_session():
        with Session(engine) as session:
            yield session

    limiter = InMemoryRateLimiter()
    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_login_rate_limiter] = lambda: limiter
    yield TestClient(app)
    app.dependency_overrides.clear()


class Api:
    """Small helper around TestClient for account setup in API tests."""

    def __init__(self, client: TestClient, engine):
        self.client = client
        self.engine = engine

    def signup(self, name: str, email: str, role: str = "patient", password: str = "password123") -> dict:
        res = self.client.post(
            "/auth/signup",
            json={"name": name, "email": email, "password": password, "role": role},
        )
        assert res.status_code == 201, res.text
        body = res.json()
        body["headers"] = {"Authorization": f"Bearer {body['accessToken']}"}
        return body

    def admin(self, email: str = "admin@wecare.test") -> dict:
        with Session(self.engine) as session:
            account = SqlAccountRepository(session).create(
                name="Admin",
                email=email,
                password_hash=get_password_hasher().hash("password123"),
                role=Role.ADMIN.value,
            )
        token = create_jwt_token({"sub": account.id, "role": account.role})
        return {"account": {"id": account.id}, "headers": {"Authorization": f"Bearer {token}"}}


@pytest.fixture
def api(client, engine):
    return Api(client, engine)
