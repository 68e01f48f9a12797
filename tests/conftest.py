import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import pytest
import uuid
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from authors_api.main import app
from authors_api.db.session import create_tables, get_db
from authors_api.domain.author_record import AuthorRecord
from authors_api.models.base import Base
from authors_api.repos.author_repo import AuthorRepository

# One shared in-memory database for every connection in a test
test_engine = create_engine(
    "sqlite+pysqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
    future=True,
)
TestSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False, future=True)

VALID_HASH = "$argon2id$v=19$m=65536,t=3,p=4$" + "c" * 22 + "$" + "h" * 43
VALID_TOKEN = "0123456789abcdef" * 2


@pytest.fixture(autouse=True)
def setup_test_database():
    """Fresh author table for each test."""
    create_tables(test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session():
    """Create a fresh database session for each test."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


def _override_get_db():
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def test_client():
    """Create a test client for FastAPI app."""
    app.dependency_overrides[get_db] = _override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def valid_hash() -> str:
    return VALID_HASH


@pytest.fixture
def valid_token() -> str:
    return VALID_TOKEN


@pytest.fixture
def make_record():
    """Build a valid AuthorRecord, overriding any field."""

    def _make(**overrides) -> AuthorRecord:
        suffix = uuid.uuid4().hex[:8]
        fields: dict[str, object] = {
            "author_id": uuid.uuid4(),
            "avatar_url": f"https://cdn.example.com/avatars/{suffix}.png",
            "activation_token": VALID_TOKEN,
            "email": f"author-{suffix}@example.com",
            "password_hash": VALID_HASH,
            "username": f"author_{suffix}",
        }
        fields.update(overrides)
        return AuthorRecord(**fields)  # type: ignore[arg-type]

    return _make


@pytest.fixture
def sample_record(db_session, make_record) -> AuthorRecord:
    """A pending author stored through the repository."""
    return AuthorRepository.insert(db_session, make_record())


@pytest.fixture
def author_payload() -> dict[str, str]:
    suffix = uuid.uuid4().hex[:8]
    return {
        "authorAvatarUrl": f"https://cdn.example.com/avatars/{suffix}.png",
        "authorEmail": f"writer-{suffix}@example.com",
        "authorHash": VALID_HASH,
        "authorUsername": f"writer_{suffix}",
    }


@pytest.fixture
def sample_author(test_client, author_payload) -> dict[str, str]:
    """Create a sample author for testing using the API."""
    response = test_client.post("/api/v1/authors", json=author_payload)

    assert response.status_code == 201, f"Failed to create sample author: {response.text}"
    return response.json()


@pytest.fixture
def headers_with_correlation():
    """HTTP headers with correlation ID."""
    return {"X-Request-ID": str(uuid.uuid4())}
