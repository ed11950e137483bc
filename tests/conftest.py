import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# The application reads DATABASE_URL at import time
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from civic_issues import lifecycle  # noqa: E402
from civic_issues.auth_utils import create_access_token  # noqa: E402
from civic_issues.database import Base, get_db  # noqa: E402
from civic_issues.main import app  # noqa: E402
from civic_issues.models.user import Role, User  # noqa: E402


# -------------------------------------------------------
# Test Database Setup
# -------------------------------------------------------
# Use in-memory SQLite for fast, isolated tests
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ISSUE_FIELDS = {
    "title": "Pothole on Main St",
    "description": "Deep pothole in the right lane near the bakery.",
    "location": "123 Main St",
    "city": "Springfield",
    "state": "IL",
    "zip": "62701",
    "category": "INFRASTRUCTURE",
}

# Transitions that bring a fresh issue to each status
STATUS_PATHS = {
    "PENDING": [],
    "APPROVED": ["APPROVED"],
    "IN_PROGRESS": ["APPROVED", "IN_PROGRESS"],
    "RESOLVED": ["APPROVED", "IN_PROGRESS", "RESOLVED"],
    "REJECTED": ["REJECTED"],
}


@pytest.fixture(autouse=True)
def _isolate_process_env(monkeypatch):
    """Keep deployment secrets in the caller's shell from leaking into tests."""
    monkeypatch.delenv("ADMIN_REGISTRATION_KEYS", raising=False)


# -------------------------------------------------------
# Fixtures
# -------------------------------------------------------
@pytest.fixture(scope="function")
def db_session():
    """Create a new database session for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        # Drop tables to ensure clean slate for next test
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a new test client for each test with DB override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            db_session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    del app.dependency_overrides[get_db]


def _make_account(db_session, name, email, role):
    user = User(name=name, email=email, password_hash="not-a-real-hash", role=role.value)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    token = create_access_token({"user_id": user.user_id, "email": email, "role": role.value})
    return {"user_id": user.user_id, "headers": {"Authorization": f"Bearer {token}"}}


@pytest.fixture
def citizen(db_session):
    return _make_account(db_session, "Casey Citizen", "casey@example.com", Role.USER)


@pytest.fixture
def neighbour(db_session):
    return _make_account(db_session, "Nico Neighbour", "nico@example.com", Role.USER)


@pytest.fixture
def admin(db_session):
    return _make_account(db_session, "Ada Admin", "ada@example.com", Role.ADMIN)


@pytest.fixture
def make_issue(db_session, citizen):
    """Create an issue directly through the lifecycle and return its id."""

    def _make(author_id=None, status=None, **overrides):
        fields = dict(ISSUE_FIELDS, **overrides)
        issue = lifecycle.create_issue(db_session, fields, author_id or citizen["user_id"])
        issue_id = issue.issue_id
        for step in STATUS_PATHS[status or "PENDING"]:
            lifecycle.transition(db_session, issue_id, step)
        return issue_id

    return _make


@pytest.fixture
def issue_payload():
    """Request body carrying every required issue field."""
    return dict(ISSUE_FIELDS)
