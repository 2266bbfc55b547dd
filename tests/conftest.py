"""Pytest fixtures and configuration for studynext tests."""

import pytest
from datetime import datetime, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from studynext.database.database import Base
from studynext.database.repository import CourseRecordRepository
from studynext.models.course import CourseRecord, RawTask
from studynext.models.identity import Identity
from studynext.models.task import Task, TaskType


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

# Wednesday; the surrounding Sunday-anchored week starts 2026-10-18
FIXED_NOW = datetime(2026, 10, 21, 9, 0, 0)


@pytest.fixture
def now():
    """Fixed reference time for deterministic engine tests."""
    return FIXED_NOW


@pytest.fixture
def test_user_id():
    """Test user ID for ownership checks."""
    return "test-user-123"


@pytest.fixture
def other_user_id():
    return "other-user-456"


@pytest.fixture(scope="function")
def db_session(test_user_id):
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    Also creates a test user in the database.
    """
    from studynext.database.models import UserDB

    # StaticPool keeps one connection so threadpool writes see the same database
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    now = datetime.utcnow()
    session.add(UserDB(
        id=test_user_id,
        email="test@example.com",
        name="Test User",
        created_at=now,
        updated_at=now,
    ))
    session.commit()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def course_repository(db_session: Session):
    """Create a CourseRecordRepository instance for testing."""
    return CourseRecordRepository(db_session)


@pytest.fixture
def sample_task_base(now):
    """Base task data for creating test tasks.

    Returns a dict with default task attributes that can be overridden.
    """
    return {
        "id": "chat-1-Essay 1",
        "type": TaskType.ASSIGNMENT,
        "name": "Essay 1",
        "date": now + timedelta(days=5),
        "course": "Introduction to Biology",
        "course_code": "BIO 101",
        "chat_id": "chat-1",
        "weight": 10.0,
        "status": "Not Started",
    }


@pytest.fixture
def make_task(sample_task_base):
    """Factory for tasks; derives the id from chat/name/type unless given."""
    def _make(**overrides) -> Task:
        data = {**sample_task_base, **overrides}
        if "id" not in overrides:
            suffix = "-exam" if data["type"] == TaskType.EXAM else ""
            data["id"] = f"{data['chat_id']}-{data['name']}{suffix}"
        return Task(**data)
    return _make


@pytest.fixture
def sample_course_base():
    """Base course record data (no tasks)."""
    return {
        "id": "chat-1",
        "title": "Bio chat",
        "course_code": "BIO 101",
        "course_name": "Introduction to Biology",
        "assignments": [],
        "exams": [],
    }


@pytest.fixture
def make_course(sample_course_base):
    """Factory for course records from plain dict entries."""
    def _make(assignments=(), exams=(), **overrides) -> CourseRecord:
        return CourseRecord(**{
            **sample_course_base,
            **overrides,
            "assignments": [RawTask(**a) for a in assignments],
            "exams": [RawTask(**e) for e in exams],
        })
    return _make


@pytest.fixture
def iso(now):
    """Render an offset from `now` as the ISO string ingestion would store."""
    def _iso(**delta) -> str:
        return (now + timedelta(**delta)).isoformat()
    return _iso


@pytest.fixture
def durable_identity(test_user_id):
    return Identity.durable(test_user_id)


@pytest.fixture
def guest_identity():
    return Identity.guest("guest-session-1")


@pytest.fixture
def test_client(db_session: Session):
    """FastAPI test client with the database dependency overridden."""
    from studynext.api import app as app_module
    from studynext.database.database import get_db

    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app_module.app.dependency_overrides[get_db] = override_get_db
    app_module.local_caches.clear()
    app_module.guest_courses.clear()
    app_module.triage_shown.clear()

    with TestClient(app_module.app) as client:
        yield client

    app_module.app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(test_user_id):
    """Bearer headers for the seeded test user."""
    from studynext.auth.jwt import create_access_token
    return {"Authorization": f"Bearer {create_access_token(test_user_id)}"}


@pytest.fixture
def guest_headers():
    return {"X-Guest-Session": "guest-session-1"}
