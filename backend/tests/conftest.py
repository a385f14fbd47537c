"""
Pytest configuration and fixtures for StudyBuddy backend tests.

Provides:
- Test database setup/teardown
- FastAPI test clients (main API and AI functions)
- Caller identity: token headers and SessionContext
- Storage and OpenAI mocks
"""

import pytest
import os
import tempfile
from typing import Generator, Dict
from datetime import datetime, timedelta
from unittest.mock import MagicMock, patch
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

# Set test environment before importing app
os.environ["DATABASE_URL"] = "sqlite:///./test_studybuddy.db"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["OPENAI_API_KEY"] = "test-key-not-real"
os.environ["STORAGE_BACKEND"] = "local"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="studybuddy-storage-")
os.environ.pop("REDIS_URL", None)

from app.main import app
from app.functions.main import app as functions_app
from app.database import Base, get_db
from app.models.models import Goal, StudyPlan, StudyPlanWeek, StudyPlanDay, StudySession
from app.services.auth import create_access_token
from app.services.context import SessionContext
from app.services.query_cache import query_cache
from app.services import storage as storage_module


# Test database setup
TEST_DATABASE_URL = "sqlite:///./test_studybuddy.db"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

TEST_USER_ID = "test-user-123"
OTHER_USER_ID = "other-user-456"


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database tables once per test session"""
    Base.metadata.create_all(bind=test_engine)
    yield
    # Cleanup after all tests
    Base.metadata.drop_all(bind=test_engine)
    # Remove test database file
    if os.path.exists("./test_studybuddy.db"):
        os.remove("./test_studybuddy.db")


@pytest.fixture(autouse=True)
def clear_query_cache():
    """Cached reads and pending toasts never leak between tests"""
    query_cache.clear()
    yield
    query_cache.clear()


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Provide a database session for each test, with rollback after"""
    connection = test_engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Provide FastAPI test client with database override"""
    def override_get_db():
        try:
            yield db
        finally:
            pass  # Don't close - let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def functions_client() -> Generator[TestClient, None, None]:
    """Test client for the stateless AI functions app"""
    with TestClient(functions_app) as test_client:
        yield test_client


# =========================================================================
# Caller Fixtures
# =========================================================================

@pytest.fixture
def test_user_id() -> str:
    return TEST_USER_ID


@pytest.fixture
def auth_headers(test_user_id: str) -> Dict[str, str]:
    """Bearer header for the test user"""
    return {"Authorization": f"Bearer {create_access_token(test_user_id)}"}


@pytest.fixture
def other_auth_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(OTHER_USER_ID)}"}


@pytest.fixture
def ctx(db: Session, test_user_id: str) -> SessionContext:
    """Authenticated context for calling services directly"""
    return SessionContext(db=db, user_id=test_user_id)


@pytest.fixture
def anonymous_ctx(db: Session) -> SessionContext:
    return SessionContext(db=db)


# =========================================================================
# Data Fixtures
# =========================================================================

@pytest.fixture
def test_plan(db: Session, test_user_id: str) -> StudyPlan:
    """A plan with one week of two days, one of them completed"""
    plan = StudyPlan(
        id="test-plan-123",
        user_id=test_user_id,
        title="Organic Chemistry",
        subject="Chemistry",
        difficulty="intermediate",
        daily_time_minutes=60,
    )
    db.add(plan)
    db.flush()

    week = StudyPlanWeek(id="test-week-1", study_plan_id=plan.id, week_number=1, title="Foundations")
    db.add(week)
    db.flush()

    db.add_all([
        StudyPlanDay(id="test-day-1", week_id=week.id, day_number=1, topic="Alkanes", completed=True),
        StudyPlanDay(id="test-day-2", week_id=week.id, day_number=2, topic="Alkenes"),
    ])
    db.commit()
    db.refresh(plan)
    return plan


@pytest.fixture
def test_session(db: Session, test_user_id: str, test_plan: StudyPlan) -> StudySession:
    """A session started 25 minutes ago"""
    session = StudySession(
        id="test-session-123",
        user_id=test_user_id,
        study_plan_id=test_plan.id,
        title="Alkanes review",
        status="active",
        start_time=datetime.utcnow() - timedelta(minutes=25),
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


@pytest.fixture
def test_goal(db: Session, test_user_id: str) -> Goal:
    goal = Goal(
        id="test-goal-123",
        user_id=test_user_id,
        title="Pass the chemistry final",
        category="exam-preparation",
        priority="high",
        status="active",
    )
    db.add(goal)
    db.commit()
    db.refresh(goal)
    return goal


# =========================================================================
# Mock Fixtures
# =========================================================================

@pytest.fixture
def mock_storage():
    """Replace the object storage backend with a MagicMock"""
    mock_instance = MagicMock(spec=storage_module.ObjectStorage)
    mock_instance.upload.side_effect = lambda bucket, key, data, content_type=None: key
    mock_instance.public_url.side_effect = lambda bucket, path: f"https://files.test/{bucket}/{path}"

    previous = storage_module._storage
    storage_module.set_storage(mock_instance)
    yield mock_instance
    storage_module.set_storage(previous)


@pytest.fixture
def mock_openai():
    """Mock OpenAI API calls for testing without API costs"""
    import app.utils.openai_client as openai_module

    # Reset the cached client
    openai_module.reset_client()

    mock_response = MagicMock()
    mock_response.choices = [MagicMock()]
    mock_response.choices[0].message.content = '{"result": "mocked response"}'

    mock_instance = MagicMock()
    mock_instance.chat.completions.create.return_value = mock_response

    # The handlers module imported the accessor by name, so patch it there
    with patch("app.functions.handlers.get_openai_client", return_value=mock_instance):
        yield mock_instance

    # Reset after test to avoid affecting other tests
    openai_module.reset_client()
