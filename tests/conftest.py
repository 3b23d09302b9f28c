"""
Test Configuration
"""

import os
import time

# Settings are read at import time, so the environment is prepared first
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ADMIN_EMAIL"] = "admin@lawlens.test"
os.environ["ADMIN_PASSWORD"] = "correct-horse-battery"
os.environ["OPENAI_API_KEY"] = "sk-test-key"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_dummy"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test_secret"
os.environ["AUTH_STATE_BACKEND"] = "memory"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["DEMO_MODE"] = "false"
os.environ.pop("SMTP_HOST", None)
os.environ.pop("ADMIN_PASSWORD_HASH", None)

import pytest
from fastapi.testclient import TestClient

from lawlens.main import app
from lawlens.config.database import engine, Base, SessionLocal
from lawlens.config.settings import settings
from lawlens.models import Question, Payment, BadDecision
from lawlens.services.auth_service import AdminAuth
from lawlens.services.auth_state import MemoryAuthStateStore

ADMIN_EMAIL = os.environ["ADMIN_EMAIL"]
ADMIN_PASSWORD = os.environ["ADMIN_PASSWORD"]


class FakeClock:
    """Controllable epoch-seconds clock; starts at the real time so signed tokens are not expired"""

    def __init__(self):
        self.now = time.time()

    def __call__(self):
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture(scope="session")
def setup_database():
    """Create the test database"""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if os.path.exists("./test.db"):
        os.remove("./test.db")


@pytest.fixture(autouse=True)
def clean_tables(setup_database):
    """Every test starts with empty tables"""
    yield
    db = SessionLocal()
    try:
        db.query(Payment).delete()
        db.query(BadDecision).delete()
        db.query(Question).delete()
        db.commit()
    finally:
        db.close()


@pytest.fixture
def db_session(setup_database):
    """Database session"""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def admin_auth(fake_clock):
    """Fresh AdminAuth with in-memory state, installed on the app"""
    auth = AdminAuth(MemoryAuthStateStore(), settings, clock=fake_clock)
    app.state.admin_auth = auth
    return auth


@pytest.fixture
def client(setup_database, admin_auth):
    """Test client"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_client(client):
    """Test client holding a valid admin session cookie"""
    response = client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client


@pytest.fixture
def make_question(db_session):
    """Insert a question row"""
    def _make(question_text, answer_text=None, status="answered", is_public=True, source_url=None):
        question = Question(
            question_text=question_text,
            answer_text=answer_text,
            status=status,
            is_public=is_public,
            source_url=source_url,
        )
        db_session.add(question)
        db_session.commit()
        db_session.refresh(question)
        return question
    return _make
