"""
Pytest configuration for story service tests.

Every test runs against a fresh in-memory SQLite database. Email delivery is
replaced by RecordingNotifier, which renders the real templates but keeps the
messages in memory instead of talking to an SMTP server.

Run with: pytest -v
"""

import os
import sys
import tempfile
from pathlib import Path

# Configuration is read at import time, so point it somewhere harmless first
_TEST_DATA_DIR = tempfile.mkdtemp(prefix="stories-test-")
os.environ["DATA_DIR"] = _TEST_DATA_DIR
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
for _name in ("SMTP_HOST", "ADMIN_USERNAME", "ADMIN_PASSWORD", "ADMIN_NOTIFY_EMAIL"):
    os.environ.pop(_name, None)

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import config
from app import app
from core import dependencies
from core.database import get_db, init_db
from utils.admin_manager import AdminManager
from utils.auth_manager import AuthManager
from utils.notifier import Notifier
from utils.review_service import ReviewService
from utils.story_manager import StoryManager
from utils.submission_service import SubmissionService
from utils.upload_storage import IncomingFile, UploadStorage

# Lowest cost bcrypt accepts; keeps hashing fast in tests
TEST_BCRYPT_ROUNDS = 4

ADMIN_USERNAME = "reviewer"
ADMIN_PASSWORD = "correct-horse-battery"

VALID_FIELDS = {
    "name": "A",
    "email": "a@x.com",
    "school": "Morehouse",
    "location": "Atlanta",
    "graduation": "1998",
    "type": "memoir",
    "title": "T",
    "story": "S",
}


class RecordingNotifier(Notifier):
    """Notifier that records outgoing mail instead of sending it."""

    def __init__(self, fail: bool = False, **kwargs):
        kwargs.setdefault("admin_email", None)
        kwargs.setdefault("site_name", "Morehouse Stories")
        super().__init__(**kwargs)
        self.fail = fail
        self.sent = []

    def send_email(self, to: str, subject: str, body: str) -> None:
        if self.fail:
            raise ConnectionRefusedError("SMTP server unavailable")
        self.sent.append({"to": to, "subject": subject, "body": body})


def make_file(name="photo.jpg", content_type="image/jpeg", content=b"\xff\xd8\xff data"):
    return IncomingFile(filename=name, content_type=content_type, content=content)


# -----------------------------------------------------------------------------
# Database fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


# -----------------------------------------------------------------------------
# Component fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def storage(upload_dir):
    return UploadStorage(upload_dir=upload_dir, max_file_size=1024)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def story_manager(db_session):
    return StoryManager(db_session)


@pytest.fixture
def admin_manager(db_session):
    return AdminManager(db_session, bcrypt_rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture
def auth_manager(admin_manager):
    return AuthManager(admin_manager, secret_key="unit-test-secret")


@pytest.fixture
def admin(admin_manager):
    return admin_manager.create_admin(ADMIN_USERNAME, ADMIN_PASSWORD, "reviewer@morehouse.edu")


@pytest.fixture
def submission_service(story_manager, storage, notifier):
    return SubmissionService(story_manager, storage, notifier)


@pytest.fixture
def review_service(story_manager, storage, notifier):
    return ReviewService(story_manager, storage, notifier)


# -----------------------------------------------------------------------------
# API fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def api_notifier():
    return RecordingNotifier()


@pytest.fixture
def client(session_factory, api_notifier):
    """Create a test client with overridden dependencies."""

    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    def _get_admin_manager(db: Session = Depends(get_db)):
        return AdminManager(db, bcrypt_rounds=TEST_BCRYPT_ROUNDS)

    # Same directory the app serves under /uploads
    api_storage = UploadStorage(upload_dir=config.UPLOADS_DIR)

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[dependencies.get_admin_manager] = _get_admin_manager
    app.dependency_overrides[dependencies.get_notifier] = lambda: api_notifier
    app.dependency_overrides[dependencies.get_upload_storage] = lambda: api_storage

    yield TestClient(app)

    # Clean up overrides after test
    app.dependency_overrides.clear()


@pytest.fixture
def api_admin(session_factory):
    session = session_factory()
    try:
        AdminManager(session, bcrypt_rounds=TEST_BCRYPT_ROUNDS).create_admin(
            ADMIN_USERNAME, ADMIN_PASSWORD, "reviewer@morehouse.edu"
        )
    finally:
        session.close()
    return ADMIN_USERNAME


@pytest.fixture
def auth_headers(client, api_admin):
    response = client.post(
        "/api/admin/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}
