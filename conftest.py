import os
from dotenv import load_dotenv
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app import config
from app.database import Base, build_engine, get_db
from app.main import app
from app.services.notifications import Notifier, get_notifier

# Load environment so TEST_DATABASE_URL can be read from .env
load_dotenv()

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///./storefront_test.db")
ADMIN_KEY = "test-admin-key"

engine = build_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class RecordingNotifier(Notifier):
    """Collects notices instead of sending them; can be told to fail."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.attempts = 0
        self.sent = []

    def _record(self, kind, notice):
        self.attempts += 1
        if self.fail:
            raise ConnectionError("mail server unavailable")
        self.sent.append((kind, notice))

    def send_order_confirmation(self, notice):
        self._record("confirmation", notice)

    def send_shipping_notice(self, notice):
        self._record("shipping", notice)

    def send_delivery_notice(self, notice):
        self._record("delivery", notice)

    def kinds(self):
        return [kind for kind, _ in self.sent]


# Override the app's DB dependency to use the test engine/session
def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def setup_database(monkeypatch):
    """Fresh schema for each test."""
    monkeypatch.setattr(config, "ADMIN_API_KEY", ADMIN_KEY)
    monkeypatch.setattr(config, "NOTIFY_RETRY_DELAY", 0)
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(notifier):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def admin_headers():
    return {"x-api-key": ADMIN_KEY}
