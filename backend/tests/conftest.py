import os

# Must be set before the app (and its engine/config) is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ["STATUS_SWEEP_INTERVAL_SECONDS"] = "0"

from typing import List, Optional, Tuple  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from clubhouse.database import get_session  # noqa: E402
from clubhouse.main import app  # noqa: E402
from clubhouse.services.notifier import MatchNotifier, get_notifier  # noqa: E402

TEST_DATABASE_URL = "sqlite:///:memory:"

# ============================================================================
# Test Database Setup with StaticPool
# ============================================================================
# 1. sqlite:///:memory: with StaticPool so ALL sessions share the same DB
# 2. check_same_thread=False required for TestClient/threaded access
# 3. All models imported before create_all() (see session_fixture)
# 4. App dependency overridden to use test_engine (see client_fixture)
# 5. Schema dropped and recreated per test so counts start from zero
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


def override_get_session():
    """Override session to use test engine"""
    with Session(test_engine) as session:
        yield session


class RecordingNotifier(MatchNotifier):
    """Notifier that remembers what would have been broadcast."""

    def __init__(self):
        super().__init__()
        self.events: List[Tuple[str, Optional[int]]] = []

    def publish(self, reason: str, match_id: Optional[int] = None) -> None:
        self.events.append((reason, match_id))


@pytest.fixture(name="session", scope="function")
def session_fixture():
    """Provide a test database session on a fresh schema"""
    from clubhouse.models.match import Match  # noqa: F401
    from clubhouse.models.match_player import MatchPlayer  # noqa: F401
    from clubhouse.models.payment import Payment  # noqa: F401
    from clubhouse.models.player import Player  # noqa: F401

    SQLModel.metadata.drop_all(test_engine)
    SQLModel.metadata.create_all(test_engine)

    with Session(test_engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Provide a test client with overridden database session

    Override MUST be set BEFORE TestClient() and stay in place for the entire
    duration so the app never touches its own engine from a request.
    """
    app.dependency_overrides[get_session] = override_get_session

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture(name="notifier_events")
def notifier_events_fixture(client: TestClient):
    """Capture match-changed notifications published by request handlers"""
    recorder = RecordingNotifier()
    app.dependency_overrides[get_notifier] = lambda: recorder
    yield recorder.events
    app.dependency_overrides.pop(get_notifier, None)


@pytest.fixture(name="engine")
def engine_fixture(session: Session):
    """The shared in-memory engine, for code that opens its own sessions"""
    return test_engine


@pytest.fixture(name="recording_notifier")
def recording_notifier_fixture():
    return RecordingNotifier()
