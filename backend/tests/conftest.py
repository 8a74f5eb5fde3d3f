"""Pytest fixtures — per-test SQLite database, fast bcrypt, no throttling by default."""
import os

os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["BCRYPT_ROUNDS"] = "4"

from datetime import timedelta  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from eventhub.cache import event_cache  # noqa: E402
from eventhub.clock import utcnow  # noqa: E402
from eventhub.database import Base, get_db  # noqa: E402
from eventhub.main import app  # noqa: E402
from eventhub.security.throttle import RequestThrottle  # noqa: E402

# Import all models so they register with Base.metadata
from eventhub.models.user import User                # noqa: F401,E402
from eventhub.models.event import Event              # noqa: F401,E402
from eventhub.models.attendance import Attendance    # noqa: F401,E402

SQLITE_URL = "sqlite:///./test.db"
PASSWORD = "secret-pass"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session bound to the test engine."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def statements(db_engine):
    """Record every SQL statement sent to the test database."""
    seen = []

    def _record(conn, cursor, statement, parameters, context, executemany):
        seen.append(statement)

    event.listen(db_engine, "before_cursor_execute", _record)
    yield seen
    event.remove(db_engine, "before_cursor_execute", _record)


@pytest.fixture(autouse=True)
def _clear_event_cache():
    event_cache.invalidate_all()
    yield
    event_cache.invalidate_all()


@pytest.fixture(scope="function")
def client(db_engine):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    original_throttle = app.state.throttle
    app.state.throttle = RequestThrottle(requests_per_minute=1000, enabled=False)
    with TestClient(app) as c:
        yield c
    app.state.throttle = original_throttle
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers: drive the API the way a real client would
# ---------------------------------------------------------------------------
def register_user(client: TestClient, name: str = "Test User", email: str = "user@example.com",
                  role: str | None = None, password: str = PASSWORD) -> dict:
    """Helper — POST /api/auth/register and return response JSON."""
    payload = {"name": name, "email": email, "password": password}
    if role:
        payload["role"] = role
    resp = client.post("/api/auth/register", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def login(client: TestClient, email: str, password: str = PASSWORD) -> dict:
    """Helper — POST /api/auth/login and return the Authorization header for the token."""
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


def create_user_with_token(client: TestClient, name: str, email: str, role: str | None = None) -> tuple[dict, dict]:
    """Register and log in; returns (user JSON, auth headers)."""
    user = register_user(client, name=name, email=email, role=role)
    return user, login(client, email)


def make_event(client: TestClient, headers: dict, title: str = "Test Event",
               start_offset_hours: float = 24, duration_hours: float = 1,
               location: str | None = None, visibility: str = "PUBLIC", description: str | None = None):
    """Helper — POST /api/events and return the raw response."""
    start = utcnow() + timedelta(hours=start_offset_hours)
    end = start + timedelta(hours=duration_hours)
    payload = {
        "title": title,
        "start_time": start.isoformat(),
        "end_time": end.isoformat(),
        "visibility": visibility,
    }
    if location is not None:
        payload["location"] = location
    if description is not None:
        payload["description"] = description
    return client.post("/api/events/", json=payload, headers=headers)
