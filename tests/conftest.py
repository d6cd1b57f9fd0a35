"""Pytest fixtures and configuration for araise tests."""

import pytest
from datetime import date, datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
import uuid

from araise.database.database import Base
from araise.database import models  # noqa: F401
from araise.database.focus_log_repository import FocusLogRepository
from araise.database.kv_repository import KeyValueRepository
from araise.engine.xp_ledger import XpLedger
from araise.models.task import Task, TaskCategory, RepeatFrequency
from araise.ports.clock import ManualClock
from araise.ports.store import InMemoryStore
from araise.services.task_store import TaskStore


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

# 2024-01-01 is a Monday
START = datetime(2024, 1, 1, 9, 0, 0)


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    """
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock():
    """Hand-driven clock starting Monday 2024-01-01 09:00."""
    return ManualClock(START)


@pytest.fixture
def memory_store():
    return InMemoryStore()


@pytest.fixture
def kv_repository(db_session: Session):
    return KeyValueRepository(db_session)


@pytest.fixture
def focus_log_repository(db_session: Session):
    return FocusLogRepository(db_session)


@pytest.fixture
def xp_ledger(clock, memory_store):
    return XpLedger(clock, memory_store)


@pytest.fixture
def task_store(clock, memory_store, xp_ledger):
    return TaskStore(clock, memory_store, xp_ledger)


@pytest.fixture
def sample_task_base():
    """Base task data for creating test tasks.

    Returns a dict with default task attributes that can be overridden.
    """
    return {
        "id": str(uuid.uuid4()),
        "title": "Test Task",
        "category": TaskCategory.WORK,
        "date": date(2024, 1, 1),
        "start_at": None,
        "end_at": None,
        "done": False,
        "focus_mode": False,
        "focus_duration": 25,
        "break_duration": 5,
        "cycles": 1,
        "repeat": RepeatFrequency.NONE,
        "repeat_until": None,
        "exceptions": [],
        "order": 0,
    }


@pytest.fixture
def sample_task(sample_task_base):
    return Task(**sample_task_base)


@pytest.fixture
def daily_task(sample_task_base):
    return Task(**{**sample_task_base, "title": "Stretch", "repeat": RepeatFrequency.DAILY})


@pytest.fixture
def weekly_task(sample_task_base):
    return Task(**{**sample_task_base, "title": "Review week", "repeat": RepeatFrequency.WEEKLY})


@pytest.fixture
def services(clock, memory_store, focus_log_repository):
    from araise.api.dependencies import Services

    return Services(clock=clock, store=memory_store, focus_log_repository=focus_log_repository)


@pytest.fixture
def test_client(services):
    """Create a FastAPI test client with the services dependency overridden."""
    from araise.api.app import app
    from araise.api.dependencies import get_services

    app.dependency_overrides[get_services] = lambda: services

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
