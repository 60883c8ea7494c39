"""Shared test fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from src.core.event_bus import EventBus
from src.core.event_types import EventTypes
from src.db.database import get_db
from src.db.models import Base
from src.db.repository import SqlCompanionRepository
from src.main import app

# StaticPool: every session shares the single in-memory connection
TEST_ENGINE = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSession = sessionmaker(bind=TEST_ENGINE, autocommit=False, autoflush=False)


def _override_get_db():
    db = TestSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = _override_get_db


@pytest.fixture()
def client() -> TestClient:
    """FastAPI TestClient wired to a fresh in-memory SQLite database."""
    Base.metadata.drop_all(bind=TEST_ENGINE)
    Base.metadata.create_all(bind=TEST_ENGINE)
    app.state.event_bus = EventBus()
    return TestClient(app)


@pytest.fixture()
def db_session() -> Session:
    """Session on a private in-memory database with tables created."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def repo(db_session) -> SqlCompanionRepository:
    return SqlCompanionRepository(db_session)


@pytest.fixture()
def bus() -> EventBus:
    return EventBus()


@pytest.fixture()
def recorded_events(bus) -> list:
    """Every event emitted on the bus, in order."""
    events: list = []
    for name, value in vars(EventTypes).items():
        if name.isupper():
            bus.subscribe(value, events.append)
    return events
