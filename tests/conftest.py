"""
Pytest fixtures for testing
"""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from screentime.api.deps import get_db
from screentime.config import Settings
from screentime.infrastructure.db import models  # noqa: F401
from screentime.infrastructure.db.session import Base
from screentime.infrastructure.records.repository import RecordRepository


class FakeClock:
    """Deterministic created_at source: returns the same instant until advanced"""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def db_engine():
    """In-memory SQLite engine shared by every connection (StaticPool)"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Session:
    """Create database session for tests"""
    SessionLocal = sessionmaker(bind=db_engine, autoflush=False, autocommit=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 1, 10, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def repo(db_session, clock) -> RecordRepository:
    return RecordRepository(db_session, clock=clock)


@pytest.fixture
def client(db_engine):
    """Test client with get_db bound to the in-memory engine"""
    from screentime.main import create_app

    app = create_app(Settings(DATABASE_URL="sqlite://"))
    SessionLocal = sessionmaker(bind=db_engine, autoflush=False, autocommit=False)

    def _get_test_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_test_db
    with TestClient(app) as test_client:
        yield test_client
