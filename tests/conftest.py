"""
Fixtures shared by the test packages.

The database fixtures run against an in-memory SQLite engine, so the db tests never touch the configured DATABASE_URL.
"""

from typing import Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.db.schema import Base
from src.db.sql_repository import SQLSessionStore
from src.services.chess_service import SessionLocks

engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are dropped at teardown so every test starts from an empty table."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def sql_store(db_session: Session) -> SQLSessionStore:
    return SQLSessionStore(db_session)


@pytest.fixture
def session_locks() -> SessionLocks:
    """Fresh lock registry, so tests don't share the process-wide one"""
    return SessionLocks()
