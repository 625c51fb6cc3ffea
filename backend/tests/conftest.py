"""
Shared pytest fixtures.

DATABASE_URL must be set before anything imports briefboarder.core.db, so
it is forced to in-memory SQLite at module import time.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("ENV", "dev")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from briefboarder.core.db import Base, get_db
from briefboarder.main import app
import briefboarder.models.brief  # noqa: F401  (registers the table)

CDN = "https://cdn.example.com"


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def cdn(monkeypatch):
    """Point S3_PUBLIC_ENDPOINT at a fake CDN for the duration of a test."""
    from briefboarder.core.config import get_settings

    monkeypatch.setattr(get_settings(), "S3_PUBLIC_ENDPOINT", CDN)
    return CDN
