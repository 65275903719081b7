from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from freesip.core.rate_limit import RateLimiter
from freesip.db.base import Base
from freesip.db.session import get_db
from freesip.main import create_app
from freesip.models.contact_submission import ContactSubmission


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autocommit=False, autoflush=False)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def app(session_factory, clock):
    application = create_app(
        api_limiter=RateLimiter(100, 15 * 60, clock=clock),
        contact_limiter=RateLimiter(5, 60 * 60, clock=clock),
    )

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    application.dependency_overrides[get_db] = override_get_db
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def valid_form():
    return {
        "name": "Ada Lovelace",
        "email": "Ada@Example.com",
        "company": "Analytical Engines",
        "message": "I would like to hear more about your services.",
    }


@pytest.fixture
def add_submission(db):
    def _add(email="someone@example.com", *, minutes_ago=0, **fields):
        submission = ContactSubmission(
            name=fields.get("name", "Stored Person"),
            email=email,
            company=fields.get("company", ""),
            message=fields.get("message", "Stored message"),
            ip_address=fields.get("ip_address", "10.0.0.1"),
            user_agent=fields.get("user_agent", "pytest"),
            submitted_at=datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
        )
        db.add(submission)
        db.commit()
        return submission

    return _add
