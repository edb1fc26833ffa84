"""Pytest fixtures for AIHealth backend tests."""

from collections.abc import Callable, Generator
from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from aihealth.api.deps import get_openai_service, get_source
from aihealth.database import get_db
from aihealth.main import app
from aihealth.models import Base
from aihealth.services.openai_service import OpenAIService
from aihealth.sources import HealthMetric, InMemoryHealthSource, QuantitySample

# Use SQLite in-memory for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

# Fixed +02:00 offset keeps day arithmetic free of DST jumps
LOCAL_TZ = timezone(timedelta(hours=2))
REFERENCE_TIME = datetime(2025, 10, 25, 9, 42, tzinfo=LOCAL_TZ)


def quantity(
    metric: HealthMetric,
    value: float,
    unit: str,
    start: datetime,
    end: Optional[datetime] = None,
    **kwargs,
) -> QuantitySample:
    """Shorthand for building a QuantitySample in tests."""
    return QuantitySample(metric=metric, value=value, unit=unit, start=start, end=end or start, **kwargs)


def chat_completion(content: Optional[str] = "All good.", usage: Optional[dict] = None) -> dict:
    body = {"choices": [{"message": {"role": "assistant", "content": content}}]}
    if usage is not None:
        body["usage"] = usage
    return body


@pytest.fixture
def now() -> datetime:
    """Reference moment all window arithmetic in a test is relative to."""
    return REFERENCE_TIME


@pytest.fixture
def memory_source() -> Callable[..., InMemoryHealthSource]:
    """Factory for in-memory data sources."""

    def build(**kwargs) -> InMemoryHealthSource:
        return InMemoryHealthSource(**kwargs)

    return build


@pytest.fixture
def openai_requests() -> list[httpx.Request]:
    """Requests seen by the mocked model endpoint."""
    return []


@pytest.fixture
def openai_responder(openai_requests: list[httpx.Request]) -> Callable[..., OpenAIService]:
    """Build an OpenAIService answering every request with one canned response."""

    def build(status_code: int = 200, json: Optional[dict] = None, text: Optional[str] = None) -> OpenAIService:
        def handler(request: httpx.Request) -> httpx.Response:
            openai_requests.append(request)
            if text is not None:
                return httpx.Response(status_code, text=text)
            return httpx.Response(status_code, json=json if json is not None else chat_completion())

        return OpenAIService(
            base_url="https://api.test/v1",
            timeout=5.0,
            system_message="You are a friendly health assistant.",
            transport=httpx.MockTransport(handler),
        )

    return build


@pytest.fixture(scope="function")
def test_db() -> Generator[Session, None, None]:
    """Create a fresh test database for each test."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )

    # Create all tables
    Base.metadata.create_all(bind=engine)

    # Override the get_db dependency
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        app.dependency_overrides.clear()


@pytest.fixture
def health_source() -> InMemoryHealthSource:
    """Live data source used by the API; empty unless a test adds samples."""
    return InMemoryHealthSource()


@pytest.fixture
def client(test_db: Session, health_source: InMemoryHealthSource, openai_responder) -> TestClient:
    """Create a test client with test database, in-memory health data and a mocked model."""
    app.dependency_overrides[get_source] = lambda: health_source
    app.dependency_overrides[get_openai_service] = lambda: openai_responder()
    return TestClient(app)


@pytest.fixture
def make_sample() -> Callable[..., QuantitySample]:
    return quantity


@pytest.fixture
def completion_body() -> Callable[..., dict]:
    return chat_completion
