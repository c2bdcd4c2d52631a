"""
Test configuration and fixtures for the short link service.
This centralizes all test setup, making individual tests clean.
"""

import random

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from main import app
from shortlink_app.cache.strategies import InMemoryCache
from shortlink_app.config import ShortenerOptions
from shortlink_app.database.connection import Base, get_db
from shortlink_app.dependencies import get_cache, get_event_dispatcher
from shortlink_app.events.dispatcher import EventDispatcher
from shortlink_app.repositories.strategies import (
    InMemoryShortLinkRepository,
    SQLAlchemyShortLinkRepository,
)
from shortlink_app.services.hash_strategies import RandomHashGenerator
from shortlink_app.services.shortener_service import ShortenerService

# Test database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    This ensures tests are isolated and don't affect each other.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()

    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(db_session):
    """Opens extra sessions on the test database, e.g. to play a concurrent writer"""
    return TestingSessionLocal


@pytest.fixture
def repository(db_session):
    """SQLAlchemy repository on the test database"""
    return SQLAlchemyShortLinkRepository(db_session)


@pytest.fixture
def memory_repository():
    return InMemoryShortLinkRepository()


@pytest.fixture
def events():
    return EventDispatcher()


@pytest.fixture
def shortener(repository, events):
    """Service with default options and a seeded generator"""
    return ShortenerService(
        repository=repository,
        generator=RandomHashGenerator(random.Random(1234)),
        events=events,
        cache=InMemoryCache(),
        options=ShortenerOptions(),
    )


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database, cache and events overridden.
    This is the main fixture that API tests will use.
    """
    def override_get_db():
        yield db_session

    cache = InMemoryCache()
    dispatcher = EventDispatcher()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache
    app.dependency_overrides[get_event_dispatcher] = lambda: dispatcher

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
