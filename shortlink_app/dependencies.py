"""
FastAPI dependencies for dependency injection.

Cache, event dispatcher and hash generator are process-wide singletons.
The repository and the service are built per request around the
request's database session.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from shortlink_app.cache.factory import CacheFactory, CacheBackend
from shortlink_app.cache.strategies import CacheStrategy
from shortlink_app.config import settings
from shortlink_app.database.connection import get_db
from shortlink_app.events.dispatcher import EventDispatcher
from shortlink_app.repositories.strategies import (
    ShortLinkRepository,
    SQLAlchemyShortLinkRepository,
)
from shortlink_app.services.hash_factory import HashStrategyFactory
from shortlink_app.services.hash_strategies import HashGenerator
from shortlink_app.services.shortener_service import ShortenerService


@lru_cache()
def get_cache() -> CacheStrategy:
    """Cache instance based on settings (singleton)"""
    return CacheFactory.create(CacheBackend(settings.cache_backend))


@lru_cache()
def get_event_dispatcher() -> EventDispatcher:
    """
    Dispatcher shared by every request.

    Subscribe observers to it at startup, e.g.
    get_event_dispatcher().subscribe("ShortLink.creating", audit).
    """
    return EventDispatcher()


@lru_cache()
def get_hash_generator() -> HashGenerator:
    return HashStrategyFactory.create_strategy()


def get_repository(db: Session = Depends(get_db)) -> ShortLinkRepository:
    return SQLAlchemyShortLinkRepository(db)


def get_shortener_service(
    repository: ShortLinkRepository = Depends(get_repository),
    cache: CacheStrategy = Depends(get_cache),
    events: EventDispatcher = Depends(get_event_dispatcher),
    generator: HashGenerator = Depends(get_hash_generator),
) -> ShortenerService:
    """ShortenerService with all dependencies injected"""
    return ShortenerService(
        repository=repository,
        generator=generator,
        events=events,
        cache=cache,
        options=settings.shortener_options(),
    )
