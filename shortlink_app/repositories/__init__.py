"""
Short link storage.
Implements Strategy Pattern so the service never depends on a concrete backend.
"""

from .strategies import (
    ShortLinkRepository,
    SQLAlchemyShortLinkRepository,
    InMemoryShortLinkRepository,
    as_utc,
)

__all__ = [
    "ShortLinkRepository",
    "SQLAlchemyShortLinkRepository",
    "InMemoryShortLinkRepository",
    "as_utc",
]
