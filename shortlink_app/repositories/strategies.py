"""
Short link repositories using Strategy Pattern.

The shortener service only needs four things from storage: look a hash
up, decide whether a record has expired, create a record while refusing
duplicates, and name the entity it stores. Backends:

- SQLAlchemy: the real database, uniqueness enforced by the table
- In-memory: dict guarded by a lock, for tests and single-process use
"""

import itertools
import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shortlink_app.exceptions import DuplicateHashError
from shortlink_app.models.short_link import ShortLink, utcnow

logger = logging.getLogger(__name__)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalise to an aware UTC datetime. Naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ShortLinkRepository(ABC):
    """
    Abstract base class for short link storage.

    Implementations must refuse to create a record whose hash belongs to
    a live record and signal it with DuplicateHashError. That storage
    level check is what keeps concurrent creators from sharing a hash.
    """

    model = ShortLink

    @abstractmethod
    def find_by_hash(self, hash: str) -> Optional[ShortLink]:
        """
        Find a record by hash, expired or not.

        Returns:
            The record or None if no record holds this hash
        """
        pass

    @abstractmethod
    def create(self, fields: Dict[str, Any]) -> ShortLink:
        """
        Persist a new record.

        Args:
            fields: url, hash, expires_at, expires, relation_type, relation_id

        Returns:
            The created record

        Raises:
            DuplicateHashError: a live record already holds fields["hash"]
        """
        pass

    def is_expired(self, record: ShortLink) -> bool:
        """Expiry is evaluated at read time, nothing sweeps old rows"""
        expires_at = as_utc(record.expires_at)
        return expires_at is not None and expires_at <= utcnow()

    def entity_name(self) -> str:
        """Logical entity name, used to scope notifications"""
        return self.model.__name__


class SQLAlchemyShortLinkRepository(ShortLinkRepository):
    """
    Repository backed by a SQLAlchemy session.

    The unique index on short_links.hash is the source of truth. An
    expired row holding the requested hash is deleted in the same
    transaction as the insert, so expired hashes can be handed out again.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_hash(self, hash: str) -> Optional[ShortLink]:
        return self.db.query(ShortLink).filter(ShortLink.hash == hash).first()

    def create(self, fields: Dict[str, Any]) -> ShortLink:
        fields = dict(fields, expires_at=as_utc(fields.get("expires_at")))
        hash = fields["hash"]

        existing = self.find_by_hash(hash)
        if existing is not None and not self.is_expired(existing):
            raise DuplicateHashError(hash)

        link = ShortLink(**fields)
        try:
            if existing is not None:
                logger.info("Purging expired short link %s to reuse its hash", hash)
                self.db.delete(existing)
                self.db.flush()
            self.db.add(link)
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            # Another writer claimed the hash between our check and commit
            if self.find_by_hash(hash) is not None:
                raise DuplicateHashError(hash) from exc
            raise
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(link)
        return link


class InMemoryShortLinkRepository(ShortLinkRepository):
    """
    In-memory repository using a dict keyed by hash.

    Check-and-insert runs under one lock, giving the same uniqueness
    guarantee as the database constraint. Lost on restart.
    """

    def __init__(self):
        self._links: Dict[str, ShortLink] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def find_by_hash(self, hash: str) -> Optional[ShortLink]:
        with self._lock:
            return self._links.get(hash)

    def create(self, fields: Dict[str, Any]) -> ShortLink:
        fields = dict(fields, expires_at=as_utc(fields.get("expires_at")))
        hash = fields["hash"]

        with self._lock:
            existing = self._links.get(hash)
            if existing is not None and not self.is_expired(existing):
                raise DuplicateHashError(hash)

            link = ShortLink(id=next(self._ids), created_at=utcnow(), **fields)
            self._links[hash] = link
            return link

    def __len__(self):
        with self._lock:
            return len(self._links)
