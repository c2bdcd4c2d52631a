from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Boolean
from shortlink_app.database.connection import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ShortLink(Base):
    """
    A hash pointing at a target URL.

    Uniqueness of hash is enforced by the table itself; an expired row
    keeps its hash until the repository purges it to make room for a
    new link with the same hash.

    relation_type / relation_id attach the link to an arbitrary external
    entity (e.g. "Post", 42). Both are set or both are NULL.
    """
    __tablename__ = "short_links"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    hash = Column(String(64), unique=True, nullable=False, index=True)
    url = Column(String, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    expires = Column(Boolean, default=False, nullable=False)
    relation_type = Column(String(255), nullable=True)
    relation_id = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    def __repr__(self):
        return f"<ShortLink hash={self.hash!r} url={self.url!r}>"
