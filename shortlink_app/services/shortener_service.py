import logging
from datetime import datetime
from typing import Any, Iterator, Optional, Tuple

from shortlink_app.cache.strategies import CacheStrategy
from shortlink_app.config import ShortenerOptions, settings
from shortlink_app.events.dispatcher import EventDispatcher
from shortlink_app.exceptions import (
    DuplicateHashError,
    HashSpaceExhaustedError,
    InvalidRelationError,
    ShortLinkNotFoundError,
)
from shortlink_app.models.short_link import ShortLink, utcnow
from shortlink_app.repositories.strategies import ShortLinkRepository, as_utc
from shortlink_app.services.hash_factory import HashStrategyFactory
from shortlink_app.services.hash_strategies import HashGenerator

logger = logging.getLogger(__name__)

RELATION_ID_MIN = -2 ** 63
RELATION_ID_MAX = 2 ** 63 - 1


class ShortenerService:
    """
    Creates short links and resolves them back to URLs.

    Dependencies are injected (repository, generator, events, cache) so
    each can be swapped or stubbed. The service itself holds no state
    besides its options; create() may run concurrently from several
    threads as long as options are not changed mid-flight.

    Collision handling:
    1. Generate a candidate of hash_length characters
    2. Candidate is free if the repository has no record for it, or only
       an expired one
    3. After max_attempts taken candidates at one length, grow by one
    4. A DuplicateHashError from repository.create() (another writer won
       the race) counts as one more collision
    """

    def __init__(
        self,
        repository: ShortLinkRepository,
        generator: Optional[HashGenerator] = None,
        events: Optional[EventDispatcher] = None,
        cache: Optional[CacheStrategy] = None,
        options: Optional[ShortenerOptions] = None,
    ):
        """
        Args:
            repository: Storage for short links
            generator: Hash generator, defaults to the configured strategy
            events: Dispatcher receiving "<Entity>.creating"
            cache: Cache for resolve() (optional)
            options: Lengths and guards, defaults come from settings
        """
        self.repository = repository
        self.generator = generator or HashStrategyFactory.create_strategy()
        self.events = events or EventDispatcher()
        self.cache = cache
        self.options = options or settings.shortener_options()

    @property
    def hash_length(self) -> int:
        return self.options.hash_length

    @property
    def max_attempts(self) -> int:
        return self.options.max_attempts

    def set_hash_length(self, length: int) -> "ShortenerService":
        """Change the initial hash length for subsequent creates"""
        if length < 1:
            raise ValueError(f"Hash length must be at least 1, got {length}")
        ceiling = self.options.max_hash_length
        if ceiling is not None and length > ceiling:
            raise ValueError(f"Hash length {length} exceeds max_hash_length {ceiling}")
        self.options = self.options.model_copy(update={"hash_length": length})
        return self

    def set_max_attempts(self, attempts: int) -> "ShortenerService":
        """Change how many candidates are tried per length"""
        if attempts < 1:
            raise ValueError(f"Max attempts must be at least 1, got {attempts}")
        self.options = self.options.model_copy(update={"max_attempts": attempts})
        return self

    def set_repository(self, repository: ShortLinkRepository) -> "ShortenerService":
        self.repository = repository
        return self

    def set_generator(self, generator: HashGenerator) -> "ShortenerService":
        self.generator = generator
        return self

    def create(
        self,
        url: str,
        expires_at: Optional[datetime] = None,
        relation_type: Optional[str] = None,
        relation_id: Any = None,
    ) -> ShortLink:
        """
        Create a short link with a fresh unique hash.

        Args:
            url: Target URL
            expires_at: When the link stops resolving, None for never
            relation_type: Type tag of an associated entity, e.g. "Post"
            relation_id: Numeric id of that entity. A non-numeric value is
                logged and the relation is dropped, creation goes on.

        Returns:
            The created record, its hash is the identifier

        Raises:
            HashSpaceExhaustedError: A configured ceiling was reached
        """
        relation_type, relation_id = self._clean_relation(url, relation_type, relation_id)
        expires_at = as_utc(expires_at)
        event_name = f"{self.repository.entity_name()}.creating"

        for hash in self._candidates(self.options):
            if not self.is_available(hash):
                logger.debug("Hash %s is taken", hash)
                continue

            fields = {
                "url": url,
                "hash": hash,
                "expires_at": expires_at,
                "expires": expires_at is not None,
                "relation_type": relation_type,
                "relation_id": relation_id,
            }
            self.events.publish(event_name, fields)

            try:
                link = self.repository.create(fields)
            except DuplicateHashError:
                logger.info("Hash %s was claimed concurrently, retrying", hash)
                continue

            self._cache_link(link)
            return link

    make = create

    def resolve(self, hash: str) -> str:
        """
        Get the target URL of a live link.

        Uses Cache-Aside: cache first, repository on miss.

        Raises:
            ShortLinkNotFoundError: Unknown or expired hash
        """
        if self.cache:
            cached_url = self.cache.get(self._cache_key(hash))
            if cached_url:
                return cached_url

        link = self.get_link(hash)
        self._cache_link(link)
        return link.url

    get_url_by_hash = resolve

    def get_link(self, hash: str) -> ShortLink:
        """
        Get the live record for a hash.

        Raises:
            ShortLinkNotFoundError: Unknown or expired hash
        """
        link = self.repository.find_by_hash(hash)
        if link is None or self.repository.is_expired(link):
            raise ShortLinkNotFoundError(hash)
        return link

    def is_available(self, hash: str) -> bool:
        """Expired links do not block their hash"""
        link = self.repository.find_by_hash(hash)
        return link is None or self.repository.is_expired(link)

    def _candidates(self, options: ShortenerOptions) -> Iterator[str]:
        """Yield candidates, growing the length after max_attempts at each one"""
        length = options.hash_length
        tries = 0
        total = 0

        while True:
            if tries >= options.max_attempts:
                length += 1
                tries = 0
                logger.info("Too many collisions, growing hash length to %d", length)

            if options.max_hash_length is not None and length > options.max_hash_length:
                raise HashSpaceExhaustedError(total, length - 1)
            if options.max_total_attempts is not None and total >= options.max_total_attempts:
                raise HashSpaceExhaustedError(total, length)

            tries += 1
            total += 1
            yield self.generator.generate(length)

    def _clean_relation(
        self, url: str, relation_type: Optional[str], relation_id: Any
    ) -> Tuple[Optional[str], Optional[int]]:
        """A relation is a (type, numeric id) pair or nothing at all"""
        if relation_id is None:
            return None, None
        try:
            return relation_type, self._parse_relation_id(relation_id)
        except InvalidRelationError as e:
            logger.warning("Dropping relation for %s: %s", url, e)
            return None, None

    @staticmethod
    def _parse_relation_id(value: Any) -> int:
        if isinstance(value, bool):
            raise InvalidRelationError(f"Relation id {value!r} is not numeric")
        if isinstance(value, int):
            number = value
        elif isinstance(value, str):
            try:
                number = int(value.strip())
            except ValueError:
                raise InvalidRelationError(f"Relation id {value!r} is not numeric") from None
        else:
            raise InvalidRelationError(f"Relation id {value!r} is not numeric")

        # relation_id is a signed 64-bit column
        if not RELATION_ID_MIN <= number <= RELATION_ID_MAX:
            raise InvalidRelationError(f"Relation id {value!r} is out of range")
        return number

    @staticmethod
    def _cache_key(hash: str) -> str:
        return f"link:{hash}"

    def _cache_link(self, link: ShortLink) -> None:
        """Cache a live link, never past its own expiry"""
        if not self.cache:
            return

        ttl = self.options.cache_ttl
        expires_at = as_utc(link.expires_at)
        if expires_at is not None:
            ttl = min(ttl, int((expires_at - utcnow()).total_seconds()))
        if ttl > 0:
            self.cache.set(self._cache_key(link.hash), link.url, ttl=ttl)
