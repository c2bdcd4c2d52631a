"""
Exceptions raised by the short link core.

Storage failures are not wrapped: whatever the repository backend raises
(e.g. sqlalchemy.exc.SQLAlchemyError) reaches the caller unchanged.
"""


class ShortenerError(Exception):
    """Base class for short link errors"""


class ShortLinkNotFoundError(ShortenerError):
    """The hash is unknown or its link has expired"""

    def __init__(self, hash: str):
        self.hash = hash
        super().__init__(f"Short link '{hash}' not found or expired")


class DuplicateHashError(ShortenerError):
    """
    Raised by a repository when a create violates hash uniqueness.

    The service treats it like any other collision and keeps generating
    candidates, so callers of create() never see it.
    """

    def __init__(self, hash: str):
        self.hash = hash
        super().__init__(f"Hash '{hash}' is already taken by a live link")


class InvalidRelationError(ShortenerError):
    """Relation id is not numeric. Never fatal for create()."""


class HashSpaceExhaustedError(ShortenerError):
    """The configured length or attempt ceiling was reached"""

    def __init__(self, attempts: int, length: int):
        self.attempts = attempts
        self.length = length
        super().__init__(
            f"Could not find a free hash after {attempts} attempts "
            f"(reached length {length})"
        )
