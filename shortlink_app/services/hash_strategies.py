"""
Hash generation strategies for the short link service.
Uses Strategy Pattern to allow different sources of randomness.

Generators know nothing about storage and never retry; collision
handling belongs to ShortenerService.
"""

import random
import secrets
import string
from abc import ABC, abstractmethod
from typing import Optional


ALPHABET = string.ascii_letters + string.digits


class HashGenerator(ABC):
    """Abstract base class for hash generators"""

    alphabet = ALPHABET

    @abstractmethod
    def generate(self, length: int) -> str:
        """
        Generate a random hash.

        Args:
            length: Exact number of characters, at least 1

        Returns:
            A string of `length` symbols from the alphabet

        Raises:
            ValueError: If length is not a positive integer
        """
        pass

    @staticmethod
    def _check_length(length: int) -> None:
        if isinstance(length, bool) or not isinstance(length, int) or length < 1:
            raise ValueError(f"Hash length must be a positive integer, got {length!r}")


class RandomHashGenerator(HashGenerator):
    """
    Uniform random hashes from the Mersenne Twister.

    Pros: Fast, seedable for reproducible tests
    Cons: Predictable if the state leaks (fine, hashes are not secrets)
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def generate(self, length: int) -> str:
        self._check_length(length)
        return ''.join(self.rng.choices(self.alphabet, k=length))


class SecureHashGenerator(HashGenerator):
    """
    Uniform random hashes from the OS entropy pool.

    Slower than RandomHashGenerator, harder to guess. Still not meant
    to protect anything.
    """

    def generate(self, length: int) -> str:
        self._check_length(length)
        return ''.join(secrets.choice(self.alphabet) for _ in range(length))
