"""
Tests for hash generation strategies.
"""
import random
from collections import Counter

import pytest

from shortlink_app.services.hash_strategies import (
    ALPHABET,
    RandomHashGenerator,
    SecureHashGenerator
)
from shortlink_app.services.hash_factory import (
    HashStrategyFactory,
    HashStrategyType
)


class TestRandomHashGenerator:
    """Test the seedable random generator"""

    def test_generates_exact_length(self):
        """Every requested length is honoured exactly"""
        generator = RandomHashGenerator()

        for length in range(1, 33):
            assert len(generator.generate(length)) == length

    def test_uses_only_alphabet_symbols(self):
        """Hashes are alphanumeric and case-sensitive"""
        generator = RandomHashGenerator()

        for _ in range(200):
            assert set(generator.generate(8)) <= set(ALPHABET)

    def test_alphabet_has_62_symbols(self):
        assert len(set(ALPHABET)) == 62

    def test_seeded_generators_agree(self):
        """Same seed, same sequence (used for deterministic tests)"""
        first = RandomHashGenerator(random.Random(42))
        second = RandomHashGenerator(random.Random(42))

        assert [first.generate(5) for _ in range(10)] == [second.generate(5) for _ in range(10)]

    def test_distribution_is_roughly_uniform(self):
        """62,000 symbols should spread evenly, about 1,000 each"""
        generator = RandomHashGenerator(random.Random(7))

        counts = Counter(generator.generate(62000))

        assert set(counts) == set(ALPHABET)
        assert min(counts.values()) > 800
        assert max(counts.values()) < 1200

    @pytest.mark.parametrize("length", [0, -1, True, "5", 2.0])
    def test_rejects_invalid_length(self, length):
        with pytest.raises(ValueError):
            RandomHashGenerator().generate(length)


class TestSecureHashGenerator:
    """Test the OS-entropy generator"""

    def test_generates_exact_length_from_alphabet(self):
        generator = SecureHashGenerator()

        for length in (1, 5, 12):
            code = generator.generate(length)
            assert len(code) == length
            assert code.isalnum()

    def test_rejects_zero_length(self):
        with pytest.raises(ValueError):
            SecureHashGenerator().generate(0)


class TestHashStrategyFactory:
    """Test strategy factory"""

    def setup_method(self):
        HashStrategyFactory.clear_cache()

    def test_creates_random_strategy(self):
        strategy = HashStrategyFactory.create_strategy(HashStrategyType.RANDOM)
        assert isinstance(strategy, RandomHashGenerator)

    def test_creates_secure_strategy(self):
        strategy = HashStrategyFactory.create_strategy(HashStrategyType.SECURE)
        assert isinstance(strategy, SecureHashGenerator)

    def test_caches_instances(self):
        first = HashStrategyFactory.create_strategy(HashStrategyType.RANDOM)
        second = HashStrategyFactory.create_strategy(HashStrategyType.RANDOM)
        assert first is second

    def test_creates_default_from_settings(self):
        """Default setting is the random strategy"""
        strategy = HashStrategyFactory.create_strategy()
        assert isinstance(strategy, RandomHashGenerator)
