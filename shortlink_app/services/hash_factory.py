"""
Factory for creating hash generation strategies.
Uses caching to avoid creating multiple instances.
"""

from enum import Enum
from shortlink_app.services.hash_strategies import (
    HashGenerator,
    RandomHashGenerator,
    SecureHashGenerator
)
from shortlink_app.config import settings


class HashStrategyType(Enum):
    """Available hash generation strategies"""
    RANDOM = "random"
    SECURE = "secure"


class HashStrategyFactory:
    """Factory for creating hash generators with caching"""

    _instances = {}  # Cache for generator instances

    @classmethod
    def create_strategy(cls, strategy_type: HashStrategyType = None) -> HashGenerator:
        """
        Create or return cached hash generator.

        Args:
            strategy_type: Type of strategy to create.
                          If None, uses value from settings.

        Returns:
            A cached instance of a HashGenerator

        Raises:
            ValueError: If strategy_type is unknown
        """
        if strategy_type is None:
            strategy_type = HashStrategyType(settings.hash_strategy)

        if strategy_type in cls._instances:
            return cls._instances[strategy_type]

        if strategy_type == HashStrategyType.RANDOM:
            instance = RandomHashGenerator()
        elif strategy_type == HashStrategyType.SECURE:
            instance = SecureHashGenerator()
        else:
            raise ValueError(f"Unknown hash strategy: {strategy_type}")

        cls._instances[strategy_type] = instance
        return instance

    @classmethod
    def clear_cache(cls):
        """Clear cached instances (for testing)"""
        cls._instances.clear()
