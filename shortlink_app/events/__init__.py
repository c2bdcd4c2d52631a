"""
Event notifications raised by the short link service.
"""

from .dispatcher import EventDispatcher, NullDispatcher

__all__ = [
    "EventDispatcher",
    "NullDispatcher",
]
