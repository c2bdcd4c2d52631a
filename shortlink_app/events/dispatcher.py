"""
In-process event dispatching.

Observers subscribe to an event name and are called synchronously on
publish. Publishing is fire-and-continue: return values are ignored and
an observer that raises is logged without stopping the publisher or the
remaining observers.
"""

import logging
import threading
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Observer = Callable[[str, Dict[str, Any]], Any]


class EventDispatcher:
    """
    Observer registry keyed by event name.

    Event names are "<Entity>.<action>", e.g. "ShortLink.creating".
    """

    def __init__(self):
        self._observers: Dict[str, List[Observer]] = {}
        self._lock = threading.Lock()

    def subscribe(self, event_name: str, observer: Observer) -> Observer:
        """Register an observer, returns it so it can be used as a decorator"""
        with self._lock:
            self._observers.setdefault(event_name, []).append(observer)
        return observer

    def unsubscribe(self, event_name: str, observer: Observer) -> bool:
        """Remove an observer, True if it was registered"""
        with self._lock:
            observers = self._observers.get(event_name, [])
            if observer in observers:
                observers.remove(observer)
                return True
            return False

    def listen(self, event_name: str):
        """Decorator form of subscribe()"""
        def decorator(observer: Observer) -> Observer:
            return self.subscribe(event_name, observer)
        return decorator

    def publish(self, event_name: str, payload: Dict[str, Any]) -> None:
        with self._lock:
            observers = list(self._observers.get(event_name, []))

        for observer in observers:
            try:
                observer(event_name, dict(payload))
            except Exception:
                logger.exception("Observer %r failed on %s", observer, event_name)

    def clear(self) -> None:
        with self._lock:
            self._observers.clear()


class NullDispatcher(EventDispatcher):
    """
    Null Object Pattern - dispatcher that drops every event.
    Used when nothing listens, e.g. in benchmarks.
    """

    def publish(self, event_name: str, payload: Dict[str, Any]) -> None:
        return None
