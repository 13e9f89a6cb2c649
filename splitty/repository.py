"""Event storage: the repository interface and an in-memory implementation."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod

from splitty.models import Event


class EventNotFoundError(LookupError):
    """Raised when no event exists with the requested id."""

    def __init__(self, message: str = "event not found") -> None:
        super().__init__(message)


class EventRepository(ABC):
    """Storage for events."""

    @abstractmethod
    def save(self, event: Event) -> None:
        """Store the event, assigning an id to it if it has none."""

    @abstractmethod
    def find_by_id(self, event_id: int) -> Event:
        """Return the event with this id or raise EventNotFoundError."""

    @abstractmethod
    def delete(self, event_id: int) -> None:
        """Remove the event with this id or raise EventNotFoundError."""

    @abstractmethod
    def find_all(self) -> list[Event]:
        """Return every stored event."""


class InMemoryEventRepository(EventRepository):
    """Thread-safe repository that keeps copies of events in memory."""

    def __init__(self) -> None:
        self._events: dict[int, Event] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def save(self, event: Event) -> None:
        with self._lock:
            if event.id == 0:
                event.id = self._next_id
                self._next_id += 1
            self._events[event.id] = event.copy()

    def find_by_id(self, event_id: int) -> Event:
        with self._lock:
            try:
                return self._events[event_id].copy()
            except KeyError:
                raise EventNotFoundError() from None

    def delete(self, event_id: int) -> None:
        with self._lock:
            if event_id not in self._events:
                raise EventNotFoundError()
            del self._events[event_id]

    def find_all(self) -> list[Event]:
        with self._lock:
            return [event.copy() for event in self._events.values()]