"""Notifications emitted by the board engine."""

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple


@dataclass(frozen=True)
class Placed:
    """A tile landed on a cell. `source` is its previous cell, None if from the tray."""
    tile_id: str
    row: int
    col: int
    source: Optional[Tuple[int, int]] = None


@dataclass(frozen=True)
class Removed:
    """A tile went from a cell back to the tray."""
    tile_id: str
    row: int
    col: int


@dataclass(frozen=True)
class InvalidMove:
    """A move was rejected. Row/col are None when there was no target cell."""
    row: Optional[int]
    col: Optional[int]


@dataclass(frozen=True)
class StateChanged:
    state: "SessionState"


@dataclass(frozen=True)
class Reset:
    pass


Listener = Callable[[object], None]


class EventBus:
    """Synchronous listener list. Listeners run in subscription order."""

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener and return a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, event) -> None:
        # Copy so listeners can unsubscribe while being notified
        for listener in list(self._listeners):
            listener(event)
