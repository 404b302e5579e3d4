"""Puzzle state engine."""
from .board import BoardEngine, SessionState
from .events import EventBus, Placed, Removed, InvalidMove, StateChanged, Reset
