"""
Cancellable timers for the presentation layer.

Timers run on a scheduler with Tkinter's interface:

    scheduler.after(ms, callback) -> handle
    scheduler.after_cancel(handle)

so a tk.Tk root can be passed directly. Each pending callback is owned by a
ScheduledCallback token; a token that was cancelled or replaced never fires.
"""

from typing import Callable, Optional, Tuple

from engine.events import InvalidMove


class ScheduledCallback:
    """Single-shot callback owned by whoever scheduled it."""

    def __init__(self, scheduler, delay_ms: int, callback: Callable[[], None]):
        self._scheduler = scheduler
        self._callback = callback
        self._active = True
        self._handle = scheduler.after(delay_ms, self._fire)

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self._scheduler.after_cancel(self._handle)

    def _fire(self):
        if not self._active:
            return
        self._active = False
        self._callback()


class Countdown:
    """
    Ticks once per second from `seconds` down to zero, then finishes.

    Args:
        scheduler: Tk-style scheduler
        seconds: Starting value of the counter
        on_tick: Called with the remaining count after each decrement
        on_finished: Called once when the counter reaches zero
    """

    def __init__(self, scheduler, seconds: int = 5,
                 on_tick: Optional[Callable[[int], None]] = None,
                 on_finished: Optional[Callable[[], None]] = None,
                 interval_ms: int = 1000):
        self._scheduler = scheduler
        self.seconds = seconds
        self.interval_ms = interval_ms
        self.on_tick = on_tick
        self.on_finished = on_finished

        self.remaining = seconds
        self.finished = False
        self._pending: Optional[ScheduledCallback] = None
        self._generation = 0

    @property
    def running(self) -> bool:
        return self._pending is not None and self._pending.active

    def start(self) -> None:
        """(Re)start from the full count."""
        self.cancel()
        self.remaining = self.seconds
        self.finished = False
        if self.remaining <= 0:
            self._finish()
            return
        self._schedule()

    def cancel(self) -> None:
        self._generation += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _schedule(self):
        self._pending = ScheduledCallback(self._scheduler, self.interval_ms, self._tick)

    def _tick(self):
        self._pending = None
        self.remaining -= 1
        generation = self._generation
        if self.on_tick is not None:
            self.on_tick(self.remaining)
        if generation != self._generation:
            # cancelled or restarted from on_tick
            return

        if self.remaining <= 0:
            self._finish()
        else:
            self._schedule()

    def _finish(self):
        self.finished = True
        if self.on_finished is not None:
            self.on_finished()


class InvalidMoveHighlight:
    """
    Marks a rejected cell and clears it after a delay.

    A newer rejection replaces the pending clear, so an older timer never
    erases the newer highlight.

    Args:
        scheduler: Tk-style scheduler
        on_change: Called with the highlighted cell, or None when cleared
        delay_ms: How long the highlight stays
    """

    def __init__(self, scheduler, on_change: Optional[Callable] = None, delay_ms: int = 500):
        self._scheduler = scheduler
        self.on_change = on_change
        self.delay_ms = delay_ms

        self.cell: Optional[Tuple[int, int]] = None
        self._pending: Optional[ScheduledCallback] = None

    def show(self, cell) -> None:
        if self._pending is not None:
            self._pending.cancel()

        self.cell = cell
        self._notify()

        token = None

        def clear():
            if self._pending is token:
                self._pending = None
                self.cell = None
                self._notify()

        token = ScheduledCallback(self._scheduler, self.delay_ms, clear)
        self._pending = token

    def cancel(self) -> None:
        """Drop the pending clear and the highlight without notifying."""
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        self.cell = None

    def handle_event(self, event) -> None:
        """Engine listener: highlight cells of rejected moves."""
        if isinstance(event, InvalidMove) and event.row is not None:
            self.show((event.row, event.col))

    def _notify(self):
        if self.on_change is not None:
            self.on_change(self.cell)
