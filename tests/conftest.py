"""Shared fixtures: synthetic images and a manual Tk-style scheduler."""

import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import matplotlib
matplotlib.use("Agg")


def make_image(height=90, width=120):
    """RGB image whose pixels encode their own (y, x) position."""
    ys, xs = np.mgrid[0:height, 0:width]
    img = np.zeros((height, width, 3), dtype=np.uint8)
    img[..., 0] = ys % 256
    img[..., 1] = xs % 256
    img[..., 2] = (ys * 7 + xs * 3) % 256
    return img


class FakeScheduler:
    """Collects after() callbacks and runs them when time is advanced."""

    def __init__(self):
        self.now = 0
        self._next_id = 0
        self._pending = {}

    def after(self, ms, callback):
        self._next_id += 1
        handle = f"after#{self._next_id}"
        self._pending[handle] = (self.now + ms, self._next_id, callback)
        return handle

    def after_cancel(self, handle):
        self._pending.pop(handle, None)

    @property
    def pending(self):
        return len(self._pending)

    def advance(self, ms):
        """Move the clock forward, firing due callbacks in order."""
        target = self.now + ms
        while True:
            due = [(when, seq, handle) for handle, (when, seq, _) in self._pending.items()
                   if when <= target]
            if not due:
                break
            when, _, handle = min(due)
            _, _, callback = self._pending.pop(handle)
            self.now = when
            callback()
        self.now = target


@pytest.fixture
def image():
    return make_image()


@pytest.fixture
def scheduler():
    return FakeScheduler()
