"""Puzzle configuration."""

from dataclasses import dataclass
from typing import Optional

from .errors import InvalidDimensions


@dataclass
class PuzzleConfig:
    """
    Settings for a single puzzle session.

    Grid defaults give 12 pieces (3 rows x 4 columns).
    """
    rows: int = 3
    cols: int = 4

    # Preview shown before the puzzle starts
    countdown_seconds: int = 5

    # How long a rejected cell stays highlighted
    highlight_ms: int = 500

    # Random seed for dealing and reshuffling (None = unpredictable)
    seed: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.rows, int) or not isinstance(self.cols, int):
            raise InvalidDimensions(f"Grid size must be integers, got {self.rows}x{self.cols}")
        if self.rows < 1 or self.cols < 1:
            raise InvalidDimensions(f"Grid size must be at least 1x1, got {self.rows}x{self.cols}")
        if self.countdown_seconds < 0:
            raise ValueError(f"countdown_seconds must be >= 0, got {self.countdown_seconds}")
        if self.highlight_ms < 0:
            raise ValueError(f"highlight_ms must be >= 0, got {self.highlight_ms}")

    @property
    def piece_count(self) -> int:
        return self.rows * self.cols


DEFAULT_CONFIG = PuzzleConfig()
