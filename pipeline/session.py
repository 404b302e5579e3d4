"""
Puzzle session orchestration.

Ties the pieces together for one puzzle:
1. Decode the source image and partition it into tiles
2. Deal the tiles into a BoardEngine
3. Run the countdown preview, then hand over to the puzzle phase

Decoding and partitioning happen before any engine exists, so a bad image
never produces a half-built session.
"""

from enum import Enum
from pathlib import Path
from typing import Callable, Optional

import numpy as np

from core.config import PuzzleConfig, DEFAULT_CONFIG
from core.image_utils import decode_image, load_image, to_rgb_array
from core.splitting import make_rng, partition
from engine.board import BoardEngine, SessionState
from interaction.audio import AudioCues
from interaction.timers import Countdown, InvalidMoveHighlight


class Phase(Enum):
    PREVIEW = "preview"
    PUZZLE = "puzzle"
    CLOSED = "closed"


def load_source(source) -> np.ndarray:
    """Decode a path, encoded bytes, PIL image or pixel array to an RGB array."""
    if isinstance(source, (str, Path)):
        return load_image(source)
    if isinstance(source, (bytes, bytearray, memoryview)):
        return decode_image(source)
    return to_rgb_array(source)


def start_puzzle(source, rows: int = 3, cols: int = 4, seed: Optional[int] = None,
                 verbose: bool = False) -> BoardEngine:
    """
    Build a ready-to-play engine from an image (convenience function).

    Args:
        source: Image path, encoded bytes, PIL image or pixel array
        rows: Number of grid rows
        cols: Number of grid columns
        seed: Optional random seed for dealing and reshuffling
        verbose: Print progress info

    Returns:
        Initialized BoardEngine with every tile in the tray

    Raises:
        ImageDecodeError: If the image cannot be decoded
        InvalidDimensions: If the grid does not fit the image
    """
    session = PuzzleSession(source, PuzzleConfig(rows=rows, cols=cols, seed=seed), verbose=verbose)
    return session.engine


class PuzzleSession:
    """
    One puzzle from preview to completion.

    Args:
        source: Image path, encoded bytes, PIL image or pixel array
        config: Grid and timing settings
        scheduler: Tk-style scheduler (after/after_cancel) for the countdown
                   and highlight timers; required for start_preview()
        play_sound: Optional callable receiving cue names ("click", ...)
        verbose: Print progress info
    """

    def __init__(self, source, config: Optional[PuzzleConfig] = None, scheduler=None,
                 play_sound: Optional[Callable[[str], None]] = None,
                 verbose: bool = False):
        self.config = config or DEFAULT_CONFIG
        self.scheduler = scheduler
        self.verbose = verbose

        self.on_phase_change: Optional[Callable[[Phase], None]] = None
        self.on_countdown_tick: Optional[Callable[[int], None]] = None
        self.on_highlight: Optional[Callable] = None

        self.image = load_source(source)
        rng = make_rng(self.config.seed)
        tiles = partition(self.image, self.config.rows, self.config.cols, rng)

        self.engine = BoardEngine(self.config.rows, self.config.cols, rng)
        self.engine.initialize(tiles)

        if verbose:
            h, w = self.image.shape[:2]
            print(f"Size: {w}x{h}")
            print(f"Grid: {self.config.rows}x{self.config.cols}")
            print(f"Dealt {len(tiles)} tiles "
                  f"({tiles[0].image.shape[1]}x{tiles[0].image.shape[0]} px each)")

        self._countdown: Optional[Countdown] = None
        self._highlight: Optional[InvalidMoveHighlight] = None
        if scheduler is not None:
            self._countdown = Countdown(scheduler, self.config.countdown_seconds,
                                        on_tick=self._on_tick, on_finished=self._enter_puzzle)
            self._highlight = InvalidMoveHighlight(scheduler, self._on_highlight,
                                                   self.config.highlight_ms)
            self.engine.subscribe(self._highlight.handle_event)

        if play_sound is not None:
            self.engine.subscribe(AudioCues(play_sound))

        self.phase = Phase.PREVIEW

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def start_preview(self) -> None:
        """Show the preview and count down to the puzzle phase."""
        if self._countdown is None:
            raise ValueError("A scheduler is required for the countdown preview")
        if self.phase is not Phase.PREVIEW:
            raise ValueError(f"Cannot start preview from phase {self.phase.value}")
        self._countdown.start()

    def skip_preview(self) -> None:
        """Leave the preview immediately."""
        if self.phase is Phase.PREVIEW:
            self._enter_puzzle()

    def close(self) -> None:
        """Stop every timer. Safe to call from any phase, more than once."""
        if self._countdown is not None:
            self._countdown.cancel()
        if self._highlight is not None:
            self._highlight.cancel()
        self._set_phase(Phase.CLOSED)

    def retry(self) -> None:
        """Shuffle every tile back into the tray after a misfilled board."""
        self.engine.reset()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def countdown_remaining(self) -> Optional[int]:
        return None if self._countdown is None else self._countdown.remaining

    @property
    def highlighted_cell(self):
        return None if self._highlight is None else self._highlight.cell

    @property
    def state(self) -> SessionState:
        return self.engine.state

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _enter_puzzle(self):
        if self._countdown is not None:
            self._countdown.cancel()
        if self.phase is Phase.PREVIEW:
            self._set_phase(Phase.PUZZLE)

    def _set_phase(self, phase: Phase):
        if phase is self.phase:
            return
        self.phase = phase
        if self.verbose:
            print(f"Phase: {phase.value}")
        if self.on_phase_change is not None:
            self.on_phase_change(phase)

    def _on_tick(self, remaining: int):
        if self.on_countdown_tick is not None:
            self.on_countdown_tick(remaining)

    def _on_highlight(self, cell):
        if self.on_highlight is not None:
            self.on_highlight(cell)
