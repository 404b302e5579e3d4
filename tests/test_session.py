"""Tests for the puzzle session flow: loading, preview countdown, retry."""

import cv2
import pytest
from PIL import Image

from conftest import make_image
from core.config import PuzzleConfig
from core.errors import CellOccupied, ImageDecodeError, InvalidDimensions
from engine import SessionState
from pipeline import Phase, PuzzleSession, load_source, start_puzzle


def test_load_source_variants(tmp_path, image):
    path = tmp_path / "photo.png"
    Image.fromarray(image).save(path)
    ok, buf = cv2.imencode(".png", cv2.cvtColor(image, cv2.COLOR_RGB2BGR))

    assert load_source(str(path)).shape == image.shape
    assert load_source(path).shape == image.shape
    assert load_source(buf.tobytes()).shape == image.shape
    assert load_source(Image.fromarray(image)).shape == image.shape
    assert load_source(image) is image


def test_start_puzzle_defaults(image):
    engine = start_puzzle(image, seed=1)
    assert (engine.rows, engine.cols) == (3, 4)
    assert len(engine.tray) == 12
    assert engine.state is SessionState.IN_PROGRESS


def test_bad_image_fails_before_engine():
    with pytest.raises(ImageDecodeError):
        PuzzleSession(b"not an image")


def test_grid_too_fine_for_image():
    with pytest.raises(InvalidDimensions):
        start_puzzle(make_image(2, 2), rows=3, cols=4)


def test_config_validation():
    with pytest.raises(InvalidDimensions):
        PuzzleConfig(rows=0)
    with pytest.raises(ValueError):
        PuzzleConfig(highlight_ms=-1)
    assert PuzzleConfig().piece_count == 12


def test_seeded_sessions_deal_identically(image):
    a = PuzzleSession(image, PuzzleConfig(seed=5))
    b = PuzzleSession(image, PuzzleConfig(seed=5))
    assert [t.id for t in a.engine.tray] == [t.id for t in b.engine.tray]


def test_preview_countdown_enters_puzzle(scheduler, image):
    session = PuzzleSession(image, PuzzleConfig(seed=0), scheduler=scheduler)
    phases, ticks = [], []
    session.on_phase_change = phases.append
    session.on_countdown_tick = ticks.append

    session.start_preview()
    scheduler.advance(4000)
    assert session.phase is Phase.PREVIEW
    scheduler.advance(1000)

    assert session.phase is Phase.PUZZLE
    assert ticks == [4, 3, 2, 1, 0]
    assert phases == [Phase.PUZZLE]
    assert scheduler.pending == 0


def test_close_during_preview_stops_countdown(scheduler, image):
    session = PuzzleSession(image, PuzzleConfig(seed=0), scheduler=scheduler)
    phases = []
    session.on_phase_change = phases.append

    session.start_preview()
    scheduler.advance(2000)
    session.close()
    scheduler.advance(10000)

    assert phases == [Phase.CLOSED]
    assert session.countdown_remaining == 3
    assert scheduler.pending == 0


def test_skip_preview(scheduler, image):
    session = PuzzleSession(image, PuzzleConfig(seed=0), scheduler=scheduler)
    session.start_preview()
    session.skip_preview()
    assert session.phase is Phase.PUZZLE
    assert scheduler.pending == 0
    with pytest.raises(ValueError):
        session.start_preview()


def test_preview_requires_scheduler(image):
    session = PuzzleSession(image)
    with pytest.raises(ValueError):
        session.start_preview()
    session.skip_preview()
    assert session.phase is Phase.PUZZLE


def test_rejection_highlight_and_sounds(scheduler, image):
    played, highlights = [], []
    session = PuzzleSession(image, PuzzleConfig(seed=0), scheduler=scheduler,
                            play_sound=played.append)
    session.on_highlight = highlights.append
    session.skip_preview()
    engine = session.engine

    a, b = engine.tray[0], engine.tray[1]
    engine.place(a.id, 1, 1)
    with pytest.raises(CellOccupied):
        engine.place(b.id, 1, 1)

    assert played == ["click", "fail"]
    assert session.highlighted_cell == (1, 1)
    scheduler.advance(500)
    assert session.highlighted_cell is None
    assert highlights == [(1, 1), None]


def test_misfill_then_retry(image):
    session = PuzzleSession(image, PuzzleConfig(seed=2))
    engine = session.engine

    ordered = sorted(engine.tray, key=lambda t: t.correct_cell)
    targets = [t.correct_cell for t in ordered]
    targets[0], targets[5] = targets[5], targets[0]
    for tile, (row, col) in zip(ordered, targets):
        engine.place(tile.id, row, col)
    assert session.state is SessionState.MISFILLED

    session.retry()
    assert session.state is SessionState.IN_PROGRESS
    assert engine.placed_count == 0
    assert len(engine.tray) == 12


def test_end_to_end_solve(scheduler, image):
    played = []
    session = PuzzleSession(image, PuzzleConfig(seed=8), scheduler=scheduler,
                            play_sound=played.append)
    session.start_preview()
    scheduler.advance(5000)
    assert session.phase is Phase.PUZZLE

    engine = session.engine
    for tile in sorted(engine.tray, key=lambda t: t.correct_cell):
        engine.place(tile.id, *tile.correct_cell)

    assert session.state is SessionState.SOLVED
    assert played == ["click"] * 12 + ["success"]
    session.close()
    assert session.phase is Phase.CLOSED
