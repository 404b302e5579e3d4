"""Tests for the GUI's move handling, run without opening a Tk window."""

import pytest

pytest.importorskip("tkinter")

from core.config import PuzzleConfig
from core.errors import BoardFull, CellOccupied, ResetRequired, SessionFinished
from engine import SessionState
from pipeline import PuzzleSession
from puzzle_gui import PhotoPuzzleGUI, rejection_message


def headless_gui(session):
    """A PhotoPuzzleGUI with its widget hooks replaced by recorders."""
    gui = object.__new__(PhotoPuzzleGUI)
    gui.session = session
    gui.selected_tile_id = None
    gui.statuses = []
    gui.refreshes = 0

    def refresh():
        gui.refreshes += 1

    gui._set_status = lambda text, color=None: gui.statuses.append(text)
    gui._refresh_tray = refresh
    gui._refresh_board = refresh
    return gui


def solve(engine):
    for tile in sorted(engine.tray, key=lambda t: t.correct_cell):
        engine.place(tile.id, *tile.correct_cell)


def misfill(engine):
    tiles = sorted(engine.tray, key=lambda t: t.correct_cell)
    cells = [t.correct_cell for t in tiles]
    cells[0], cells[1] = cells[1], cells[0]
    for tile, cell in zip(tiles, cells):
        engine.place(tile.id, *cell)


@pytest.fixture
def session(image):
    puzzle = PuzzleSession(image, PuzzleConfig(seed=4))
    puzzle.skip_preview()
    return puzzle


def test_rejection_message_depends_on_error_type():
    assert "taken" in rejection_message(CellOccupied("x", 0, 0))
    assert "full" in rejection_message(BoardFull("x"))
    assert "Try again" in rejection_message(ResetRequired("x"))
    assert "solved" in rejection_message(SessionFinished("x"))


def test_right_click_on_solved_board_reports_status(session):
    gui = headless_gui(session)
    solve(session.engine)

    gui._on_cell_right_click(0, 0)

    assert session.state is SessionState.SOLVED
    assert session.engine.placed_count == 12
    assert gui.statuses == [rejection_message(SessionFinished("x"))]
    assert gui.refreshes == 0


def test_right_click_on_misfilled_board_reports_status(session):
    gui = headless_gui(session)
    misfill(session.engine)

    gui._on_cell_right_click(0, 0)

    assert session.state is SessionState.MISFILLED
    assert gui.statuses == [rejection_message(ResetRequired("x"))]


def test_right_click_removes_tile_while_in_progress(session):
    gui = headless_gui(session)
    engine = session.engine
    tile = engine.tray[0]
    engine.place(tile.id, 1, 2)

    gui._on_cell_right_click(1, 2)

    assert engine.tile_at(1, 2) is None
    assert engine.tray[-1] == tile
    assert gui.statuses == []
    assert gui.refreshes == 2


def test_double_click_on_full_board_says_board_full(session):
    gui = headless_gui(session)
    engine = session.engine
    solve(engine)

    gui._on_tray_double_click(engine.tile_at(0, 0).id)

    assert gui.statuses[-1] == rejection_message(BoardFull("x"))
