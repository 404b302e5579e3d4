"""
Board engine.

Owns the mutable puzzle state: the tray of unplaced tiles and the grid of
placed tiles. Every mutation either completes fully or leaves the state
untouched, and listeners are told what happened through engine.events.

State machine:
    IN_PROGRESS --(full, all correct)--> SOLVED     (terminal)
    IN_PROGRESS --(full, any wrong)----> MISFILLED
    MISFILLED ---(reset)---------------> IN_PROGRESS
"""

from enum import Enum
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from core.errors import (
    BoardFull,
    CellOccupied,
    OutOfBounds,
    ResetRequired,
    SessionFinished,
    TileNotPlaced,
    UnknownTile,
)
from core.splitting import RandomSource, Tile, make_rng, shuffle_tiles

from .events import EventBus, InvalidMove, Placed, Removed, Reset, StateChanged


Cell = Tuple[int, int]


class SessionState(Enum):
    IN_PROGRESS = "in_progress"
    SOLVED = "solved"
    MISFILLED = "misfilled"


class BoardEngine:
    """
    Puzzle state for a rows x cols board.

    Args:
        rows: Number of board rows
        cols: Number of board columns
        rng: random.Random, integer seed, or None; used by reset()
    """

    def __init__(self, rows: int = 3, cols: int = 4, rng: RandomSource = None):
        if rows < 1 or cols < 1:
            raise ValueError(f"Board must be at least 1x1, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self._rng = make_rng(rng)
        self._events = EventBus()

        self._tiles: Dict[str, Tile] = {}
        self._tray: List[Tile] = []
        self._grid: List[List[Optional[Tile]]] = self._empty_grid()
        # tile id -> cell, only for tiles on the board
        self._locations: Dict[str, Cell] = {}
        self._state = SessionState.IN_PROGRESS

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def subscribe(self, listener):
        """Register a callable for engine events. Returns an unsubscribe callable."""
        return self._events.subscribe(listener)

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def initialize(self, tiles: Sequence[Tile]) -> None:
        """
        Start a puzzle: all tiles go to the tray in the given order.

        Raises:
            ValueError: If the tiles do not cover every cell exactly once
                        or contain duplicate ids
        """
        tiles = list(tiles)
        expected = self.rows * self.cols
        if len(tiles) != expected:
            raise ValueError(f"Expected {expected} tiles for a {self.rows}x{self.cols} board, got {len(tiles)}")

        ids = {tile.id for tile in tiles}
        if len(ids) != len(tiles):
            raise ValueError("Duplicate tile ids")

        cells = {tile.correct_cell for tile in tiles}
        all_cells = {(r, c) for r in range(self.rows) for c in range(self.cols)}
        if cells != all_cells:
            missing = sorted(all_cells - cells)
            raise ValueError(f"Tile coordinates do not cover the board (missing {missing})")

        self._tiles = {tile.id: tile for tile in tiles}
        self._tray = tiles
        self._grid = self._empty_grid()
        self._locations = {}
        self._commit(None)

    # ------------------------------------------------------------------
    # Moves
    # ------------------------------------------------------------------

    def place(self, tile_id: str, row: int, col: int) -> None:
        """
        Move a tile from the tray or another cell onto (row, col).

        Raises:
            UnknownTile: If tile_id is not part of this puzzle
            OutOfBounds: If (row, col) is not on the board
            CellOccupied: If the target cell already holds a tile
        """
        tile = self._get_tile(tile_id)

        if not self.in_bounds(row, col):
            self._events.emit(InvalidMove(row, col))
            raise OutOfBounds(f"Cell ({row}, {col}) is outside the {self.rows}x{self.cols} board", row, col)

        if self._grid[row][col] is not None:
            self._events.emit(InvalidMove(row, col))
            raise CellOccupied(f"Cell ({row}, {col}) is already occupied", row, col)

        source = self._locations.get(tile_id)
        if source is None:
            self._tray.remove(tile)
        else:
            self._grid[source[0]][source[1]] = None

        self._grid[row][col] = tile
        self._locations[tile_id] = (row, col)

        self._commit(Placed(tile_id, row, col, source))

    def place_first_empty(self, tile_id: str) -> Cell:
        """
        Place a tile on the first empty cell in row-major order.

        Returns:
            The (row, col) the tile was placed on

        Raises:
            UnknownTile: If tile_id is not part of this puzzle
            BoardFull: If no cell is empty
        """
        self._get_tile(tile_id)

        cell = next(self.empty_cells(), None)
        if cell is None:
            self._events.emit(InvalidMove(None, None))
            raise BoardFull("No empty cell left on the board")

        self.place(tile_id, *cell)
        return cell

    def remove(self, tile_id: str) -> Cell:
        """
        Take a placed tile off the board and append it to the tray.

        Returns:
            The cell the tile was removed from

        Raises:
            TileNotPlaced: If the tile is already in the tray
            SessionFinished: If the puzzle is already solved
            ResetRequired: If the board is misfilled
        """
        tile = self._get_tile(tile_id)
        if self._state is SessionState.SOLVED:
            raise SessionFinished("Puzzle is solved; tiles stay on the board")
        if self._state is SessionState.MISFILLED:
            raise ResetRequired("Board is misfilled; reset to try again")
        cell = self._locations.get(tile_id)
        if cell is None:
            raise TileNotPlaced(f"Tile {tile_id} is not on the board")

        row, col = cell
        self._grid[row][col] = None
        del self._locations[tile_id]
        self._tray.append(tile)

        self._commit(Removed(tile_id, row, col))
        return cell

    def reset(self) -> None:
        """
        Put every tile back into the tray in a fresh random order.

        Raises:
            SessionFinished: If the puzzle is already solved
        """
        if self._state is SessionState.SOLVED:
            raise SessionFinished("Puzzle is solved; start a new puzzle instead")

        placed = [tile for _, tile in self.cells() if tile is not None]
        self._tray = shuffle_tiles(placed + self._tray, self._rng)
        self._grid = self._empty_grid()
        self._locations = {}

        self._commit(Reset())

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def completion_status(self) -> SessionState:
        """Scan the board: any empty cell -> IN_PROGRESS, else SOLVED or MISFILLED."""
        all_correct = True
        for (row, col), tile in self.cells():
            if tile is None:
                return SessionState.IN_PROGRESS
            if not tile.belongs_at(row, col):
                all_correct = False

        return SessionState.SOLVED if all_correct else SessionState.MISFILLED

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def tray(self) -> Tuple[Tile, ...]:
        return tuple(self._tray)

    @property
    def tiles(self) -> Tuple[Tile, ...]:
        """Every tile of the puzzle, wherever it is."""
        return tuple(self._tiles.values())

    @property
    def placed_count(self) -> int:
        return len(self._locations)

    @property
    def is_full(self) -> bool:
        return self.placed_count == self.rows * self.cols

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def tile_at(self, row: int, col: int) -> Optional[Tile]:
        if not self.in_bounds(row, col):
            raise OutOfBounds(f"Cell ({row}, {col}) is outside the {self.rows}x{self.cols} board", row, col)
        return self._grid[row][col]

    def location_of(self, tile_id: str) -> Optional[Cell]:
        """Cell holding the tile, or None if it is in the tray."""
        self._get_tile(tile_id)
        return self._locations.get(tile_id)

    def cells(self) -> Iterator[Tuple[Cell, Optional[Tile]]]:
        """Yield ((row, col), tile or None) in row-major order."""
        for row in range(self.rows):
            for col in range(self.cols):
                yield (row, col), self._grid[row][col]

    def empty_cells(self) -> Iterator[Cell]:
        return (cell for cell, tile in self.cells() if tile is None)

    def misplaced_cells(self) -> List[Cell]:
        """Occupied cells whose tile belongs elsewhere."""
        return [cell for cell, tile in self.cells()
                if tile is not None and not tile.belongs_at(*cell)]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _empty_grid(self) -> List[List[Optional[Tile]]]:
        return [[None] * self.cols for _ in range(self.rows)]

    def _get_tile(self, tile_id: str) -> Tile:
        try:
            return self._tiles[tile_id]
        except KeyError:
            raise UnknownTile(f"Unknown tile: {tile_id}") from None

    def _commit(self, event) -> None:
        # State is settled before anyone is notified, so listeners of
        # `event` already see the new state
        new_state = self.completion_status()
        changed = new_state is not self._state
        self._state = new_state
        if event is not None:
            self._events.emit(event)
        if changed:
            self._events.emit(StateChanged(new_state))

    def __repr__(self):
        return (f"BoardEngine({self.rows}x{self.cols}, tray={len(self._tray)}, "
                f"placed={self.placed_count}, state={self._state.name})")
