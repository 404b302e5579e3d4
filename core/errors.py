"""Error types for puzzle construction and play."""


class PuzzleError(Exception):
    """Base class for all puzzle errors."""


class InvalidDimensions(PuzzleError, ValueError):
    """Grid size or image size cannot produce tiles of at least 1x1 pixel."""


class ImageDecodeError(PuzzleError, ValueError):
    """Source image could not be read or decoded."""


class MoveRejected(PuzzleError):
    """
    A placement was refused. The engine state is unchanged.

    Attributes:
        row: Target row of the rejected move (None if no target cell)
        col: Target column of the rejected move (None if no target cell)
    """

    def __init__(self, message, row=None, col=None):
        super().__init__(message)
        self.row = row
        self.col = col


class OutOfBounds(MoveRejected):
    """Target cell lies outside the board."""


class CellOccupied(MoveRejected):
    """Target cell already holds a tile."""


class BoardFull(MoveRejected):
    """No empty cell is left on the board."""


class UnknownTile(PuzzleError, KeyError):
    """Tile id does not belong to this puzzle."""

    def __str__(self):
        return str(self.args[0]) if self.args else "unknown tile"


class TileNotPlaced(PuzzleError, ValueError):
    """Tile is in the tray, not on the board."""


class SessionFinished(PuzzleError):
    """The puzzle is solved; start a new one instead."""


class ResetRequired(PuzzleError):
    """The board is misfilled; only a reset can take tiles off it."""
