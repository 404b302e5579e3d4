"""Core puzzle building blocks: configuration, errors, images and tiles."""
from .errors import (
    PuzzleError,
    InvalidDimensions,
    ImageDecodeError,
    MoveRejected,
    OutOfBounds,
    CellOccupied,
    BoardFull,
    UnknownTile,
    TileNotPlaced,
    SessionFinished,
    ResetRequired,
)
from .config import PuzzleConfig, DEFAULT_CONFIG
from .image_utils import load_image, decode_image, resize_image
from .splitting import Tile, partition, shuffle_tiles, split_image
