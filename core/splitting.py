"""Image splitting into puzzle tiles."""

import random
import uuid
from dataclasses import dataclass, field
from typing import List, Sequence, Union

import numpy as np

from .errors import InvalidDimensions
from .image_utils import to_rgb_array


RandomSource = Union[random.Random, int, None]


@dataclass(frozen=True)
class Tile:
    """
    One rectangular crop of the source image.

    Attributes:
        id: Unique identifier within the puzzle
        image: Read-only pixel array of the crop
        correct_row: Row the tile belongs to
        correct_col: Column the tile belongs to
    """
    id: str
    image: np.ndarray = field(compare=False, repr=False)
    correct_row: int
    correct_col: int

    @property
    def correct_cell(self):
        return (self.correct_row, self.correct_col)

    def belongs_at(self, row: int, col: int) -> bool:
        return self.correct_row == row and self.correct_col == col


def make_rng(rng: RandomSource = None) -> random.Random:
    """Return a random.Random from an existing instance, a seed, or nothing."""
    if isinstance(rng, random.Random):
        return rng
    return random.Random(rng)


def shuffle_tiles(tiles: Sequence[Tile], rng: RandomSource = None) -> List[Tile]:
    """Return the tiles in a uniformly random order (Fisher-Yates)."""
    shuffled = list(tiles)
    make_rng(rng).shuffle(shuffled)
    return shuffled


def tile_size(image_shape, rows: int, cols: int):
    """
    Compute the tile size for a grid over an image.

    Returns:
        (tile_height, tile_width)

    Raises:
        InvalidDimensions: If the grid is empty or a tile would be under 1 pixel
    """
    if not isinstance(rows, (int, np.integer)) or not isinstance(cols, (int, np.integer)):
        raise InvalidDimensions(f"Grid size must be integers, got {rows}x{cols}")
    if rows < 1 or cols < 1:
        raise InvalidDimensions(f"Grid size must be at least 1x1, got {rows}x{cols}")

    height, width = image_shape[:2]
    tile_h = height // rows
    tile_w = width // cols
    if tile_h < 1 or tile_w < 1:
        raise InvalidDimensions(
            f"Image {width}x{height} is too small for a {rows}x{cols} grid"
        )
    return tile_h, tile_w


def split_image(image_data, rows: int, cols: int) -> List[np.ndarray]:
    """
    Split image into rows x cols patches.

    Pixels left over on the right and bottom edges are dropped.

    Args:
        image_data: Input image as numpy array
        rows: Number of grid rows
        cols: Number of grid columns

    Returns:
        List of image patches in row-major order
    """
    patch_h, patch_w = tile_size(image_data.shape, rows, cols)

    sections = []
    for i in range(rows):
        for j in range(cols):
            y_start = i * patch_h
            y_end = (i + 1) * patch_h
            x_start = j * patch_w
            x_end = (j + 1) * patch_w

            section = image_data[y_start:y_end, x_start:x_end].copy()
            section.setflags(write=False)
            sections.append(section)

    return sections


def partition(image, rows: int = 3, cols: int = 4,
              rng: RandomSource = None) -> List[Tile]:
    """
    Slice an image into tiles and deal them in random order.

    Args:
        image: Decoded image (numpy array or PIL image)
        rows: Number of grid rows (>= 1)
        cols: Number of grid columns (>= 1)
        rng: random.Random, integer seed, or None

    Returns:
        rows * cols tiles, each stamped with its correct (row, col),
        in a uniformly random order

    Raises:
        ImageDecodeError: If the image is missing or not a pixel array
        InvalidDimensions: If the grid does not fit the image
    """
    pixels = to_rgb_array(image)
    rng = make_rng(rng)

    patches = split_image(pixels, rows, cols)

    tiles = []
    for idx, patch in enumerate(patches):
        row, col = divmod(idx, cols)
        tile_id = str(uuid.UUID(int=rng.getrandbits(128), version=4))
        tiles.append(Tile(id=tile_id, image=patch, correct_row=row, correct_col=col))

    return shuffle_tiles(tiles, rng)


def solution_order(tiles: Sequence[Tile]) -> List[Tile]:
    """Tiles sorted into row-major solution order."""
    return sorted(tiles, key=lambda t: t.correct_cell)
