"""Display utilities for puzzle boards."""

import cv2
import numpy as np
import matplotlib.pyplot as plt
from typing import Optional, Tuple
from pathlib import Path

from core.image_utils import resize_image


EMPTY_COLOR = (228, 228, 232)
GAP_COLOR = (255, 255, 255)
HIGHLIGHT_COLOR = (255, 60, 60)


def _as_rgb(image: np.ndarray) -> np.ndarray:
    """Promote grayscale / RGBA tiles to 3-channel uint8."""
    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2RGB)
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_RGBA2RGB)
    return image


def _tile_shape(engine) -> Tuple[int, int]:
    sample = engine.tiles[0].image
    return sample.shape[:2]


def render_board(engine, gap: int = 4, highlight: Optional[Tuple[int, int]] = None,
                 show_numbers: bool = False,
                 empty_color: tuple = EMPTY_COLOR) -> np.ndarray:
    """
    Render the current board as an RGB image.

    Args:
        engine: BoardEngine with tiles dealt
        gap: Pixels between cells
        highlight: Optional (row, col) tinted red (rejected drop target)
        show_numbers: Overlay each tile's correct (row, col) on it
        empty_color: Fill for empty cells

    Returns:
        RGB image of the board
    """
    tile_h, tile_w = _tile_shape(engine)
    out_h = engine.rows * tile_h + (engine.rows + 1) * gap
    out_w = engine.cols * tile_w + (engine.cols + 1) * gap
    output = np.full((out_h, out_w, 3), GAP_COLOR, dtype=np.uint8)

    for (r, c), tile in engine.cells():
        y1 = gap + r * (tile_h + gap)
        x1 = gap + c * (tile_w + gap)
        y2, x2 = y1 + tile_h, x1 + tile_w

        if tile is None:
            output[y1:y2, x1:x2] = empty_color
        else:
            output[y1:y2, x1:x2] = _as_rgb(tile.image)

        if highlight == (r, c):
            overlay = output[y1:y2, x1:x2].copy()
            overlay[:] = HIGHLIGHT_COLOR
            output[y1:y2, x1:x2] = cv2.addWeighted(output[y1:y2, x1:x2], 0.6, overlay, 0.4, 0)

    if show_numbers:
        font = cv2.FONT_HERSHEY_SIMPLEX
        font_scale = min(tile_w, tile_h) / 160.0
        thickness = max(1, int(font_scale * 2))
        for (r, c), tile in engine.cells():
            if tile is None:
                continue
            text = f"{tile.correct_row},{tile.correct_col}"
            (text_w, text_h), _ = cv2.getTextSize(text, font, font_scale, thickness)
            center_x = gap + c * (tile_w + gap) + tile_w // 2
            center_y = gap + r * (tile_h + gap) + tile_h // 2
            text_x = center_x - text_w // 2
            text_y = center_y + text_h // 2

            cv2.putText(output, text, (text_x, text_y), font, font_scale, (0, 0, 0), thickness + 2)
            cv2.putText(output, text, (text_x, text_y), font, font_scale, (255, 255, 255), thickness)

    return output


def render_tray(engine, thumb_height: int = 64, gap: int = 4) -> Optional[np.ndarray]:
    """
    Render the tray as a horizontal strip of thumbnails, in tray order.

    Returns:
        RGB image, or None if the tray is empty
    """
    tray = engine.tray
    if not tray:
        return None

    thumbs = [resize_image(_as_rgb(tile.image), height=thumb_height) for tile in tray]
    out_w = sum(t.shape[1] for t in thumbs) + (len(thumbs) + 1) * gap
    output = np.full((thumb_height + 2 * gap, out_w, 3), GAP_COLOR, dtype=np.uint8)

    x = gap
    for thumb in thumbs:
        output[gap:gap + thumb_height, x:x + thumb.shape[1]] = thumb
        x += thumb.shape[1] + gap

    return output


def display_board(engine, highlight: Optional[Tuple[int, int]] = None,
                  show_numbers: bool = False, figsize: tuple = (10, 8)):
    """
    Display the board and the tray with matplotlib.

    Args:
        engine: BoardEngine
        highlight: Optional cell to tint red
        show_numbers: Overlay correct coordinates
        figsize: Figure size
    """
    tray = render_tray(engine)
    n_rows = 2 if tray is not None else 1
    fig, axes = plt.subplots(n_rows, 1, figsize=figsize,
                             gridspec_kw={'height_ratios': [4, 1][:n_rows]})
    axes = np.atleast_1d(axes)

    axes[0].imshow(render_board(engine, highlight=highlight, show_numbers=show_numbers))
    axes[0].set_title(f"Board ({engine.placed_count}/{engine.rows * engine.cols}) - "
                      f"{engine.state.name.replace('_', ' ').title()}")
    axes[0].axis('off')

    if tray is not None:
        axes[1].imshow(tray)
        axes[1].set_title(f"Tray ({len(engine.tray)})")
        axes[1].axis('off')

    plt.tight_layout()
    plt.show()


def save_board(engine, output_path: str, show_numbers: bool = False) -> np.ndarray:
    """
    Save the rendered board to an image file.

    Returns:
        The rendered RGB image
    """
    board = render_board(engine, show_numbers=show_numbers)

    output_dir = Path(output_path).parent
    if output_dir and str(output_dir) != '.':
        output_dir.mkdir(parents=True, exist_ok=True)

    if not cv2.imwrite(str(output_path), cv2.cvtColor(board, cv2.COLOR_RGB2BGR)):
        raise ValueError(f"Could not write image: {output_path}")
    return board
