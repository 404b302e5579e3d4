"""Visualization utilities for puzzle boards."""
from .display import (
    render_board,
    render_tray,
    display_board,
    save_board
)
