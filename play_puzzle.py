#!/usr/bin/env python
"""
Photo Puzzle - command line

Usage:
    python play_puzzle.py <image_path> [--rows 3] [--cols 4] [--seed N]
                          [--auto-solve | --misfill] [--output <path>]

Examples:
    python play_puzzle.py ./photos/cat.jpg --auto-solve --output ./debug/board.png
    python play_puzzle.py ./photos/cat.jpg --misfill --seed 7 --no-display

Flow:
    Deal: decode the image, slice it into rows x cols tiles, shuffle into the tray
    Play: place tiles on the board (correctly, or with one swap to show a misfill)
"""

import argparse
import os
import sys

from core.config import PuzzleConfig
from core.errors import PuzzleError
from core.splitting import solution_order
from engine import InvalidMove, Placed, Removed, Reset, SessionState, StateChanged
from pipeline import PuzzleSession
from visualization import display_board, save_board


def describe(event) -> str:
    if isinstance(event, Placed):
        origin = "tray" if event.source is None else f"cell {event.source}"
        return f"placed {event.tile_id[:8]} at ({event.row}, {event.col}) from {origin}"
    if isinstance(event, Removed):
        return f"removed {event.tile_id[:8]} from ({event.row}, {event.col})"
    if isinstance(event, InvalidMove):
        return f"invalid move at ({event.row}, {event.col})"
    if isinstance(event, StateChanged):
        return f"state -> {event.state.name}"
    if isinstance(event, Reset):
        return "reset: all tiles back in the tray"
    return repr(event)


def play_in_order(engine, swap_last: bool = False):
    """Place every tray tile on its correct cell; optionally swap the last two."""
    tiles = solution_order(engine.tray)
    targets = [t.correct_cell for t in tiles]
    if swap_last and len(targets) >= 2:
        targets[-1], targets[-2] = targets[-2], targets[-1]

    for tile, (row, col) in zip(tiles, targets):
        engine.place(tile.id, row, col)


def main():
    parser = argparse.ArgumentParser(
        description="Slice a photo into a tile puzzle and play it",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
States:
  - IN_PROGRESS: at least one cell is empty
  - SOLVED: every cell holds its own tile
  - MISFILLED: board full but at least one tile is in the wrong cell
        """
    )
    parser.add_argument("image_path", help="Path to the photo")
    parser.add_argument("--rows", "-r", type=int, default=3, help="Grid rows (default 3)")
    parser.add_argument("--cols", "-c", type=int, default=4, help="Grid columns (default 4)")
    parser.add_argument("--seed", "-s", type=int, help="Random seed for the deal")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--auto-solve", action="store_true", help="Place every tile correctly")
    mode.add_argument("--misfill", action="store_true",
                      help="Fill the board with two tiles swapped, then reset")
    parser.add_argument("--output", "-o", help="Output path for the rendered board")
    parser.add_argument("--numbers", action="store_true", help="Label tiles with their coordinates")
    parser.add_argument("--quiet", "-q", action="store_true", help="Suppress output")
    parser.add_argument("--no-display", action="store_true", help="Don't display result")

    args = parser.parse_args()

    if not os.path.exists(args.image_path):
        print(f"Error: Image not found: {args.image_path}")
        sys.exit(1)

    verbose = not args.quiet

    try:
        config = PuzzleConfig(rows=args.rows, cols=args.cols, seed=args.seed)
        session = PuzzleSession(args.image_path, config, verbose=verbose)
    except PuzzleError as e:
        print(f"Error: cannot start puzzle: {e}")
        sys.exit(1)

    engine = session.engine
    if verbose:
        engine.subscribe(lambda event: print(f"  {describe(event)}"))
    session.skip_preview()

    if args.auto_solve:
        play_in_order(engine)
    elif args.misfill:
        play_in_order(engine, swap_last=True)
        if verbose:
            print(f"\nMisplaced cells: {engine.misplaced_cells()}")
        if engine.state is SessionState.MISFILLED:
            session.retry()

    if verbose:
        print(f"\nState: {engine.state.name}")
        print(f"Placed: {engine.placed_count}/{engine.rows * engine.cols}, tray: {len(engine.tray)}")

    if args.output:
        save_board(engine, args.output, show_numbers=args.numbers)
        if verbose:
            print(f"Saved: {args.output}")

    if not args.no_display:
        display_board(engine, show_numbers=args.numbers)

    session.close()


if __name__ == "__main__":
    main()
