"""
Puzzle session orchestration.

Image-first flow:
1. load_source() - decode path / bytes / array (fatal on failure)
2. partition into tiles and deal them into a BoardEngine
3. PuzzleSession - countdown preview, then the puzzle phase
"""
from .session import (
    Phase,
    PuzzleSession,
    load_source,
    start_puzzle,
)
