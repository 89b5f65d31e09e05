"""
Win Detector
============

Checks a 25-cell mark vector against the 12 bingo lines.
"""

from bingo_constants import CELL_COUNT, WINNING_LINES


def winning_lines(marked):
    """
    Return every line (as a list of cell indices) whose five cells are all
    marked. An absent or undersized vector has no winning lines.
    """
    if not marked or len(marked) < CELL_COUNT:
        return []
    return [list(line) for line in WINNING_LINES if all(marked[i] for i in line)]


def has_bingo(marked):
    return len(winning_lines(marked)) > 0


def winning_cells(marked):
    """Sorted indices of cells that sit on at least one winning line."""
    cells = set()
    for line in winning_lines(marked):
        cells.update(line)
    return sorted(cells)
