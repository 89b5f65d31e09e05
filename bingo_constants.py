"""
Bingo Constants - Shared Definitions
====================================

Single source of truth for board geometry, fixed labels and repeat limits
used across board_generator.py, win_detector.py, session_handler.py and
board_client.py.
"""

# Board geometry (index = row * GRID_SIZE + col)
GRID_SIZE = 5
CELL_COUNT = GRID_SIZE * GRID_SIZE
FREE_INDEX = CELL_COUNT // 2
BOARD_SLOTS = CELL_COUNT - 1

FREE_LABEL = "FREE SPACE"
EMPTY_LABEL = "Empty"

# Repeatable activities are drawn into the candidate pool 1..3 times
MIN_REPEAT_DRAWS = 1
MAX_REPEAT_DRAWS = 3

# Per-label occurrence caps on a single board
MAX_REPEATABLE_ON_BOARD = 3
MAX_NON_REPEATABLE_ON_BOARD = 1


def _build_winning_lines(size):
    rows = [tuple(r * size + c for c in range(size)) for r in range(size)]
    cols = [tuple(r * size + c for r in range(size)) for c in range(size)]
    diagonals = [
        tuple(i * size + i for i in range(size)),
        tuple(i * size + (size - 1 - i) for i in range(size)),
    ]
    return tuple(rows + cols + diagonals)


# Five rows, five columns, two diagonals
WINNING_LINES = _build_winning_lines(GRID_SIZE)
