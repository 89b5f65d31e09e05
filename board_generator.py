"""
Board Generator
===============

Builds a fresh 5x5 board from the two activity label sets:

1. Expand labels into a candidate pool (repeatable labels drawn 1-3 times)
2. Shuffle the pool
3. Greedily take up to 24 entries, respecting per-label occurrence caps
4. Pad missing slots with "Empty"
5. Place the 24 slots around the fixed centre cell
"""

import random
from collections import Counter

from bingo_constants import (
    BOARD_SLOTS, CELL_COUNT, EMPTY_LABEL, FREE_INDEX, FREE_LABEL,
    MAX_NON_REPEATABLE_ON_BOARD, MAX_REPEATABLE_ON_BOARD,
    MAX_REPEAT_DRAWS, MIN_REPEAT_DRAWS,
)
from board_store import make_state


def build_candidate_pool(non_repeatable, repeatable, rng=random):
    """
    One entry per non-repeatable label; each repeatable label is added a
    random MIN_REPEAT_DRAWS..MAX_REPEAT_DRAWS times.

    Returns a list of {'text': str, 'repeatable': bool} dicts.
    """
    pool = [{'text': text, 'repeatable': False} for text in non_repeatable]

    for text in repeatable:
        times_to_add = rng.randint(MIN_REPEAT_DRAWS, MAX_REPEAT_DRAWS)
        pool.extend({'text': text, 'repeatable': True} for _ in range(times_to_add))

    return pool


def select_slots(pool, slot_count=BOARD_SLOTS):
    """
    Walk the pool in order and accept entries until slot_count are taken.

    Occurrences are counted per label text; an entry that would push its
    label past its cap is skipped, not requeued.
    """
    slots = []
    counts = Counter()

    for entry in pool:
        if len(slots) >= slot_count:
            break
        text = entry['text']
        limit = MAX_REPEATABLE_ON_BOARD if entry['repeatable'] else MAX_NON_REPEATABLE_ON_BOARD
        if counts[text] < limit:
            slots.append(text)
            counts[text] += 1

    return slots


def assemble_board(slots):
    """Pad slots with EMPTY_LABEL and lay them out around FREE_INDEX."""
    padded = list(slots[:BOARD_SLOTS])
    padded.extend([EMPTY_LABEL] * (BOARD_SLOTS - len(padded)))

    board = padded[:FREE_INDEX] + [FREE_LABEL] + padded[FREE_INDEX:]
    return board


def generate_board(non_repeatable, repeatable, rng=None):
    """
    Generate a new board state from label lists.

    Pass a seeded random.Random as rng for repeatable boards.
    """
    rng = rng or random.Random()

    pool = build_candidate_pool(non_repeatable, repeatable, rng)
    rng.shuffle(pool)
    slots = select_slots(pool)
    board_activities = assemble_board(slots)

    filled = len(slots)
    print(f"[Generate] Pool of {len(pool)} candidates -> {filled} activities, "
          f"{BOARD_SLOTS - filled} empty slots")

    return make_state(board_activities, [False] * CELL_COUNT, False)
