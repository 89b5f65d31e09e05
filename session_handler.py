"""
Session Handler - Board Lifecycle
=================================

The three board operations behind the HTTP routes:

    generate()  NoBoard/any -> Generated       (always allowed, clears bingo)
    fetch()     read-only
    mark()      Generated/Marking -> Marking | BingoAchieved

Once a board reaches bingo it is locked: only a move that itself claims
bingo is let through, and the win flag never goes back to false until
the next generate().

The win flag is recomputed here from the stored marks. The client's
claim only decides whether a locked board accepts the request, unless
trust_client_claim is set (legacy behaviour: adopt the claim as-is).
"""

import random

from activity_source import read_activity_pool
from bingo_constants import CELL_COUNT, EMPTY_LABEL
from bingo_errors import BoardLocked, InvalidRequest, NoBoard
from board_generator import generate_board
from board_store import has_board
from win_detector import winning_lines


def _is_index(value):
    # bool is an int subclass; JSON true must not pass as index 1
    return isinstance(value, int) and not isinstance(value, bool)


def render_state(state):
    """Board state as sent to clients, with winning lines for highlighting."""
    if not has_board(state):
        return {
            'boardActivities': None,
            'markedCells': None,
            'isBingoAchieved': False,
            'winningLines': [],
        }
    return {
        'boardActivities': state['boardActivities'],
        'markedCells': state['markedCells'],
        'isBingoAchieved': state['isBingoAchieved'],
        'winningLines': winning_lines(state['markedCells']),
    }


class SessionHandler:
    def __init__(self, store, activities_path, trust_client_claim=False, rng=None):
        self.store = store
        self.activities_path = activities_path
        self.trust_client_claim = trust_client_claim
        self._rng = rng or random.Random()

    def generate(self):
        """
        Build a fresh board from the activity source and make it current.

        Source errors propagate before the store is touched, so the
        previous board survives a bad activities file.
        """
        non_repeatable, repeatable = read_activity_pool(self.activities_path)
        print(f"[Generate] {len(non_repeatable)} non-repeatable, {len(repeatable)} repeatable activities")

        new_state = generate_board(non_repeatable, repeatable, rng=self._rng)
        self.store.replace(new_state)
        return render_state(new_state)

    def fetch(self):
        return render_state(self.store.current())

    def mark(self, index, is_marked, claimed_bingo=None):
        """
        Set one cell's mark and persist.

        Raises InvalidRequest, NoBoard or BoardLocked without changing
        state, and PersistenceFailure if the save fails after the change.
        """
        if not _is_index(index) or index < 0 or index >= CELL_COUNT:
            raise InvalidRequest("Invalid cell index provided.")
        if not isinstance(is_marked, bool):
            raise InvalidRequest("Invalid marked status provided (must be true or false).")

        with self.store.mutate() as state:
            if not has_board(state):
                raise NoBoard("No active bingo board. Generate one first.")
            if state['isBingoAchieved'] and claimed_bingo is not True:
                raise BoardLocked("Board is already locked due to a previous Bingo.")
            if state['boardActivities'][index] == EMPTY_LABEL:
                raise InvalidRequest("Empty cells cannot be marked.")

            was_bingo = state['isBingoAchieved']
            state['markedCells'][index] = is_marked

            if self.trust_client_claim:
                if isinstance(claimed_bingo, bool):
                    state['isBingoAchieved'] = claimed_bingo
            else:
                state['isBingoAchieved'] = was_bingo or len(winning_lines(state['markedCells'])) > 0

            action = 'marked' if is_marked else 'unmarked'
            print(f"[Mark] Cell {index} {action}")
            if state['isBingoAchieved'] and not was_bingo:
                print("[Mark] BINGO! Board locked.")

            result = {
                'success': True,
                'markedCells': list(state['markedCells']),
                'isBingoAchieved': state['isBingoAchieved'],
                'winningLines': winning_lines(state['markedCells']),
            }

        return result
