#!/usr/bin/env python3
"""
Board Storage Manager
=====================

Holds the single shared bingo board in memory and mirrors it to durable
storage after every change.

Persisted shape (bingo_state.json):
    {
      "boardActivities": [25 strings] | null,
      "markedCells": [25 booleans] | null,
      "isBingoAchieved": false
    }

The store owns the only writable copy of the board. Callers get copies
from current(), and change the board inside mutate(), which holds the
store lock across read, change and save.
"""

import json
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path

from bingo_constants import CELL_COUNT
from bingo_errors import PersistenceFailure

_STATE_FIELDS = {
    "boardActivities": None,
    "markedCells": None,
    "isBingoAchieved": False,
}


def empty_state():
    """The no-board state."""
    return dict(_STATE_FIELDS)


def make_state(board_activities, marked_cells, is_bingo_achieved):
    return {
        "boardActivities": list(board_activities),
        "markedCells": list(marked_cells),
        "isBingoAchieved": bool(is_bingo_achieved),
    }


def copy_state(state):
    if not has_board(state):
        return empty_state()
    return make_state(state["boardActivities"], state["markedCells"], state["isBingoAchieved"])


def has_board(state):
    return bool(state) and state.get("boardActivities") is not None


def normalize_state(data):
    """
    Validate a state dict read from storage and return a clean copy.
    Raises ValueError if it does not describe a usable board.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

    activities = data.get("boardActivities")
    marked = data.get("markedCells")

    if activities is None and marked is None:
        return empty_state()

    if not isinstance(activities, list) or len(activities) != CELL_COUNT:
        raise ValueError(f"boardActivities must be a list of {CELL_COUNT} strings")
    if not all(isinstance(a, str) for a in activities):
        raise ValueError("boardActivities must contain only strings")
    if not isinstance(marked, list) or len(marked) != CELL_COUNT:
        raise ValueError(f"markedCells must be a list of {CELL_COUNT} booleans")
    if not all(isinstance(m, bool) for m in marked):
        raise ValueError("markedCells must contain only booleans")

    # Older state files have no isBingoAchieved field
    return make_state(activities, marked, data.get("isBingoAchieved") is True)


class JsonFilePersistence:
    """Reads and atomically rewrites the board as a JSON file."""

    def __init__(self, path='bingo_state.json'):
        self.path = Path(path)

    def read(self):
        """Return the stored dict, or None if no file exists."""
        if not self.path.exists():
            return None
        with open(self.path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def write(self, data):
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)

        # Write beside the target and swap in, so a crash never leaves half a file
        fd, tmp_path = tempfile.mkstemp(prefix='.bingo_state.', suffix='.tmp', dir=directory)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def describe(self):
        return str(self.path)


class BoardStore:
    def __init__(self, persistence):
        self._persistence = persistence
        self._state = empty_state()
        self._lock = threading.RLock()
        self._dirty = False

    @property
    def persistence(self):
        return self._persistence

    def load(self):
        """
        Restore the board from storage. A missing or unreadable file leaves
        the store in the no-board state; that is the normal first run.
        """
        with self._lock:
            try:
                data = self._persistence.read()
            except (OSError, ValueError) as e:
                print(f"[WARNING] Error loading bingo state: {e}. Starting with no board.")
                self._state = empty_state()
                return self.current()

            if data is None:
                print("[Store] No saved bingo state found. A new one will be created on generation.")
                self._state = empty_state()
                return self.current()

            try:
                self._state = normalize_state(data)
            except ValueError as e:
                print(f"[WARNING] Saved bingo state is unusable ({e}). Starting with no board.")
                self._state = empty_state()
                return self.current()

            self._dirty = False
            print("[Store] Bingo state loaded successfully.")
            return self.current()

    def current(self):
        """Return a copy of the in-memory board."""
        with self._lock:
            return copy_state(self._state)

    def save(self, state):
        """
        Make state the current board and persist it.

        The in-memory board is updated first. If the write fails,
        PersistenceFailure is raised and the store remembers that disk is
        behind, so shutdown() can retry.
        """
        with self._lock:
            self._state = copy_state(state)
            self._write()

    def replace(self, state):
        """Swap in a whole new board (used by generation)."""
        self.save(state)

    @contextmanager
    def mutate(self):
        """
        Critical section for read-modify-persist.

        Yields the live board dict. If the block raises, nothing is saved;
        callers must validate before changing anything.
        """
        with self._lock:
            yield self._state
            self._write()

    def shutdown(self):
        """Flush a board that could not be saved earlier."""
        with self._lock:
            if not self._dirty:
                return
            print("[Store] Retrying unsaved bingo state before shutdown...")
            try:
                self._write()
            except PersistenceFailure as e:
                print(f"[WARNING] Bingo state lost on shutdown: {e}")

    @property
    def is_dirty(self):
        return self._dirty

    def _write(self):
        try:
            self._persistence.write(copy_state(self._state))
        except (OSError, TypeError, ValueError) as e:
            self._dirty = True
            print(f"[WARNING] Error saving bingo state: {e}")
            raise PersistenceFailure(f"Failed to save bingo state: {e}") from e
        self._dirty = False
        print("[Store] Bingo state saved successfully.")
