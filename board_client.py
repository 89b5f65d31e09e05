"""
Board Client - Optimistic Board Mirror
======================================

Client-side copy of the server's board. Mark toggles are shown at once
(optimistic), sent to /mark-cell, then either adopted from the server's
answer or rolled back.

Per cell:   idle -> pending -> committed | rolled_back
Board:      empty | loading | interactive | locked

The server is the authority: after every successful call the client
takes the server's mark vector and bingo flag as-is. A cell that still
has a request in flight refuses further toggles. There are no retries.

Transport is pluggable; HttpTransport talks to a running bingo_server.py.
"""

import json
import urllib.error
import urllib.request

from bingo_constants import CELL_COUNT, EMPTY_LABEL
from win_detector import has_bingo, winning_lines

DEFAULT_SERVER = "http://127.0.0.1:8080"

CELL_IDLE = 'idle'
CELL_PENDING = 'pending'
CELL_COMMITTED = 'committed'
CELL_ROLLED_BACK = 'rolled_back'

BOARD_EMPTY = 'empty'
BOARD_LOADING = 'loading'
BOARD_INTERACTIVE = 'interactive'
BOARD_LOCKED = 'locked'


class BoardClientError(Exception):
    def __init__(self, message, kind=None, status=None):
        super().__init__(message)
        self.kind = kind
        self.status = status


class HttpTransport:
    """JSON over HTTP with urllib. Returns (status, body) for any HTTP status."""

    def __init__(self, server=DEFAULT_SERVER, timeout=30):
        self.server = server.rstrip('/')
        self.timeout = timeout

    def get(self, path):
        req = urllib.request.Request(f"{self.server}{path}")
        return self._send(req)

    def post(self, path, payload):
        data = json.dumps(payload).encode("utf-8")
        req = urllib.request.Request(f"{self.server}{path}", data=data,
                                     headers={"Content-Type": "application/json"})
        return self._send(req)

    def _send(self, req):
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                return resp.status, json.loads(resp.read().decode("utf-8"))
        except urllib.error.HTTPError as e:
            raw = e.read().decode("utf-8")
            try:
                body = json.loads(raw)
            except ValueError:
                body = {"error": f"HTTP error! status: {e.code}"}
            return e.code, body


class BoardClient:
    def __init__(self, transport, confirm=None):
        """
        Args:
            transport: object with get(path) and post(path, payload)
                returning (status, body)
            confirm: callable(message) -> bool asked before each toggle;
                None confirms everything
        """
        self.transport = transport
        self.confirm = confirm
        self.board_status = BOARD_EMPTY
        self.activities = None
        self.marked = None          # last server-confirmed marks
        self.display = None         # what the user sees, incl. optimistic flips
        self.cells = None
        self.is_bingo_achieved = False
        self.message = ""
        self.save_status = ""

    # --- Board loading ---

    def load_initial_board(self):
        """Fetch the saved board. Returns True if a board is now shown."""
        self.board_status = BOARD_LOADING
        self.message = ""
        self.save_status = "Loading..."
        try:
            body = self._request('get', '/get-current-board')
        except BoardClientError as e:
            self._clear(f"Error loading: {e}")
            self.save_status = "Error loading game."
            return False

        if not body.get('boardActivities'):
            self._clear("No saved board found. Generate a new one!")
            self.save_status = "No game loaded."
            return False

        self._adopt_board(body)
        if not self.is_bingo_achieved:
            self.message = "Loaded saved board!"
            self.save_status = "Game loaded."
        return True

    def generate_new_board(self):
        """Ask the server for a new board. Returns True on success."""
        self.board_status = BOARD_LOADING
        self.message = ""
        self.save_status = "Generating..."
        self.is_bingo_achieved = False
        try:
            body = self._request('get', '/generate-bingo')
        except BoardClientError as e:
            self._clear(f"Error generating: {e}")
            self.save_status = "Error generating board."
            return False

        self._adopt_board(body)
        self.message = "New board generated and saved!"
        self.save_status = "New board saved!"
        return True

    # --- Marking ---

    def can_toggle(self, index):
        if self.board_status != BOARD_INTERACTIVE:
            return False
        if not 0 <= index < CELL_COUNT:
            return False
        if self.activities[index] == EMPTY_LABEL:
            return False
        return self.cells[index] != CELL_PENDING

    def toggle_cell(self, index):
        """
        Confirm, flip optimistically, send, then commit or roll back.

        Returns True if the server accepted the change.
        """
        if not self.can_toggle(index):
            return False

        activities = self.activities
        currently_marked = self.display[index]
        action = "unmark" if currently_marked else "mark"
        if self.confirm is not None:
            if not self.confirm(f'Are you sure you want to {action} "{activities[index]}"?'):
                return False
            # The board may have been replaced while the user was asked
            if self.activities is not activities or not self.can_toggle(index):
                return False

        new_marked = not currently_marked
        self.display[index] = new_marked
        self.cells[index] = CELL_PENDING
        self.save_status = "Saving..."

        # Hint only; the server decides
        claim = new_marked and has_bingo(self.display)

        try:
            body = self._request('post', '/mark-cell', {
                'index': index,
                'isMarked': new_marked,
                'isBingoAchievedByThisMove': claim,
            })
            if not body.get('success'):
                raise BoardClientError(body.get('error') or "Server did not confirm the change")
        except BoardClientError as e:
            self.display[index] = currently_marked
            self.cells[index] = CELL_ROLLED_BACK
            self.message = f"Save error: {e}. Reverting."
            self.save_status = "Save failed!"
            return False

        self.cells[index] = CELL_COMMITTED
        self._adopt_marks(body['markedCells'], body['isBingoAchieved'])
        if not self.is_bingo_achieved:
            self.save_status = "Saved!"
        return True

    def winning_lines(self):
        return winning_lines(self.marked) if self.marked else []

    # --- Internals ---

    def _request(self, method, path, payload=None):
        try:
            if method == 'post':
                status, body = self.transport.post(path, payload)
            else:
                status, body = self.transport.get(path)
        except (OSError, ValueError) as e:
            raise BoardClientError(str(e)) from e

        if not isinstance(body, dict):
            raise BoardClientError(f"Unexpected response (status {status})")
        if status >= 400:
            raise BoardClientError(body.get('error') or f"HTTP error! status: {status}",
                                   kind=body.get('kind'), status=status)
        return body

    def _adopt_board(self, body):
        self.activities = list(body['boardActivities'])
        self.cells = [CELL_IDLE] * CELL_COUNT
        self.display = list(body['markedCells'])
        self._adopt_marks(body['markedCells'], body.get('isBingoAchieved', False))

    def _adopt_marks(self, marked_cells, is_bingo_achieved):
        self.marked = list(marked_cells)
        # Cells with their own request still in flight keep their optimistic value
        self.display = [
            self.display[i] if self.cells[i] == CELL_PENDING else self.marked[i]
            for i in range(CELL_COUNT)
        ]
        self.is_bingo_achieved = bool(is_bingo_achieved)
        if self.is_bingo_achieved:
            self.board_status = BOARD_LOCKED
            self.message = "BINGO!"
            self.save_status = "BINGO! Board Locked."
        else:
            self.board_status = BOARD_INTERACTIVE

    def _clear(self, message):
        self.board_status = BOARD_EMPTY
        self.activities = None
        self.marked = None
        self.display = None
        self.cells = None
        self.is_bingo_achieved = False
        self.message = message
