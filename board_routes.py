"""
Board Routes - Flask Blueprint
==============================

Routes:
    /generate-bingo       - Generate and save a new board
    /get-current-board    - Current board, or the empty-board shape
    /mark-cell            - Mark or unmark one cell
    /status               - Store and config summary for debugging
"""

import traceback

from flask import Blueprint, current_app, jsonify, request

from bingo_errors import BingoError, InvalidRequest
from board_store import has_board

board_bp = Blueprint('board', __name__)


def _session():
    return current_app.extensions['bingo_session']


def _error_response(error):
    print(f"[{error.kind}] {error.message}")
    return jsonify(error.to_dict()), error.status_code


@board_bp.route('/generate-bingo', methods=['GET'])
def generate_bingo():
    """Generate a new board, replacing the current one."""
    try:
        return jsonify(_session().generate())
    except BingoError as e:
        return _error_response(e)
    except Exception:
        traceback.print_exc()
        return jsonify({
            'error': 'Failed to generate bingo board due to an internal server error.'
        }), 500


@board_bp.route('/get-current-board', methods=['GET'])
def get_current_board():
    """Return the current board. Never errors; no board is a valid answer."""
    return jsonify(_session().fetch())


@board_bp.route('/mark-cell', methods=['POST'])
def mark_cell():
    """
    Mark or unmark a cell.

    Body: {index: int, isMarked: bool, isBingoAchievedByThisMove: bool}
    """
    data = request.get_json(silent=True)

    try:
        if not isinstance(data, dict):
            raise InvalidRequest('No data provided')

        result = _session().mark(
            data.get('index'),
            data.get('isMarked'),
            data.get('isBingoAchievedByThisMove'),
        )
        return jsonify(result)
    except BingoError as e:
        return _error_response(e)
    except Exception:
        traceback.print_exc()
        return jsonify({'error': 'Failed to save marked cell state.'}), 500


@board_bp.route('/status', methods=['GET'])
def status():
    """Return a summary of the board and where it is stored."""
    session = _session()
    state = session.store.current()
    board = session.fetch()
    marked = state['markedCells'] or []

    return jsonify({
        'hasBoard': has_board(state),
        'isBingoAchieved': state['isBingoAchieved'],
        'markedCount': sum(1 for m in marked if m),
        'winningLines': board['winningLines'],
        'stateFile': session.store.persistence.describe(),
        'activitiesFile': str(session.activities_path),
        'trustClientClaim': session.trust_client_claim,
        'unsavedChanges': session.store.is_dirty,
    })
