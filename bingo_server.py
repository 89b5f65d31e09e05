#!/usr/bin/env python3
"""
Bingo Web Server
================

Serves a single shared 5x5 activity bingo board. The board is generated
from an activities file, marked cell by cell from the browser, saved
after every change and locked once a line is complete.

Usage:
    python bingo_server.py

Then open http://localhost:8080 in your browser.

Configuration (environment or a .env file next to this script):
    BINGO_ACTIVITIES_FILE     activities source (.yaml/.yml/.toml)
    BINGO_STATE_FILE          saved board (JSON)
    BINGO_TRUST_CLIENT_CLAIM  1 to accept the client's bingo claim as-is
    PORT                      listen port (default 8080)
    BINGO_DEBUG               1 for Flask debug mode
"""

import atexit
import os

from dotenv import load_dotenv
from flask import Flask, render_template

from board_routes import board_bp
from board_store import BoardStore, JsonFilePersistence, has_board
from session_handler import SessionHandler

_script_dir = os.path.dirname(os.path.abspath(__file__))

# .env is optional; real environment variables win
_env_path = os.path.join(_script_dir, '.env')
if os.path.isfile(_env_path):
    load_dotenv(_env_path)
    print(f"Loaded .env from {_env_path}")


def _env_flag(name):
    return os.environ.get(name, '').strip().lower() in ('1', 'true', 'yes', 'on')


ACTIVITIES_FILE_PATH = os.environ.get(
    'BINGO_ACTIVITIES_FILE', os.path.join(_script_dir, 'activities.yaml'))
STATE_FILE_PATH = os.environ.get(
    'BINGO_STATE_FILE', os.path.join(_script_dir, 'bingo_state.json'))
TRUST_CLIENT_CLAIM = _env_flag('BINGO_TRUST_CLIENT_CLAIM')
PORT = int(os.environ.get('PORT', 8080))
DEBUG = _env_flag('BINGO_DEBUG')


def create_app(session=None):
    """
    Build the Flask app around a SessionHandler.

    Without a session, one is created from the configured file paths and
    the saved board is loaded.
    """
    if session is None:
        store = BoardStore(JsonFilePersistence(STATE_FILE_PATH))
        store.load()
        session = SessionHandler(store, ACTIVITIES_FILE_PATH,
                                 trust_client_claim=TRUST_CLIENT_CLAIM)
        atexit.register(store.shutdown)

    app = Flask(__name__)
    app.extensions['bingo_session'] = session
    app.register_blueprint(board_bp)

    @app.route('/')
    def index():
        """Serve the main page"""
        return render_template('index.html')

    return app


def print_startup_hint(session):
    state = session.store.current()
    if not has_board(state):
        print("Hint: No saved board found. Click 'Generate New Board' in the browser to start.")
    else:
        print(f"Hint: Existing board loaded. Bingo achieved status: "
              f"{state['isBingoAchieved']}. Check your browser.")


app = create_app()


if __name__ == '__main__':
    print("Starting Bingo Server...")
    print(f"Activities file: {ACTIVITIES_FILE_PATH}")
    print(f"State file: {STATE_FILE_PATH}")
    if TRUST_CLIENT_CLAIM:
        print("[WARNING] BINGO_TRUST_CLIENT_CLAIM is on: the client's bingo claim is not checked")
    print(f"Open http://localhost:{PORT} in your browser")
    print_startup_hint(app.extensions['bingo_session'])
    app.run(debug=DEBUG, port=PORT, host='0.0.0.0', threaded=True)
