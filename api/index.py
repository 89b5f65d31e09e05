"""
Vercel serverless entry point.

Imports the Flask app from bingo_server.py and exposes it as the WSGI
application that Vercel's Python runtime expects. Point BINGO_STATE_FILE
at writable storage (e.g. /tmp/bingo_state.json) when deploying there.
"""

import sys
import os

# Add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from bingo_server import app
