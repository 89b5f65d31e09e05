"""
Bingo Errors
============

Failure kinds raised by the board modules. Each carries the HTTP status
the routes answer with, so board_routes.py can report any of them the
same way: {'error': message, 'kind': kind}.
"""


class BingoError(Exception):
    kind = 'BingoError'
    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'error': self.message, 'kind': self.kind}


class SourceUnavailable(BingoError):
    """Activity source file is missing or cannot be read."""
    kind = 'SourceUnavailable'
    status_code = 500


class SourceMalformed(BingoError):
    """Activity source file exists but cannot be parsed."""
    kind = 'SourceMalformed'
    status_code = 500


class InvalidRequest(BingoError):
    kind = 'InvalidRequest'
    status_code = 400


class NoBoard(BingoError):
    kind = 'NoBoard'
    status_code = 400


class BoardLocked(BingoError):
    kind = 'BoardLocked'
    status_code = 403


class PersistenceFailure(BingoError):
    """Durable write failed. In-memory state may be ahead of disk."""
    kind = 'PersistenceFailure'
    status_code = 500
