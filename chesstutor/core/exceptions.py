"""
Custom exceptions used across layers.

Rule violations during play (wrong side's piece, illegal piece movement, wrong puzzle guess) are NOT exceptions:
they are returned as outcomes. The errors below are for malformed input and misuse of the API.
"""


class ChessTutorError(Exception):
    """Base class for all errors raised by this package."""


# --- DOMAIN ---
class InvalidSquareError(ChessTutorError):
    """Text could not be interpreted as a square on the board."""


class OutOfBoundsError(InvalidSquareError):
    """Raw (row, col) coordinates fall outside of the 8x8 board."""


class InvalidFENError(ChessTutorError):
    """Supplied string cannot be read as a FEN record."""


class MalformedPuzzleRecordError(ChessTutorError):
    """A puzzle record has too few fields or a field that cannot be parsed."""


class PuzzleStateError(ChessTutorError):
    """Operation requested on a puzzle that is not in a state to perform it (ex. peeking after it was solved)."""


# --- PERSISTENCE / SERVICE ---
class RepositoryError(ChessTutorError):
    """Requested data could not be found or stored."""


class SessionError(ChessTutorError):
    """No current game or puzzle to perform the request on."""


class InvalidRequestError(ChessTutorError):
    """Request data did not pass validation."""
