"""
Type definitions used across layers
"""

from enum import IntEnum, StrEnum


class Side(IntEnum):
    """The value doubles as the sign of the piece codes of that side."""

    WHITE = 1
    BLACK = -1

    @property
    def opponent(self) -> "Side":
        return Side.BLACK if self == Side.WHITE else Side.WHITE


class PieceKind(IntEnum):
    """Magnitude of a piece code. The order of these values is fixed by the board encoding."""

    PAWN = 1
    ROOK = 2
    KNIGHT = 3
    BISHOP = 4
    QUEEN = 5
    KING = 6


class GuessResult(StrEnum):
    INCORRECT = "incorrect"
    CORRECT = "correct"
    SOLVED = "solved"


class RejectReason(StrEnum):
    NOT_YOUR_PIECE = "not your piece"
    FRIENDLY_FIRE = "target holds your own piece"
    ILLEGAL_MOVE = "illegal move for this piece"
    PUZZLE_SOLVED = "puzzle already solved"
    WRONG_MOVE = "not the expected move"
    REPLY_PENDING = "waiting for the opponent's reply"
