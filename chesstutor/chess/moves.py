"""
Moves and the outcome of trying to make one.

Every call that may change the board returns one of the outcome types below instead of raising:
a move that breaks the rules is a normal, expected result of a user clicking around.
"""

import logging
from dataclasses import dataclass
from typing import Self

from chesstutor.chess.pieces import EMPTY
from chesstutor.chess.square import Square
from chesstutor.core.exceptions import InvalidSquareError
from chesstutor.core.shared_types import PieceKind, RejectReason

_LOGGER = logging.getLogger(__name__)

# the promotion suffix of UCI moves, ex. "e7e8q"
PROMOTION_PIECES = "qrbn"


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_square: Square
    to_square: Square

    @classmethod
    def from_coordinates(cls, coordinates: str) -> Self:
        """
        Coordinate notation: <from_square><to_square>

        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "g8h7": move the piece on g8 to h7

        A promotion suffix ("e7e8q") is accepted and dropped: pawns are never promoted.
        """
        if len(coordinates) == 5 and coordinates[4].lower() in PROMOTION_PIECES:
            _LOGGER.debug("Ignoring the promotion in %r", coordinates)
            coordinates = coordinates[:4]
        if len(coordinates) != 4:
            raise InvalidSquareError(
                f"Move: {coordinates!r} must consist of two squares, ex. 'e2e4'."
            )
        from_sq = Square.from_algebraic(coordinates[:2])
        to_sq = Square.from_algebraic(coordinates[2:])
        return cls(from_sq, to_sq)

    def to_coordinates(self) -> str:
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}"

    def __str__(self) -> str:
        return f"{self.from_square} -> {self.to_square}"


def parse_move_list(moves: str) -> list[Move]:
    """Space separated list of moves, ex. 'e2e4 e7e5 g1f3'"""
    return [Move.from_coordinates(token) for token in moves.split(" ") if token]


# --- OUTCOMES ---
@dataclass(frozen=True)
class NoOp:
    """Nothing to do (ex. dropping a piece back onto its own square)."""


@dataclass(frozen=True)
class Moved:
    """The board changed. `captured` is the piece code that stood on the destination square."""

    captured: int = EMPTY
    king_taken: bool = False

    @property
    def is_capture(self) -> bool:
        return self.captured != EMPTY

    @classmethod
    def from_captured(cls, captured: int) -> Self:
        return cls(captured=captured, king_taken=abs(captured) == PieceKind.KING)


@dataclass(frozen=True)
class Rejected:
    """The move was not made. The turn is not consumed."""

    reason: RejectReason


MoveOutcome = NoOp | Moved | Rejected
