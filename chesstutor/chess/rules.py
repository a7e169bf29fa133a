"""
Movement rules per piece type.

Key idea: Use strategy pattern to define the legality check for each piece type.

Every predicate assumes the caller already made sure that:
* the origin holds a piece of the side to move,
* origin and target differ,
* the target does not hold a piece of the side to move.

Known gaps (kept on purpose, see DESIGN.md): no check detection, no castling, no en passant, no promotion.
Pawn pushes do not require an empty destination.
"""

from typing import Callable, Protocol

from chesstutor.chess.pieces import EMPTY, kind_of
from chesstutor.chess.square import Square
from chesstutor.core.shared_types import PieceKind, Side


class BoardReader(Protocol):
    """Just the part of the board the rules need"""

    def get(self, square: Square) -> int: ...


Vector = tuple[int, int]

KING_DELTAS: list[Vector] = [
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
]

KNIGHT_DELTAS: list[Vector] = [
    (-2, 1),
    (-2, -1),
    (-1, 2),
    (-1, -2),
    (1, -2),
    (1, 2),
    (2, 1),
    (2, -1),
]

# Rows the pawns start on. White moves up the board (towards row 0), black moves down.
PAWN_HOME_ROW: dict[Side, int] = {Side.WHITE: 6, Side.BLACK: 1}


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _delta(origin: Square, target: Square) -> Vector:
    return target.row - origin.row, target.col - origin.col


def squares_between(origin: Square, target: Square) -> list[Square]:
    """
    Squares strictly in between origin and target along a straight or diagonal line.

    Both end points are excluded.
    """
    drow, dcol = _delta(origin, target)
    if not (drow == 0 or dcol == 0 or abs(drow) == abs(dcol)):
        raise ValueError(
            f"squares_between requires both squares to lie on a common line. \n from: {origin}\n to:{target}"
        )

    step_row, step_col = _sign(drow), _sign(dcol)
    squares_found: list[Square] = []
    row, col = origin.row + step_row, origin.col + step_col
    while (row, col) != (target.row, target.col):
        squares_found.append(Square(row, col))
        row += step_row
        col += step_col
    return squares_found


def is_path_obstructed(origin: Square, target: Square, board: BoardReader) -> bool:
    """Sliding pieces cannot jump: any piece in between blocks the move."""
    return any(board.get(square) != EMPTY for square in squares_between(origin, target))


# --- MOVEMENT RULES ---
def is_legal_king_move(origin: Square, target: Square, board: BoardReader) -> bool:
    """The king can move by a single square at the time. No castling."""
    return _delta(origin, target) in KING_DELTAS


def is_legal_knight_move(origin: Square, target: Square, board: BoardReader) -> bool:
    """Knights always jump such that |delta_row| + |delta_col| = 3"""
    return _delta(origin, target) in KNIGHT_DELTAS


def is_legal_bishop_move(origin: Square, target: Square, board: BoardReader) -> bool:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    drow, dcol = _delta(origin, target)
    if drow == 0 or abs(drow) != abs(dcol):
        return False
    return not is_path_obstructed(origin, target, board)


def is_legal_rook_move(origin: Square, target: Square, board: BoardReader) -> bool:
    """Rooks move either horizontally or vertically"""
    drow, dcol = _delta(origin, target)
    if (drow == 0) == (dcol == 0):
        return False
    return not is_path_obstructed(origin, target, board)


def is_legal_queen_move(origin: Square, target: Square, board: BoardReader) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return is_legal_bishop_move(origin, target, board) or is_legal_rook_move(
        origin, target, board
    )


def is_legal_pawn_move(origin: Square, target: Square, board: BoardReader) -> bool:
    """
    A pawn:
    - moves by a single square forward.
    - It can move by two in their first move (so when on their starting row), if it does not jump over a piece
    - takes diagonally

    The side is read from the sign of the piece on the origin square.
    NOTE: The diagonal step is also allowed onto an empty square and the forward steps do not need an empty destination.
    """
    direction = _sign(board.get(origin))
    drow, dcol = _delta(origin, target)
    # white (+1) moves towards row 0, so a forward step has drow * direction < 0
    forward = -drow * direction

    # Piece must move 'up' (from its own point of view)
    if forward < 0:
        return False

    # pawns take diagonally
    if abs(dcol) == 1 and forward == 1:
        return board.get(target) * direction <= 0

    if dcol != 0:
        return False

    # first move: jump by two
    if forward == 2:
        if origin.row != PAWN_HOME_ROW[Side(direction)]:
            return False
        return not is_path_obstructed(origin, target, board)

    return forward == 1


# -- STRATEGY PATTERN: MOVEMENT RULES ---
LegalityFn = Callable[[Square, Square, BoardReader], bool]
LEGALITY_RULES: dict[PieceKind, LegalityFn] = {
    PieceKind.PAWN: is_legal_pawn_move,
    PieceKind.ROOK: is_legal_rook_move,
    PieceKind.KNIGHT: is_legal_knight_move,
    PieceKind.BISHOP: is_legal_bishop_move,
    PieceKind.QUEEN: is_legal_queen_move,
    PieceKind.KING: is_legal_king_move,
}


def is_legal_move(origin: Square, target: Square, board: BoardReader) -> bool:
    """Dispatch to the rule of the piece standing on the origin square. An empty origin never moves."""
    kind = kind_of(board.get(origin))
    if kind is None:
        return False
    return LEGALITY_RULES[kind](origin, target, board)
